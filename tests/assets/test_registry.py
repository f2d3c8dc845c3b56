from glslcombine.assets.handle import AssetId, asset_id_for
from glslcombine.assets.registry import AssetRegistry


def test_registry_store_and_get():
    registry = AssetRegistry()
    asset_id = AssetId(123)
    data = {"some": "data"}

    registry.store(asset_id, data)

    assert asset_id in registry
    assert registry.get(asset_id) == data
    assert registry.failure(asset_id) is None


def test_registry_missing_item():
    registry = AssetRegistry()
    asset_id = AssetId(999)

    assert asset_id not in registry
    assert registry.get(asset_id) is None


def test_registry_failure_replaces_data():
    registry = AssetRegistry()
    asset_id = AssetId(7)
    registry.store(asset_id, "old")

    error = ValueError("boom")
    registry.store_failure(asset_id, error)

    assert asset_id not in registry
    assert registry.failure(asset_id) is error

    registry.store(asset_id, "new")
    assert registry.failure(asset_id) is None
    assert registry.get(asset_id) == "new"


def test_registry_clear():
    registry = AssetRegistry()
    registry.store(AssetId(1), "A")
    registry.store_failure(AssetId(2), OSError("B"))

    registry.clear()

    assert AssetId(1) not in registry
    assert registry.failure(AssetId(2)) is None


def test_asset_ids_are_stable():
    assert asset_id_for("shaders/a.glsl") == asset_id_for("shaders/a.glsl")
    assert asset_id_for("shaders/a.glsl") != asset_id_for("shaders/b.glsl")
