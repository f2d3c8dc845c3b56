# glslcombine/assets/registry.py
from typing import Any, Dict, Optional

from glslcombine.assets.handle import AssetId


class AssetRegistry:
    """
    Loaded shader assets and load failures, mapped by AssetId.

    Only touched from the thread that drains the server.
    """

    def __init__(self) -> None:
        self._storage: Dict[AssetId, Any] = {}
        self._failures: Dict[AssetId, BaseException] = {}

    def store(self, asset_id: AssetId, data: Any) -> None:
        self._failures.pop(asset_id, None)
        self._storage[asset_id] = data

    def store_failure(self, asset_id: AssetId, exc: BaseException) -> None:
        self._storage.pop(asset_id, None)
        self._failures[asset_id] = exc

    def get(self, asset_id: AssetId) -> Optional[Any]:
        """Retrieve asset data if available."""
        return self._storage.get(asset_id)

    def failure(self, asset_id: AssetId) -> Optional[BaseException]:
        """The exception that aborted the asset's load, if any."""
        return self._failures.get(asset_id)

    def __contains__(self, asset_id: AssetId) -> bool:
        return asset_id in self._storage

    def clear(self) -> None:
        self._storage.clear()
        self._failures.clear()
