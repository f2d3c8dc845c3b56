# glslcombine/assets/__init__.py
from glslcombine.assets.handle import AssetHandle, AssetId
from glslcombine.assets.registry import AssetRegistry
from glslcombine.assets.server import AssetServer
from glslcombine.assets.types import CombinedShader, ShaderSource

__all__ = [
    "AssetServer",
    "AssetRegistry",
    "AssetHandle",
    "AssetId",
    "CombinedShader",
    "ShaderSource",
]
