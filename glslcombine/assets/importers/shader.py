# glslcombine/assets/importers/shader.py
from pathlib import Path
from typing import Optional, Sequence

from glslcombine.assets.importers.base import AssetImporter
from glslcombine.assets.types import CombinedShader, ShaderSource
from glslcombine.preprocessor import preprocess_combined
from glslcombine.settings import DEFAULT_SETTINGS, PreprocessorSettings


class ShaderImporter(AssetImporter):
    """Reads a single-stage shader as is."""

    def import_file(self, path: Path) -> ShaderSource:
        with open(path, "r", encoding="utf-8") as f:
            source = f.read()

        return ShaderSource(source=source, path=str(path))


class CombinedShaderImporter(AssetImporter):
    """Reads a combined shader and splits it into per-stage variants."""

    def __init__(
        self,
        macros: Sequence[str] = (),
        include_paths: Sequence[Path] = (),
        settings: Optional[PreprocessorSettings] = None,
    ) -> None:
        self.macros = tuple(macros)
        self.include_paths = tuple(include_paths)
        self.settings = settings or DEFAULT_SETTINGS

    def import_file(self, path: Path) -> CombinedShader:
        with open(path, "r", encoding=self.settings.encoding, newline="") as f:
            source = f.read()

        stages, shaders = preprocess_combined(
            source,
            path,
            self.macros,
            self.include_paths,
            settings=self.settings,
        )
        return CombinedShader(path=str(path), stages=stages, shaders=shaders)
