# glslcombine/assets/types.py
from dataclasses import dataclass

from glslcombine.types import PipelineStage, PreprocessedShaders


@dataclass(frozen=True)
class ShaderSource:
    """Raw shader source code."""

    source: str
    path: str  # For debugging / error reporting.


@dataclass(frozen=True)
class CombinedShader:
    """A combined source split into its per-stage variants."""

    path: str
    stages: PipelineStage
    shaders: PreprocessedShaders

    @property
    def has_errors(self) -> bool:
        diagnostics = self.shaders.diagnostics
        return diagnostics is not None and diagnostics.has_errors
