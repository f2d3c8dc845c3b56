# glslcombine/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Flag, IntEnum, auto
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, Optional, Tuple

import moderngl

if TYPE_CHECKING:
    from glslcombine.preprocessor.context import Diagnostics
    from glslcombine.preprocessor.source_map import SourceMap


class PipelineStage(Flag):
    """Pipeline stages a combined source is compiled for."""

    VERTEX = auto()
    FRAGMENT = auto()
    GEOMETRY = auto()
    TESS_CONTROL = auto()
    TESS_EVAL = auto()
    COMPUTE = auto()


class ComponentType(IntEnum):
    """OpenGL component types used by vertex attributes."""

    BYTE = 0x1400
    UNSIGNED_BYTE = 0x1401
    SHORT = 0x1402
    FLOAT = 0x1406


class PrimitiveTopology(IntEnum):
    TRIANGLES = moderngl.TRIANGLES
    LINES = moderngl.LINES


@dataclass(frozen=True, slots=True)
class VertexAttribute:
    component_type: ComponentType
    component_count: int  # 1..4
    normalized: bool
    slot: int
    relative_offset: int


VertexInputLayout = Tuple[VertexAttribute, ...]


@dataclass(frozen=True, slots=True)
class SourceMapEntry:
    """One file seen during expansion; `index` is the id used in `#line`."""

    index: int
    path: Optional[Path]


@dataclass(frozen=True, slots=True)
class IncludeFrame:
    """
    Breadcrumb of the file being scanned and the chain that included it.

    Only lives for the duration of the recursive expansion.
    """

    path: Path
    parent: Optional[IncludeFrame] = None

    def chain(self) -> Iterator[IncludeFrame]:
        frame: Optional[IncludeFrame] = self
        while frame is not None:
            yield frame
            frame = frame.parent

    def includes(self, canonical: Path) -> bool:
        """True if `canonical` is already on the active include chain."""
        return any(f.path.resolve() == canonical for f in self.chain())

    def describe(self) -> str:
        parents = [str(f.path) for f in self.chain()][1:]
        if not parents:
            return ""
        return " (included from " + " <- ".join(parents) + ")"


@dataclass(slots=True)
class PreprocessedShaders:
    """Per-stage variants of a combined source plus extracted pipeline metadata."""

    vertex: Optional[str] = None
    fragment: Optional[str] = None
    geometry: Optional[str] = None
    tess_control: Optional[str] = None
    tess_eval: Optional[str] = None
    compute: Optional[str] = None
    input_layout: Optional[VertexInputLayout] = None
    primitive_topology: Optional[PrimitiveTopology] = None
    source_map: Optional[SourceMap] = None
    diagnostics: Optional[Diagnostics] = field(default=None, repr=False)

    def get(self, stage: PipelineStage) -> Optional[str]:
        return getattr(self, STAGE_FIELDS[stage])

    def variants(self) -> Iterator[Tuple[PipelineStage, str]]:
        """Yield (stage, text) for every stage that has a variant."""
        for stage in STAGE_ORDER:
            text = self.get(stage)
            if text is not None:
                yield stage, text


STAGE_ORDER: Tuple[PipelineStage, ...] = (
    PipelineStage.VERTEX,
    PipelineStage.GEOMETRY,
    PipelineStage.FRAGMENT,
    PipelineStage.TESS_CONTROL,
    PipelineStage.TESS_EVAL,
    PipelineStage.COMPUTE,
)

STAGE_FIELDS = {
    PipelineStage.VERTEX: "vertex",
    PipelineStage.FRAGMENT: "fragment",
    PipelineStage.GEOMETRY: "geometry",
    PipelineStage.TESS_CONTROL: "tess_control",
    PipelineStage.TESS_EVAL: "tess_eval",
    PipelineStage.COMPUTE: "compute",
}
