# glslcombine/graphics/program_types.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import moderngl

from glslcombine.preprocessor.source_map import SourceMap
from glslcombine.types import PipelineStage, PrimitiveTopology, VertexInputLayout


@dataclass(frozen=True)
class ProgramHandle:
    """
    Wraps a compiled ModernGL program/compute shader together with the
    pipeline metadata declared by its combined source.
    """

    program: moderngl.Program | moderngl.ComputeShader
    label: str
    stages: PipelineStage
    input_layout: Optional[VertexInputLayout] = None
    primitive_topology: Optional[PrimitiveTopology] = None
    source_map: Optional[SourceMap] = None
