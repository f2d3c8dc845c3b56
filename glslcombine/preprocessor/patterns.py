# glslcombine/preprocessor/patterns.py
"""Directive grammars and the lookup tables behind them."""

import re
from typing import Dict, Tuple

from glslcombine.types import ComponentType, PipelineStage, PrimitiveTopology

INCLUDE_RE = re.compile(r'^\s*#include\s+"(.*)"\s*$')
# Empty digits still match so that `#version` with no number is reported.
VERSION_RE = re.compile(r"^\s*#version\s+([0-9]*)\s*$")
PRAGMA_RE = re.compile(r"^\s*#pragma\s+(.*?)\s*$")

STAGES_PRAGMA_RE = re.compile(r"^stages\s*\(\s*(\w+(?:\s*,\s*\w+)*)\s*\)\s*$")
INPUT_LAYOUT_PRAGMA_RE = re.compile(
    r"^input_layout\s*\(\s*(\w+(?:\s*,\s*\w+)*)\s*\)\s*$"
)
PRIMITIVE_TOPOLOGY_PRAGMA_RE = re.compile(
    r"^primitive_topology\s*\(\s*(\w+)\s*\)\s*$"
)

MACRO_DEF_RE = re.compile(r"([A-Za-z_][A-Za-z0-9_]*)(?:=(\w*))?", re.ASCII)
UINT_RE = re.compile(r"[0-9]+", re.ASCII)

# Largest values accepted for `#version` (i32) and layout slots/offsets (u32).
MAX_VERSION = 2**31 - 1
MAX_UINT = 2**32 - 1

STAGE_TOKENS: Dict[str, PipelineStage] = {
    "vertex": PipelineStage.VERTEX,
    "fragment": PipelineStage.FRAGMENT,
    "geometry": PipelineStage.GEOMETRY,
    "tess_control": PipelineStage.TESS_CONTROL,
    "tess_eval": PipelineStage.TESS_EVAL,
    "compute": PipelineStage.COMPUTE,
}

STAGE_DEFINES: Dict[PipelineStage, str] = {
    PipelineStage.VERTEX: "_VERTEX_",
    PipelineStage.FRAGMENT: "_FRAGMENT_",
    PipelineStage.GEOMETRY: "_GEOMETRY_",
    PipelineStage.TESS_CONTROL: "_TESS_CONTROL_",
    PipelineStage.TESS_EVAL: "_TESS_EVAL_",
    PipelineStage.COMPUTE: "_COMPUTE_",
}

# token -> (component type, component count, normalized)
ATTRIBUTE_FORMATS: Dict[str, Tuple[ComponentType, int, bool]] = {
    "rgba32f": (ComponentType.FLOAT, 4, False),
    "rgb32f": (ComponentType.FLOAT, 3, False),
    "rg32f": (ComponentType.FLOAT, 2, False),
    "r32f": (ComponentType.FLOAT, 1, False),
    "rgba16_snorm": (ComponentType.SHORT, 4, True),
    "rgb16_snorm": (ComponentType.SHORT, 3, True),
    "rg16_snorm": (ComponentType.SHORT, 2, True),
    "r16_snorm": (ComponentType.SHORT, 1, True),
    "rgba8_unorm": (ComponentType.UNSIGNED_BYTE, 4, True),
    "rgba8_snorm": (ComponentType.BYTE, 4, True),
}

TOPOLOGY_TOKENS: Dict[str, PrimitiveTopology] = {
    "triangle": PrimitiveTopology.TRIANGLES,
    "line": PrimitiveTopology.LINES,
}
