# glslcombine/graphics/vertex_layout.py
from __future__ import annotations

from typing import Dict

import numpy as np

from glslcombine.types import ComponentType, VertexAttribute, VertexInputLayout

COMPONENT_DTYPES: Dict[ComponentType, np.dtype] = {
    ComponentType.FLOAT: np.dtype(np.float32),
    ComponentType.SHORT: np.dtype(np.int16),
    ComponentType.UNSIGNED_BYTE: np.dtype(np.uint8),
    ComponentType.BYTE: np.dtype(np.int8),
}


def attribute_size(attr: VertexAttribute) -> int:
    """Size in bytes of one attribute value."""
    return COMPONENT_DTYPES[attr.component_type].itemsize * attr.component_count


def slot_strides(layout: VertexInputLayout) -> Dict[int, int]:
    """
    Minimal per-vertex stride of every buffer slot used by a layout.

    The stride of a slot is the end of its furthest attribute.
    """
    strides: Dict[int, int] = {}
    for attr in layout:
        end = attr.relative_offset + attribute_size(attr)
        strides[attr.slot] = max(strides.get(attr.slot, 0), end)
    return strides
