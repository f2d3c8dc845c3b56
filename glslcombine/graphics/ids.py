# glslcombine/graphics/ids.py
from typing import NewType

ShaderId = NewType("ShaderId", str)
