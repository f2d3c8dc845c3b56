# glslcombine/settings.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PreprocessorSettings:
    """Policy knobs for combined-shader preprocessing."""

    # Emitted when no `#version` directive is found.
    default_version: int = 330
    detect_include_cycles: bool = True
    encoding: str = "utf-8"


DEFAULT_SETTINGS = PreprocessorSettings()
