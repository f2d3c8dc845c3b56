# glslcombine/preprocessor/variants.py
from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from glslcombine.preprocessor.errors import MalformedMacroError
from glslcombine.preprocessor.patterns import MACRO_DEF_RE, STAGE_DEFINES
from glslcombine.types import STAGE_FIELDS, PipelineStage


def parse_macro(macro: str) -> Tuple[str, Optional[str]]:
    """
    Split `NAME` or `NAME=VALUE` into (name, value).

    Raises:
        MalformedMacroError: If the macro has neither shape.
    """
    m = MACRO_DEF_RE.fullmatch(macro)
    if m is None:
        raise MalformedMacroError(macro)
    return m.group(1), m.group(2)


def define_line(name: str, value: Optional[str]) -> str:
    if value is None:
        return f"#define {name}\n"
    return f"#define {name} {value}\n"


class VariantAssembler:
    """Builds one output text per enabled stage from a preprocessed body."""

    def __init__(self, version: int, macros: Sequence[str] = ()) -> None:
        self.version = version
        self.definitions = [parse_macro(m) for m in macros]

        parts: List[str] = [f"#version {version}\n"]
        parts.extend(define_line(name, value) for name, value in self.definitions)
        self.prologue = "".join(parts)

    def variant(self, stage: PipelineStage, body: str) -> str:
        return f"{self.prologue}#define {STAGE_DEFINES[stage]}\n#line 0 0\n{body}"

    def assemble(self, stages: PipelineStage, body: str) -> Dict[str, Optional[str]]:
        """Return the six stage slots keyed by field name; absent stages are None."""
        return {
            field_name: self.variant(stage, body) if stage in stages else None
            for stage, field_name in STAGE_FIELDS.items()
        }
