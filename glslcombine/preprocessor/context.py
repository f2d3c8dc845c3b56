# glslcombine/preprocessor/context.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from glslcombine.preprocessor.source_map import SourceMap
from glslcombine.settings import DEFAULT_SETTINGS, PreprocessorSettings
from glslcombine.types import PipelineStage, PrimitiveTopology, VertexInputLayout

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    severity: Severity
    message: str
    path: Optional[Path] = None
    line: Optional[int] = None

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        if self.line is None:
            return f"{self.path}: {self.message}"
        return f"{self.path}({self.line}): {self.message}"


@dataclass(slots=True)
class Diagnostics:
    """Non-fatal problems found while preprocessing one combined source."""

    items: List[Diagnostic] = field(default_factory=list)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.items if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.items if d.severity is Severity.WARNING]

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0


@dataclass(slots=True)
class PreprocessContext:
    """
    Accumulators shared by every file visited during one preprocessing call.

    Created once per call, mutated by the scanner and the include expander,
    then consumed by the variant assembler.
    """

    settings: PreprocessorSettings = DEFAULT_SETTINGS
    include_paths: tuple[Path, ...] = ()
    body: List[str] = field(default_factory=list)
    version: Optional[int] = None
    stages: PipelineStage = PipelineStage(0)
    input_layout: Optional[VertexInputLayout] = None
    primitive_topology: Optional[PrimitiveTopology] = None
    source_map: SourceMap = field(default_factory=SourceMap)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    def emit(self, text: str) -> None:
        """Append one line to the combined body."""
        self.body.append(text)
        self.body.append("\n")

    def combined_body(self) -> str:
        return "".join(self.body)

    def error(
        self, message: str, path: Optional[Path] = None, line: Optional[int] = None
    ) -> None:
        diag = Diagnostic(Severity.ERROR, message, path, line)
        self.diagnostics.items.append(diag)
        logger.error("%s", diag)

    def warning(
        self, message: str, path: Optional[Path] = None, line: Optional[int] = None
    ) -> None:
        diag = Diagnostic(Severity.WARNING, message, path, line)
        self.diagnostics.items.append(diag)
        logger.warning("%s", diag)
