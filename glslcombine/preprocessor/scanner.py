# glslcombine/preprocessor/scanner.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Optional

from glslcombine.preprocessor.context import PreprocessContext
from glslcombine.preprocessor.includes import IncludeExpander
from glslcombine.preprocessor.patterns import (
    ATTRIBUTE_FORMATS,
    INCLUDE_RE,
    INPUT_LAYOUT_PRAGMA_RE,
    MAX_UINT,
    MAX_VERSION,
    PRAGMA_RE,
    PRIMITIVE_TOPOLOGY_PRAGMA_RE,
    STAGE_TOKENS,
    STAGES_PRAGMA_RE,
    TOPOLOGY_TOKENS,
    UINT_RE,
    VERSION_RE,
)
from glslcombine.types import IncludeFrame, VertexAttribute

logger = logging.getLogger(__name__)


def logical_lines(source: str) -> Iterator[str]:
    """
    Split on LF, dropping a CR before it.

    The final line does not need a terminator; a trailing terminator does
    not produce an extra empty line.
    """
    lines = source.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    for line in lines:
        yield line[:-1] if line.endswith("\r") else line


def _parse_uint(token: Optional[str]) -> Optional[int]:
    if token is None or not UINT_RE.fullmatch(token):
        return None
    value = int(token)
    return value if value <= MAX_UINT else None


class DirectiveScanner:
    """
    Line-at-a-time recognizer for the combined-source directives.

    Directive lines (`#include`, `#version`, `#pragma`) are consumed and
    never copied into the body; every other line is copied verbatim. After
    a consumed directive the next copied line is preceded by a
    `#line <line> <file id>` directive so driver diagnostics keep pointing
    at the original lines.
    """

    def __init__(self, ctx: PreprocessContext) -> None:
        self.ctx = ctx
        self.includes = IncludeExpander(ctx, self)

    def scan(
        self,
        source: str,
        frame: IncludeFrame,
        file_id: int,
        *,
        line_origin: bool = False,
    ) -> None:
        """
        Scan one file's text into the shared context.

        `line_origin` requests a `#line 1 <file id>` before the first copied
        line; included files use it so their code is attributed to them.
        """
        ctx = self.ctx
        pending_line_directive = line_origin

        for cur_line, line in enumerate(logical_lines(source), start=1):
            m = INCLUDE_RE.match(line)
            if m:
                self.includes.expand(m.group(1), frame, cur_line)
                pending_line_directive = True
                continue

            m = VERSION_RE.match(line)
            if m:
                self._version(m.group(1), line, frame.path, cur_line)
                pending_line_directive = True
                continue

            m = PRAGMA_RE.match(line)
            if m:
                self._pragma(m.group(1), frame.path, cur_line)
                pending_line_directive = True
                continue

            if pending_line_directive:
                ctx.emit(f"#line {cur_line} {file_id}")
                pending_line_directive = False
            ctx.emit(line)

    def _version(self, digits: str, line: str, path: Path, cur_line: int) -> None:
        ctx = self.ctx
        if not digits or int(digits) > MAX_VERSION:
            ctx.error(f"Malformed version directive: {line!r}", path, cur_line)
            return

        version = int(digits)
        if ctx.version is None:
            ctx.version = version
        elif ctx.version != version:
            ctx.warning(
                "version differs from previously specified version "
                f"({version}, was {ctx.version})",
                path,
                cur_line,
            )
            ctx.version = version

    def _pragma(self, payload: str, path: Path, cur_line: int) -> None:
        logger.debug("%s(%d): pragma %r", path, cur_line, payload)

        m = STAGES_PRAGMA_RE.match(payload)
        if m:
            self._stages(m.group(1), path, cur_line)
            return

        m = INPUT_LAYOUT_PRAGMA_RE.match(payload)
        if m:
            self._input_layout(m.group(1), path, cur_line)
            return

        m = PRIMITIVE_TOPOLOGY_PRAGMA_RE.match(payload)
        if m:
            self._primitive_topology(m.group(1), path, cur_line)
            return

        self.ctx.error(
            f"Malformed `#pragma` directive: {payload!r}", path, cur_line
        )

    def _stages(self, stages: str, path: Path, cur_line: int) -> None:
        ctx = self.ctx
        for token in (s.strip() for s in stages.split(",")):
            stage = STAGE_TOKENS.get(token)
            if stage is None:
                ctx.error(
                    "Unknown shader stage in `#pragma stages` directive: "
                    f"{token!r}. "
                    "Expected `vertex`, `fragment`, `tess_control`, `tess_eval`, "
                    "`geometry` or `compute`",
                    path,
                    cur_line,
                )
                continue
            ctx.stages |= stage

    def _input_layout(self, entries: str, path: Path, cur_line: int) -> None:
        ctx = self.ctx
        if ctx.input_layout is not None:
            ctx.error("Duplicate input_layout directive", path, cur_line)
            return

        tokens = [s.strip() for s in entries.split(",")]
        layout: List[VertexAttribute] = []

        # (format, slot, relative offset) triples
        for i in range(0, len(tokens), 3):
            fmt = tokens[i]
            slot = _parse_uint(tokens[i + 1] if i + 1 < len(tokens) else None)
            offset = _parse_uint(tokens[i + 2] if i + 2 < len(tokens) else None)

            if slot is None or offset is None:
                ctx.error("Error parsing input_layout directive", path, cur_line)
                return

            attrib_format = ATTRIBUTE_FORMATS.get(fmt)
            if attrib_format is None:
                ctx.error(
                    "Error parsing input_layout directive "
                    f"(unsupported format {fmt!r})",
                    path,
                    cur_line,
                )
                return

            component_type, count, normalized = attrib_format
            layout.append(
                VertexAttribute(
                    component_type=component_type,
                    component_count=count,
                    normalized=normalized,
                    slot=slot,
                    relative_offset=offset,
                )
            )

        ctx.input_layout = tuple(layout)

    def _primitive_topology(self, token: str, path: Path, cur_line: int) -> None:
        ctx = self.ctx
        if ctx.primitive_topology is not None:
            ctx.error("Duplicate primitive_topology directive", path, cur_line)
            return

        topology = TOPOLOGY_TOKENS.get(token)
        if topology is None:
            ctx.error(f"Unsupported primitive topology: {token!r}", path, cur_line)
            return
        ctx.primitive_topology = topology
