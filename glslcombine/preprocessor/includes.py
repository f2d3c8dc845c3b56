# glslcombine/preprocessor/includes.py
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from glslcombine.preprocessor.context import PreprocessContext
from glslcombine.types import IncludeFrame

if TYPE_CHECKING:
    from glslcombine.preprocessor.scanner import DirectiveScanner

logger = logging.getLogger(__name__)


def _absolute(path: Path) -> Path:
    return Path(os.path.normpath(path.absolute()))


class IncludeExpander:
    """
    Recursive `#include` expansion.

    Every successfully opened file gets a new source-map entry, even when
    the same path was included before; the included text is scanned into
    the same context as its parent.
    """

    def __init__(self, ctx: PreprocessContext, scanner: DirectiveScanner) -> None:
        self.ctx = ctx
        self.scanner = scanner

    def resolve(self, requested: str, parent: Path) -> Path:
        """
        Resolve an include against the including file's directory.

        Falls back to the configured include directories, in order, when
        the file does not exist next to its parent. The parent-relative
        path is returned if no candidate exists.
        """
        local = _absolute(parent.parent / requested)
        # os.path.isfile is False for names the filesystem rejects
        if os.path.isfile(local):
            return local
        for include_dir in self.ctx.include_paths:
            candidate = _absolute(Path(include_dir) / requested)
            if os.path.isfile(candidate):
                return candidate
        return local

    def expand(self, requested: str, frame: IncludeFrame, cur_line: int) -> None:
        ctx = self.ctx
        inc_path = self.resolve(requested, frame.path)
        logger.debug("include path = %s", inc_path)

        # ValueError covers NUL bytes in the name and UnicodeDecodeError.
        try:
            cyclic = ctx.settings.detect_include_cycles and frame.includes(
                inc_path.resolve()
            )
            if not cyclic:
                with open(
                    inc_path, "r", encoding=ctx.settings.encoding, newline=""
                ) as f:
                    text = f.read()
        except (OSError, ValueError) as e:
            ctx.error(
                f"Could not open include file {requested!r} ({inc_path}): "
                f"{e}{frame.describe()}",
                frame.path,
                cur_line,
            )
            return

        if cyclic:
            ctx.error(
                f"Recursive include of {str(inc_path)!r} skipped{frame.describe()}",
                frame.path,
                cur_line,
            )
            return

        file_id = ctx.source_map.push(inc_path)
        child = IncludeFrame(path=inc_path, parent=frame)
        self.scanner.scan(text, child, file_id, line_origin=True)
