# glslcombine/preprocessor/source_map.py
from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator, List, Optional

from glslcombine.types import SourceMapEntry

# `0(12) : error C0000: ...`
_PAREN_LOCATION_RE = re.compile(r"^(\d+)\((\d+)\)", re.MULTILINE)
# `ERROR: 0:12: ...` and `0:12(5): error: ...`
_COLON_LOCATION_RE = re.compile(
    r"^((?:ERROR|WARNING):\s*)?(\d+):(\d+)", re.MULTILINE
)


class SourceMap:
    """
    Files encountered while expanding a combined source.

    The position of an entry is the file id written into `#line N F`
    directives; entry 0 is always the root file.
    """

    def __init__(self) -> None:
        self._entries: List[SourceMapEntry] = []

    def push(self, path: Optional[Path]) -> int:
        """Append a file and return its id."""
        index = len(self._entries)
        self._entries.append(SourceMapEntry(index=index, path=path))
        return index

    def path_of(self, file_id: int) -> Optional[Path]:
        if 0 <= file_id < len(self._entries):
            return self._entries[file_id].path
        return None

    def paths(self) -> List[Optional[Path]]:
        return [e.path for e in self._entries]

    def annotate_log(self, log: str) -> str:
        """Replace driver file ids in a compiler info log with file paths."""

        def paren(m: re.Match) -> str:
            path = self.path_of(int(m.group(1)))
            if path is None:
                return m.group(0)
            return f"{path}({m.group(2)})"

        def colon(m: re.Match) -> str:
            path = self.path_of(int(m.group(2)))
            if path is None:
                return m.group(0)
            return f"{m.group(1) or ''}{path}:{m.group(3)}"

        return _COLON_LOCATION_RE.sub(colon, _PAREN_LOCATION_RE.sub(paren, log))

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> SourceMapEntry:
        return self._entries[index]

    def __iter__(self) -> Iterator[SourceMapEntry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"SourceMap({self.paths()!r})"
