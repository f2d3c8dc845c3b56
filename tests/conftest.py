from pathlib import Path
from typing import Callable, List, Optional

import moderngl
import pytest


class FakeProgram:
    """Stands in for a moderngl program; records the sources it was built from."""

    def __init__(self, **sources: Optional[str]) -> None:
        self.sources = sources
        self.released = False

    def release(self) -> None:
        self.released = True


class FakeContext:
    """Minimal moderngl.Context replacement; no driver needed."""

    def __init__(self, compile_error: Optional[str] = None) -> None:
        self.compile_error = compile_error
        self.programs: List[FakeProgram] = []

    def program(self, **sources: Optional[str]) -> FakeProgram:
        if self.compile_error is not None:
            raise moderngl.Error(self.compile_error)
        prog = FakeProgram(**sources)
        self.programs.append(prog)
        return prog

    def compute_shader(self, source: str) -> FakeProgram:
        if self.compile_error is not None:
            raise moderngl.Error(self.compile_error)
        prog = FakeProgram(compute_shader=source)
        self.programs.append(prog)
        return prog


@pytest.fixture
def write_shader(tmp_path: Path) -> Callable[[str, str], Path]:
    """Returns a helper writing a shader file under tmp_path."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(text.encode("utf-8"))
        return path

    return _write


@pytest.fixture
def gl() -> FakeContext:
    return FakeContext()
