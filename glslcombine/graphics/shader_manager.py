# glslcombine/graphics/shader_manager.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import moderngl

from glslcombine.graphics.ids import ShaderId
from glslcombine.graphics.program_types import ProgramHandle
from glslcombine.preprocessor import preprocess_combined
from glslcombine.preprocessor.source_map import SourceMap
from glslcombine.settings import DEFAULT_SETTINGS, PreprocessorSettings
from glslcombine.types import PipelineStage, PreprocessedShaders

logger = logging.getLogger(__name__)

VariantKey = Tuple[ShaderId, Tuple[str, ...]]


class ShaderPreprocessError(ValueError):
    """A combined source produced preprocessing errors in strict mode."""


class ShaderCompileError(ValueError):
    """The driver rejected a variant; the log refers to original files."""


def _make_variant_key(req: ShaderRequest) -> VariantKey:
    defines = tuple(sorted(d.as_macro() for d in req.defines))
    return (req.shader_id, defines)


def _mtime(path: Optional[Path]) -> Optional[float]:
    if path is None:
        return None
    try:
        return os.stat(path).st_mtime
    except OSError:
        return None


@dataclass(frozen=True, slots=True)
class ShaderDefine:
    """Single preprocessor define used to build program variants."""

    key: str
    value: Optional[str] = None

    def as_macro(self) -> str:
        if self.value is None:
            return self.key
        return f"{self.key}={self.value}"


@dataclass(frozen=True, slots=True)
class ShaderRequest:
    """Request to load/compile the program described by a combined source."""

    shader_id: ShaderId
    path: str
    defines: Sequence[ShaderDefine] = ()
    label: str = ""


@dataclass(slots=True)
class _CacheEntry:
    request: ShaderRequest
    handle: ProgramHandle
    mtimes: Dict[Path, Optional[float]]


class ShaderManager:
    """
    Central combined-shader loader/compiler/cache.

    Responsibilities:
      - preprocess combined sources (includes, stage variants, metadata)
      - apply defines
      - compile/link (or compile compute)
      - cache program variants
      - hot reload when any file of a program changes
    """

    def __init__(
        self,
        gl: moderngl.Context,
        *,
        include_paths: Sequence[str] = (),
        settings: Optional[PreprocessorSettings] = None,
        strict: bool = False,
    ) -> None:
        self._gl = gl
        self._include_paths = tuple(include_paths)
        self._settings = settings or DEFAULT_SETTINGS
        self._strict = strict

        self._shader_cache: Dict[VariantKey, _CacheEntry] = {}

    def preprocess(
        self, req: ShaderRequest
    ) -> Tuple[PipelineStage, PreprocessedShaders]:
        """Read the request's combined source and split it into variants."""
        with open(req.path, "r", encoding=self._settings.encoding, newline="") as f:
            source = f.read()

        stages, shaders = preprocess_combined(
            source,
            req.path,
            [d.as_macro() for d in req.defines],
            self._include_paths,
            settings=self._settings,
        )

        diagnostics = shaders.diagnostics
        if self._strict and diagnostics is not None and diagnostics.has_errors:
            details = "\n".join(str(d) for d in diagnostics.errors)
            raise ShaderPreprocessError(
                f"Shader {req.shader_id} has {diagnostics.error_count} "
                f"preprocessing error(s):\n{details}"
            )
        return stages, shaders

    def get(self, req: ShaderRequest) -> ProgramHandle:
        """Return a compiled program for the request, compiling and caching as needed."""
        key = _make_variant_key(req)
        cached = self._shader_cache.get(key)
        if cached is not None:
            return cached.handle

        entry = self._build(req)
        self._shader_cache[key] = entry
        return entry.handle

    def _build(self, req: ShaderRequest) -> _CacheEntry:
        stages, shaders = self.preprocess(req)
        source_map = shaders.source_map or SourceMap()

        try:
            if PipelineStage.COMPUTE in stages:
                program = self._gl.compute_shader(shaders.compute)
            else:
                if shaders.vertex is None or shaders.fragment is None:
                    raise ValueError(
                        f"Shader {req.shader_id} is missing vertex or fragment stage."
                    )
                program = self._gl.program(
                    vertex_shader=shaders.vertex,
                    fragment_shader=shaders.fragment,
                    geometry_shader=shaders.geometry,
                    tess_control_shader=shaders.tess_control,
                    tess_evaluation_shader=shaders.tess_eval,
                )
        except moderngl.Error as e:
            raise ShaderCompileError(
                f"Shader {req.shader_id} failed to compile:\n"
                f"{source_map.annotate_log(str(e))}"
            ) from e

        handle = ProgramHandle(
            program=program,
            label=req.label or str(req.shader_id),
            stages=stages,
            input_layout=shaders.input_layout,
            primitive_topology=shaders.primitive_topology,
            source_map=source_map,
        )
        mtimes = {p: _mtime(p) for p in source_map.paths() if p is not None}
        return _CacheEntry(request=req, handle=handle, mtimes=mtimes)

    def invalidate(self, shader_id: ShaderId) -> None:
        """Drop cached programs for a shader id; next get() recompiles."""
        to_delete = [k for k in self._shader_cache if k[0] == shader_id]
        for k in to_delete:
            self._release(self._shader_cache.pop(k).handle)

    def reload_changed(self) -> List[ShaderId]:
        """
        Recompile programs whose root or included files changed on disk.

        A program that fails to rebuild keeps its previous version. Returns
        shader ids that were reloaded successfully.
        """
        reloaded: List[ShaderId] = []
        for key, entry in list(self._shader_cache.items()):
            if all(_mtime(p) == t for p, t in entry.mtimes.items()):
                continue

            try:
                fresh = self._build(entry.request)
            except (OSError, ValueError) as e:
                logger.error("Reloading shader %s failed: %s", key[0], e)
                continue

            self._release(entry.handle)
            self._shader_cache[key] = fresh
            if key[0] not in reloaded:
                reloaded.append(key[0])
        return reloaded

    def release(self) -> None:
        for entry in self._shader_cache.values():
            self._release(entry.handle)
        self._shader_cache.clear()

    @staticmethod
    def _release(handle: ProgramHandle) -> None:
        try:
            handle.program.release()
        except moderngl.Error as e:
            logger.warning("Releasing program %s failed: %s", handle.label, e)
