# glslcombine/preprocessor/combined.py
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from glslcombine.preprocessor.context import PreprocessContext
from glslcombine.preprocessor.scanner import DirectiveScanner
from glslcombine.preprocessor.variants import VariantAssembler, parse_macro
from glslcombine.settings import DEFAULT_SETTINGS, PreprocessorSettings
from glslcombine.types import IncludeFrame, PipelineStage, PreprocessedShaders

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def preprocess_combined(
    source: str,
    path: PathLike,
    macros: Sequence[str] = (),
    include_paths: Sequence[PathLike] = (),
    *,
    settings: Optional[PreprocessorSettings] = None,
) -> Tuple[PipelineStage, PreprocessedShaders]:
    """
    Preprocess a combined shader source into per-stage variants.

    Custom pragmas (`stages`, `input_layout`, `primitive_topology`) are
    extracted, `#include` directives are expanded recursively and one
    variant is produced per enabled stage, each defining its stage token
    (`_VERTEX_`, `_FRAGMENT_`, ...).

    Args:
        source: Text of the root file.
        path: Path of the root file; includes resolve against its directory.
        macros: `NAME` or `NAME=VALUE` definitions added to every variant.
        include_paths: Directories searched when an include is not found
            next to the including file.
        settings: Preprocessor policy, defaults to `PreprocessorSettings()`.

    Returns:
        The enabled stage mask and the preprocessed variants. Non-fatal
        problems are in `PreprocessedShaders.diagnostics`.

    Raises:
        MalformedMacroError: If a macro is not `NAME` or `NAME=VALUE`.
    """
    settings = settings or DEFAULT_SETTINGS
    macros = tuple(macros)
    # Fail before touching the filesystem.
    for m in macros:
        parse_macro(m)

    root = Path(path)
    ctx = PreprocessContext(
        settings=settings,
        include_paths=tuple(Path(p) for p in include_paths),
    )

    root_id = ctx.source_map.push(root)
    DirectiveScanner(ctx).scan(source, IncludeFrame(path=root), root_id)

    logger.debug("PP: enabled stages: %s", ctx.stages)
    logger.debug("PP: number of errors: %d", ctx.diagnostics.error_count)

    version = ctx.version
    if version is None:
        version = settings.default_version
        ctx.warning(
            "No #version directive found while preprocessing; "
            f"defaulting to version {version}",
            root,
        )

    logger.debug("PP: GLSL version = %d", version)
    logger.debug("PP: Source map:")
    for entry in ctx.source_map:
        logger.debug(" %d -> %s", entry.index, entry.path)

    body = ctx.combined_body()
    variants = VariantAssembler(version, macros).assemble(ctx.stages, body)

    return ctx.stages, PreprocessedShaders(
        **variants,
        input_layout=ctx.input_layout,
        primitive_topology=ctx.primitive_topology,
        source_map=ctx.source_map,
        diagnostics=ctx.diagnostics,
    )
