from glslcombine.preprocessor.combined import preprocess_combined
from glslcombine.preprocessor.context import (
    Diagnostic,
    Diagnostics,
    PreprocessContext,
    Severity,
)
from glslcombine.preprocessor.errors import MalformedMacroError, PreprocessorError
from glslcombine.preprocessor.includes import IncludeExpander
from glslcombine.preprocessor.scanner import DirectiveScanner
from glslcombine.preprocessor.source_map import SourceMap
from glslcombine.preprocessor.variants import VariantAssembler

__all__ = [
    "preprocess_combined",
    "DirectiveScanner",
    "IncludeExpander",
    "VariantAssembler",
    "PreprocessContext",
    "SourceMap",
    "Diagnostic",
    "Diagnostics",
    "Severity",
    "PreprocessorError",
    "MalformedMacroError",
]
