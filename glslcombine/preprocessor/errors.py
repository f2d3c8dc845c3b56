# glslcombine/preprocessor/errors.py


class PreprocessorError(ValueError):
    """Base class for unrecoverable preprocessing failures."""


class MalformedMacroError(PreprocessorError):
    """A caller-supplied macro is not `NAME` or `NAME=VALUE`."""

    def __init__(self, macro: str) -> None:
        super().__init__(f"Malformed macro definition: {macro!r}")
        self.macro = macro
