"""Build driver glue: translation unit sources and the command line."""

from qstrgen.runtime.sources import (
    PreprocessedFileReader,
    Preprocessor,
    SourceTree,
    TranslationUnit,
    is_header_used,
    load_units,
)

__all__ = [
    "PreprocessedFileReader",
    "Preprocessor",
    "SourceTree",
    "TranslationUnit",
    "is_header_used",
    "load_units",
]
