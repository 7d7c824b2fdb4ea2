"""Core types for qstr generation."""

from qstrgen.core.config import BytesIn, GeneratorConfig
from qstrgen.core.data import QstrData, default_qstr_data
from qstrgen.core.errors import (
    ConfigLoadError,
    EncodingError,
    PatternError,
    QstrGenError,
    compile_pattern,
)
from qstrgen.core.qstr import QSTR_PREFIX, Pool, QStr, escape_value, make_ident, qstr_hash

__all__ = [
    "BytesIn",
    "ConfigLoadError",
    "EncodingError",
    "GeneratorConfig",
    "PatternError",
    "Pool",
    "QSTR_PREFIX",
    "QStr",
    "QstrData",
    "QstrGenError",
    "compile_pattern",
    "default_qstr_data",
    "escape_value",
    "make_ident",
    "qstr_hash",
]
