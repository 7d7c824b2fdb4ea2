"""
qstrgen

Build-time generator for an embedded MicroPython interpreter's qstr table
and module registry.

Preprocessed interpreter sources are scanned for qstr references and
module registrations; the result is a data model that the header
templates are rendered from.
"""

__version__ = "0.1.0"

from qstrgen.core.config import BytesIn, GeneratorConfig
from qstrgen.core.data import QstrData, default_qstr_data
from qstrgen.core.errors import ConfigLoadError, EncodingError, PatternError, QstrGenError
from qstrgen.core.qstr import Pool, QStr
from qstrgen.extraction.aggregate import DataExtractor, ExtractedData, extract_data
from qstrgen.extraction.modules import Module, ModuleExtractor, ModuleKind
from qstrgen.extraction.qstrs import QstrExtractor

__all__ = [
    "__version__",
    "BytesIn",
    "ConfigLoadError",
    "DataExtractor",
    "EncodingError",
    "ExtractedData",
    "GeneratorConfig",
    "Module",
    "ModuleExtractor",
    "ModuleKind",
    "PatternError",
    "Pool",
    "QStr",
    "QstrData",
    "QstrExtractor",
    "QstrGenError",
    "default_qstr_data",
    "extract_data",
]
