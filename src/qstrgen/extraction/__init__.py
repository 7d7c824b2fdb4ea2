"""Extractors that scan preprocessed source text."""

from qstrgen.extraction.aggregate import DataExtractor, ExtractedData, extract_data
from qstrgen.extraction.modules import ExtractedModules, Module, ModuleExtractor, ModuleKind
from qstrgen.extraction.qstrs import ExtractedQstrs, QstrExtractor

__all__ = [
    "DataExtractor",
    "ExtractedData",
    "ExtractedModules",
    "ExtractedQstrs",
    "Module",
    "ModuleExtractor",
    "ModuleKind",
    "QstrExtractor",
    "extract_data",
]
