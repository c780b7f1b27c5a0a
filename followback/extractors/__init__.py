"""Extractors for the supported input formats."""

from .base import Extractor, ExtractorRegistry
from .json_export import JSONExtractor
from .html import HTMLExtractor
from .text import TextExtractor

__all__ = [
    "Extractor",
    "ExtractorRegistry",
    "JSONExtractor",
    "HTMLExtractor",
    "TextExtractor",
]
