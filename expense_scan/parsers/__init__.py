"""
Text-to-field parsers for recognized receipt text.
"""

from .categorizer import Categorizer
from .field_extractor import FieldExtractor

__all__ = ["Categorizer", "FieldExtractor"]
