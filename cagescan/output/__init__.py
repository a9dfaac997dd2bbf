"""
CageScan - Output Formatters

This package provides output formatting capabilities for posture results.
"""

from .json_formatter import JSONFormatter, DateTimeEncoder
from .text_formatter import TextFormatter

__all__ = [
    "JSONFormatter",
    "DateTimeEncoder",
    "TextFormatter",
]
