"""Prompts module - centralized prompt templates for AI services.

Re-exports all prompt constants and utilities for easy importing:
    from services.prompts import KEYWORD_EXTRACTOR_V1, strip_markdown_code_blocks
"""

from services.prompts._base import strip_markdown_code_blocks
from services.prompts.keywords import KEYWORD_EXTRACTOR_V1
from services.prompts.narration import NARRATION_V1

__all__ = [
    # Utilities
    "strip_markdown_code_blocks",
    # Keyword prompts
    "KEYWORD_EXTRACTOR_V1",
    # Narration prompts
    "NARRATION_V1",
]
