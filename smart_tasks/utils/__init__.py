"""Utility functions for the smart_tasks project.

Re-exports the text-cleaning helpers, datetime utilities and LLM parsing so
that imports like `from ..utils import extract_json_array` work as expected.
"""

from .text_cleaning import strip_think_blocks, clean_list_item, normalize_title  # noqa: F401
from .datetime_utils import get_current_timestamp # noqa: F401
from .llm_parsing import extract_json_array  # noqa: F401

__all__ = [
    "strip_think_blocks",
    "clean_list_item",
    "normalize_title",
    "get_current_timestamp",
    "extract_json_array",
]
