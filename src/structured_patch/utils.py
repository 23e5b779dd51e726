from typing import List

from .constants import EXCERPT_LIMIT, PATCH_FORMAT_INSTRUCTIONS


def get_patch_format_instructions() -> str:
    return PATCH_FORMAT_INSTRUCTIONS


def excerpt(lines: List[str], limit: int = EXCERPT_LIMIT) -> str:
    """Joins ``lines`` and cuts the result to ``limit`` characters for error messages."""
    text = "\n".join(lines)
    if len(text) > limit:
        return text[:limit] + "..."
    return text
