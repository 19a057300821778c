"""Helpers shared by the prompt modules."""

import re

# Opening fence with optional language tag (```json, ```text) and closing fence
_OPEN_FENCE = re.compile(r"^```[\w-]*[ \t]*\n?")
_CLOSE_FENCE = re.compile(r"\n?```$")


def strip_markdown_code_blocks(text: str) -> str:
    """Remove a markdown code fence wrapped around a model response.

    Text without fences is only stripped of surrounding whitespace.
    """
    text = _OPEN_FENCE.sub("", text.strip())
    return _CLOSE_FENCE.sub("", text).strip()
