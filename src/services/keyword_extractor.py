"""Keyword extraction from free-text video descriptions.

Combines AI-suggested keywords with a statistical token filter. The AI step
is optional: when it fails the token filter alone decides, and only when
both come back empty does extraction fail.
"""

import logging
import re
from typing import Optional

from services.ai_service import AIService
from services.errors import AIServiceError, ExtractionError
from services.prompts import KEYWORD_EXTRACTOR_V1, strip_markdown_code_blocks

logger = logging.getLogger(__name__)

DEFAULT_MAX_KEYWORDS = 10
MIN_TOKEN_LENGTH = 3

STOP_WORDS = frozenset(
    """
    about above after again all also am an and any are aren as at be because been before
    being below between both but by can cannot could couldn did didn do does doesn doing
    don down during each few for from further had hadn has hasn have haven having he her
    here hers herself him himself his how however i if in into is isn it its itself just
    let me more most mustn my myself no nor not now of off on once only or other ought our
    ours ourselves out over own same shan she should shouldn so some such than that the
    their theirs them themselves then there these they this those through to too under
    until up upon us very was wasn we were weren what when where which while who whom why
    will with won would wouldn yet you your yours yourself yourselves
    """.split()
)

_TOKEN_SPLIT = re.compile(r"[^\w]+", re.UNICODE)
# Leading list markers: "-", "*", "•", "1.", "2)", "#"
_LIST_MARKER = re.compile(r"^\s*(?:[-*•#]+|\d+[.)])\s*")


def tokenize(text: str) -> list[str]:
    """Lower-case and filter tokens, keeping order and duplicates."""
    tokens = _TOKEN_SPLIT.split(text.lower())
    return [t for t in tokens if len(t) >= MIN_TOKEN_LENGTH and t not in STOP_WORDS]


def parse_ai_keywords(text: str) -> list[str]:
    """Split an AI response into one keyword per non-empty line.

    Handles code fences, bullet/numbered lists and bold markers.
    """
    keywords = []
    for line in strip_markdown_code_blocks(text).splitlines():
        cleaned = _LIST_MARKER.sub("", line).strip().strip("*_`\"'").strip()
        if cleaned:
            keywords.append(cleaned)
    return keywords


def merge_unique(*sequences: list[str], limit: Optional[int] = None) -> list[str]:
    """Union sequences preserving first-seen order, case-sensitively."""
    seen = set()
    merged = []
    for sequence in sequences:
        for value in sequence:
            if value in seen:
                continue
            seen.add(value)
            merged.append(value)
    return merged[:limit] if limit is not None else merged


class KeywordExtractor:
    """Derives a bounded, duplicate-free keyword list from a description."""

    def __init__(self, ai_service: AIService, max_keywords: int = DEFAULT_MAX_KEYWORDS):
        self.ai = ai_service
        self.max_keywords = max_keywords

    async def extract(self, text: str) -> list[str]:
        """Extract keywords from text.

        Args:
            text: Free-text description

        Returns:
            At most max_keywords unique keywords, AI suggestions first

        Raises:
            ExtractionError: AI call failed and no token survived filtering
        """
        if not text or not text.strip():
            logger.warning("Empty description provided for keyword extraction")
            return []

        ai_error = None
        try:
            ai_keywords = await self._suggest(text)
        except AIServiceError as e:
            logger.warning(f"AI keyword suggestion failed, using token filter only: {e}")
            ai_error = e
            ai_keywords = []

        tokens = tokenize(text)

        if ai_error is not None and not tokens:
            raise ExtractionError(
                f"Could not derive any keywords: AI suggestion failed ({ai_error}) "
                "and no usable tokens remained after filtering"
            ) from ai_error

        keywords = merge_unique(ai_keywords, tokens, limit=self.max_keywords)
        logger.info(f"Extracted {len(keywords)} keywords: {keywords}")
        return keywords

    async def _suggest(self, text: str) -> list[str]:
        prompt = KEYWORD_EXTRACTOR_V1.format(description=text, max_keywords=self.max_keywords)
        response = await self.ai.generate_text(prompt, temperature=0.5, max_output_tokens=100)
        return parse_ai_keywords(response)
