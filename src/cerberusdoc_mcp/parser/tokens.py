"""Regex-driven identifier extraction for fallback completion."""

import logging
import re
from typing import Optional

from .formats import CODE_FENCE, NUMERIC_TOKEN

logger = logging.getLogger(__name__)

# Identifiers of three or more characters
DEFAULT_TOKEN_REGEX = r"\b[A-Za-z_][A-Za-z0-9_]{2,}\b"


class TokenExtractor:
    """Collects plausible identifier tokens from documentation text.

    Content inside code fences is preferred; when a text has no fences the
    whole text is scanned. Purely numeric tokens are dropped.
    """

    def __init__(self, regex_source: Optional[str] = None):
        self._source = DEFAULT_TOKEN_REGEX
        self._regex = re.compile(DEFAULT_TOKEN_REGEX)
        if regex_source:
            self.update_regex(regex_source)

    @property
    def pattern(self) -> str:
        """The effective pattern source."""
        return self._source

    def update_regex(self, new_source: Optional[str]) -> bool:
        """Replace the active pattern.

        An empty source resets to DEFAULT_TOKEN_REGEX. A source that does not
        compile is logged and the previous pattern stays active.

        Returns:
            True if the new pattern is now active
        """
        if not new_source:
            new_source = DEFAULT_TOKEN_REGEX

        try:
            compiled = re.compile(new_source)
        except (re.error, TypeError, ValueError) as e:
            logger.warning("Invalid token extraction regex %r, keeping %r: %s", new_source, self._source, e)
            return False

        self._source = new_source
        self._regex = compiled
        return True

    def extract_from_text(self, text: str) -> set[str]:
        """Extract the set of identifier tokens from text."""
        results: set[str] = set()
        if not text:
            return results

        found_fence = False
        for fence in CODE_FENCE.finditer(text):
            found_fence = True
            self._collect(fence.group(1), results)

        if not found_fence:
            self._collect(text, results)

        return results

    def _collect(self, content: str, results: set[str]):
        for m in self._regex.finditer(content):
            token = m.group(0)
            if not token or NUMERIC_TOKEN.fullmatch(token):
                continue
            results.add(token)


def extract_tokens(regex_source: Optional[str], text: str) -> set[str]:
    """One-shot token extraction with the given pattern source."""
    return TokenExtractor(regex_source).extract_from_text(text)
