"""Regex pattern matching for script names and command output."""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class InvalidPattern(ValueError):
    """A pattern string could not be compiled."""

    def __init__(self, pattern: str, original_error: re.error):
        self.pattern = pattern
        self.original_error = original_error
        super().__init__(f"Invalid pattern {pattern!r}: {original_error}")


@dataclass(frozen=True)
class CompiledMatcher:
    """A compiled pattern, matched anywhere in the tested text."""

    pattern: str
    regex: re.Pattern[str] | None

    def test(self, text: str) -> bool:
        """Return True if the pattern occurs in ``text``."""
        if self.regex is None:
            return False
        return self.regex.search(text) is not None


def compile_pattern(pattern: str) -> CompiledMatcher:
    """Compile a pattern.

    Raises:
        InvalidPattern: If the pattern is not a valid regular expression
    """
    try:
        return CompiledMatcher(pattern=pattern, regex=re.compile(pattern))
    except re.error as e:
        raise InvalidPattern(pattern, e) from e


def compile_or_never(pattern: str, owner: str = "") -> CompiledMatcher:
    """Compile a pattern, substituting a never-matching matcher on error."""
    try:
        return compile_pattern(pattern)
    except InvalidPattern as e:
        logger.warning("%s: %s, treating as never matching", owner or "pattern", e)
        return CompiledMatcher(pattern=pattern, regex=None)
