"""
Error types for qstr generation.

Every error here is fatal to a generation run: the build driver aborts
and no partial output is published.
"""

import re


class QstrGenError(Exception):
    """Base class for all qstr generation failures."""


class ConfigLoadError(QstrGenError):
    """A declarative configuration source is missing or malformed."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"can't load {source}: {reason}")
        self.source = source
        self.reason = reason


class EncodingError(QstrGenError):
    """A qstr value needs control-character escaping but isn't ASCII."""

    def __init__(self, value: str, origin: str | None = None) -> None:
        where = f" (from {origin})" if origin else ""
        super().__init__(f"can't escape non-ascii string {value!r}{where}")
        self.value = value
        self.origin = origin

    def with_origin(self, origin: str) -> "EncodingError":
        """Return a copy of this error naming the translation unit."""
        return EncodingError(self.value, origin)


class PatternError(QstrGenError):
    """A fixed scanning pattern failed to compile or classify a match."""


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile one of the fixed scanning patterns."""
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternError(f"invalid scanning pattern {pattern!r}: {e}") from e
