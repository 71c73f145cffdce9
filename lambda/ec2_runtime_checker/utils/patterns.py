"""Name pattern matching.

Patterns support a single wildcard, ``*``, which matches any run of
characters (including none). Everything else is matched literally.
"""

from __future__ import annotations
import functools
import re

from ..exceptions import ConfigError

UNSUPPORTED_GLOB_CHARS = frozenset("?[]\\")


def validate_name_pattern(pattern: str) -> None:
    """Raise ConfigError if the pattern uses glob syntax other than ``*``."""
    bad = sorted({ch for ch in pattern if ch in UNSUPPORTED_GLOB_CHARS})
    if bad:
        raise ConfigError(
            f"Invalid name pattern {pattern!r}: only '*' is supported as a wildcard "
            f"(found {', '.join(repr(ch) for ch in bad)})"
        )


@functools.lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    validate_name_pattern(pattern)
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")), re.DOTALL)


def glob_match(pattern: str, value: str) -> bool:
    """Return True if value matches pattern. Malformed patterns never match."""
    try:
        regex = _compile(pattern)
    except ConfigError:
        return False
    return regex.fullmatch(value) is not None
