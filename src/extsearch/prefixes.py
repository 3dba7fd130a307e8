"""Search prefix resolution.

A prefix both opts a query into this provider and, when typed alone,
requests the complete list of installed extensions.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache

logger = logging.getLogger(__name__)

# Less common string so other providers rarely match it
DEFAULT_PREFIX = "eq//"


def escape_prefix(prefix: str) -> str:
    """Escape regex special characters so the prefix is matched literally."""
    return re.escape(prefix)


@dataclass(frozen=True)
class Prefix:
    """A configured prefix and its compiled starts-with test."""

    text: str
    pattern: re.Pattern

    def matches(self, term: str) -> bool:
        return self.pattern.match(term) is not None

    def strip(self, term: str) -> str:
        """Remove the prefix (and nothing else) from the start of term."""
        return self.pattern.sub("", term, count=1)


def compile_prefix(text: str) -> Prefix:
    return Prefix(text=text, pattern=re.compile("^" + escape_prefix(text), re.IGNORECASE))


class PrefixTable:
    """Ordered prefixes: the default one first, then custom ones as configured."""

    def __init__(self, custom_prefixes: tuple[str, ...] = ()):
        self.prefixes: tuple[Prefix, ...] = (
            compile_prefix(DEFAULT_PREFIX),
            *(compile_prefix(p) for p in custom_prefixes),
        )

    @property
    def keywords(self) -> list[str]:
        """Prefixes as typed, published so other providers can recognize them."""
        return [p.text for p in self.prefixes]

    def resolve(self, first_term: str) -> Prefix | None:
        """Return the first prefix that starts first_term, if any."""
        for prefix in self.prefixes:
            if prefix.matches(first_term):
                return prefix
        return None


def parse_custom_prefixes(setting: str) -> tuple[str, ...]:
    """Split the space separated setting, dropping empty entries."""
    return tuple(p for p in setting.split(" ") if p)


@lru_cache(maxsize=8)
def build_prefix_table(custom_prefixes: str) -> PrefixTable:
    """Compile the prefix table once per distinct setting value."""
    prefixes = parse_custom_prefixes(custom_prefixes)
    logger.debug(f"Compiling prefix table: {DEFAULT_PREFIX!r} + {list(prefixes)!r}")
    return PrefixTable(prefixes)
