"""Ranking of extension candidates for one search query.

The result order is produced by pipelines of stable sorts. Each step
only breaks ties left by the steps after it, so the LAST step in a
pipeline is the most significant ordering.
"""

import logging
import unicodedata
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from .config import SearchConfig, ShowIncompatible
from .fuzzy import NO_MATCH, match
from .models import Candidate, ExtensionState
from .prefixes import PrefixTable, build_prefix_table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scored:
    """A matching candidate and its match score (lower is better)."""

    candidate: Candidate
    score: int


@dataclass
class RankResult:
    """Ordered ids plus how the query was interpreted."""

    ids: list[str]
    list_all: bool = False
    term: str = ""


Step = Callable[[list[Scored], str], list[Scored]]


def split_terms(query: str) -> list[str]:
    """Split raw search entry text into whitespace separated terms."""
    return query.split()


def collation_key(name: str) -> tuple[str, str]:
    """Sort key approximating a locale-aware, case-insensitive comparison."""
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base.casefold(), name


def _word_starts_with(text: str, term: str) -> bool:
    for i in range(1, len(text)):
        if text[i - 1].isspace() and not text[i].isspace() and text.startswith(term, i):
            return True
    return False


def title_relevance(item: Scored, term: str) -> int:
    """0 when the name starts with term, 1 when a later word does, else 2."""
    name = item.candidate.name.lower()
    if name.startswith(term):
        return 0
    if _word_starts_with(name, term):
        return 1
    return 2


def _stable(key: Callable[[Scored, str], object]) -> Step:
    def step(items: list[Scored], term: str) -> list[Scored]:
        return sorted(items, key=lambda item: key(item, term))

    step.__name__ = key.__name__
    return step


@_stable
def by_score(item: Scored, term: str) -> int:
    return item.score


@_stable
def enabled_or_error_first(item: Scored, term: str) -> int:
    return 0 if item.candidate.state in (ExtensionState.ENABLED, ExtensionState.ERROR) else 1


@_stable
def incompatible_last(item: Scored, term: str) -> int:
    return 1 if item.candidate.state == ExtensionState.INCOMPATIBLE else 0


@_stable
def by_title_relevance(item: Scored, term: str) -> int:
    return title_relevance(item, term)


@_stable
def alphabetical(item: Scored, term: str) -> tuple[str, str]:
    return collation_key(item.candidate.name)


@_stable
def active_first(item: Scored, term: str) -> int:
    return 0 if item.candidate.is_active else 1


def by_activation_order(items: list[Scored], term: str) -> list[Scored]:
    """
    Reorder active candidates by activation order, later-activated first.

    Inactive candidates and active ones without an index keep their slots,
    so only the relative order of the activated ones changes.
    """
    slots = [
        i
        for i, item in enumerate(items)
        if item.candidate.is_active and item.candidate.enabled_order_index is not None
    ]
    activated = sorted(
        (items[i] for i in slots),
        key=lambda item: -item.candidate.enabled_order_index,
    )
    result = list(items)
    for slot, item in zip(slots, activated):
        result[slot] = item
    return result


# Matcher score, then enabled, then compatibility, then title relevance (dominant)
RELEVANCE_PIPELINE: tuple[Step, ...] = (
    by_score,
    enabled_or_error_first,
    incompatible_last,
    by_title_relevance,
)


def full_list_pipeline(config: SearchConfig, hide_incompatible: bool) -> list[Step]:
    """Steps for the complete list shown when only a prefix was typed."""
    steps: list[Step] = [alphabetical]
    if config.enabled_first or config.order_of_enabling:
        steps.append(active_first)
    if config.order_of_enabling:
        steps.append(by_activation_order)
    if not hide_incompatible and config.incompatible_last:
        steps.append(incompatible_last)
    return steps


def run_pipeline(items: list[Scored], steps: Iterable[Step], term: str) -> list[Scored]:
    for step in steps:
        items = step(items, term)
    return items


def should_hide_incompatible(config: SearchConfig, prefixed: bool, term: str) -> bool:
    return (
        config.show_incompatible == ShowIncompatible.HIDE
        or (not prefixed and config.incompatible_hide_global)
        or (bool(term) and config.incompatible_full_only)
    )


def rank(
    candidates: Iterable[Candidate],
    terms: Sequence[str],
    config: SearchConfig,
    prefix_table: PrefixTable | None = None,
) -> RankResult:
    """
    Produce the ordered candidate ids for one query.

    Args:
        candidates: Snapshot of installed extensions, ids unique
        terms: Query terms as typed, the first one may carry a prefix
        config: Search settings snapshot
        prefix_table: Compiled prefixes, built from config when omitted

    Returns:
        RankResult with ordered ids; empty when nothing matches or when
        an unprefixed query is excluded from global search.
    """
    table = prefix_table or build_prefix_table(config.custom_prefixes)
    terms = list(terms) or [""]

    prefix = table.resolve(terms[0])
    if prefix is None and config.exclude_from_global_search:
        return RankResult(ids=[])

    prefixed = prefix is not None
    if prefixed:
        terms[0] = prefix.strip(terms[0])
    term = " ".join(terms).strip()
    term_lower = term.lower()

    items = []
    for candidate in candidates:
        score = match(term, candidate.display_text, config.fuzzy_match)
        if score != NO_MATCH:
            items.append(Scored(candidate, score))

    hide_incompatible = should_hide_incompatible(config, prefixed, term)
    if hide_incompatible:
        items = [i for i in items if i.candidate.state != ExtensionState.INCOMPATIBLE]

    if prefixed and not term:
        steps = full_list_pipeline(config, hide_incompatible)
    else:
        steps = RELEVANCE_PIPELINE
    items = run_pipeline(items, steps, term_lower)

    logger.debug(
        f"Ranked {len(items)} results for {term!r} "
        f"(prefix={prefix.text if prefix else None!r}, "
        f"pipeline={[s.__name__ for s in steps]})"
    )
    return RankResult(
        ids=[item.candidate.id for item in items],
        list_all=prefixed,
        term=term,
    )
