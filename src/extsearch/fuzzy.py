"""Query matching helpers for extension filtering.

Scores are ascending: 0 is the best possible match, NO_MATCH means the
term does not occur in the text at all.
"""

NO_MATCH = -1
BEST_SCORE = 0


def is_subsequence(query: str, text: str) -> bool:
    """Check if query is a subsequence of text (chars in order, not necessarily adjacent)."""
    it = iter(text)
    return all(char in it for char in query)


def _at_word_start(text: str, pos: int) -> bool:
    return pos == 0 or text[pos - 1].isspace()


def strict_match(term: str, text: str) -> int:
    """
    Score a case-insensitive substring match of term in text.

    Exact match of the whole text scores 0. A match starting at a word
    boundary scores 1 + position and always beats a match starting
    mid-word, which scores len(text) + 1 + position.
    """
    if not term:
        return BEST_SCORE

    term_lower = term.lower()
    text_lower = text.lower()

    if term_lower == text_lower:
        return BEST_SCORE

    first = text_lower.find(term_lower)
    if first == -1:
        return NO_MATCH

    # Prefer the earliest occurrence that starts a word
    pos = first
    while pos != -1:
        if _at_word_start(text_lower, pos):
            return 1 + pos
        pos = text_lower.find(term_lower, pos + 1)

    return len(text_lower) + 1 + first


def fuzzy_match(term: str, text: str) -> int:
    """
    Score a case-insensitive subsequence match of term in text.

    Contiguous matches are scored exactly like strict_match. Scattered
    matches are found by a left-to-right scan where each matched char
    consumes the search position; every skipped char between two matched
    ones costs more than any start offset, so fewer gaps always win.
    """
    if not term:
        return BEST_SCORE

    score = strict_match(term, text)
    if score != NO_MATCH:
        return score

    term_lower = term.lower()
    text_lower = text.lower()

    if not is_subsequence(term_lower, text_lower):
        return NO_MATCH

    positions = []
    start = 0
    for char in term_lower:
        pos = text_lower.index(char, start)
        positions.append(pos)
        start = pos + 1

    gaps = sum(b - a - 1 for a, b in zip(positions, positions[1:]))
    width = len(text_lower) + 1
    # Above every strict score (max 2 * width - 1)
    return 2 * width + gaps * width + positions[0]


def match(term: str, text: str, fuzzy: bool = False) -> int:
    """Dispatch to fuzzy or strict matching."""
    if fuzzy:
        return fuzzy_match(term, text)
    return strict_match(term, text)
