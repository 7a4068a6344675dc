"""
Fuzzy command matching with Dice's coefficient over character bigrams.

- similarity(a, b): score in [0, 1]. Equal strings score 1; strings shorter
  than two characters score 0; otherwise 2 * shared / (len(bigrams(a)) +
  len(bigrams(b))), where shared counts case-folded bigrams of `a` found in
  the bigram multiset of `b`, consuming each match so repeated bigrams are
  not over-counted.
- best_match(target, candidates): every rating plus the first index that
  reaches the highest score.
- suggest(target, candidates): the "did you mean" policy used by dispatch.

All functions are pure and total.
"""
import logging
from collections import Counter
from typing import NamedTuple

logger = logging.getLogger(__name__)

# Candidates above this score are worth mentioning at all.
THRESHOLD = 0.3
# A best candidate above this score is confident enough to offer on its own.
CONFIDENT = 0.7


class Rating(NamedTuple):
    target: str
    rating: float


class BestMatch(NamedTuple):
    best: Rating | None
    index: int
    ratings: list[Rating]


class Suggestion(NamedTuple):
    """
    Outcome of the "did you mean" policy.

    kind is "run" (offer names[0] for auto-run), "menu" (offer every name in
    names) or "none".
    """
    kind: str
    names: list[str]


def _bigrams(text):
    text = text.casefold()
    return [text[index:index + 2] for index in range(len(text) - 1)]


def similarity(a, b, /):
    """
    Dice's coefficient of two strings (0 = nothing shared, 1 = equal).
    """
    if a == b:
        return 1.0
    if len(a) < 2 or len(b) < 2:
        return 0.0

    first = _bigrams(a)
    second = _bigrams(b)
    pool = Counter(second)

    matches = 0
    for bigram in first:
        if pool[bigram] > 0:
            pool[bigram] -= 1
            matches += 1

    return 2 * matches / (len(first) + len(second))


def best_match(target, candidates, /):
    """
    Rate every candidate against target.

    Ties resolve to the earliest candidate. With no candidates, best is None
    and index is -1.
    """
    ratings = [Rating(candidate, similarity(target, candidate)) for candidate in candidates]
    if not ratings:
        return BestMatch(None, -1, ratings)

    index = 0
    for position, rating in enumerate(ratings):
        if rating.rating > ratings[index].rating:
            index = position
    return BestMatch(ratings[index], index, ratings)


def suggest(target, candidates, /):
    """
    Apply the "did you mean" policy.

    - "run": exactly one candidate scores above 0, or the best score exceeds
      0.7 even when several candidates score above 0.3;
    - "menu": otherwise, every candidate scoring above 0.3 (best first);
    - "none": nothing scores above 0.3.
    """
    match = best_match(target, candidates)
    positive = [rating for rating in match.ratings if rating.rating > 0]
    likely = sorted(
        (rating for rating in match.ratings if rating.rating > THRESHOLD),
        key=lambda rating: -rating.rating,
    )

    if len(positive) == 1 or (match.best and match.best.rating > CONFIDENT):
        suggestion = Suggestion("run", [match.best.target])
    elif likely:
        suggestion = Suggestion("menu", [rating.target for rating in likely])
    else:
        suggestion = Suggestion("none", [])

    logger.debug("suggestion for %r: %r", target, suggestion)
    return suggestion


__all__ = (
    "Rating",
    "BestMatch",
    "Suggestion",
    "similarity",
    "best_match",
    "suggest",
)
