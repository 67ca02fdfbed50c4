"""Insight similarity scoring.

The comparator and synthesizer only talk to ``InsightSimilarityScorer``, so the
loose containment heuristic below can be replaced by an embedding-based scorer
without touching the rest of the engine.
"""

import string
from typing import Optional, Protocol, runtime_checkable

STOPWORDS = frozenset(
    """
    a about above after again against all am an and any are as at be because
    been before being below between both but by can could did do does doing
    down during each few for from further had has have having he her here hers
    herself him himself his how i if in into is it its itself just me more most
    my myself no nor not now of off on once only or other our ours ourselves
    out over own same she should so some such than that the their theirs them
    themselves then there these they this those through to too under until up
    very was we were what when where which while who whom why will with would
    you your yours yourself yourselves
    """.split()
)


@runtime_checkable
class InsightSimilarityScorer(Protocol):
    """Decides whether two free-text statements say the same thing."""

    def topic(self, text: str) -> Optional[str]:
        """Return the topic signature of a statement, or None if it has none."""
        ...

    def matches(self, first: str, second: str) -> bool:
        """Return True if the two statements are considered common."""
        ...


class ContainmentSimilarityScorer:
    """First content word of one statement contained in the other.

    Case-insensitive and symmetric: ``matches(a, b) == matches(b, a)``.
    """

    def __init__(self, stopwords: Optional[frozenset] = None):
        self.stopwords = STOPWORDS if stopwords is None else stopwords

    def topic(self, text: str) -> Optional[str]:
        tokens = [
            token.strip(string.punctuation)
            for token in text.lower().split()
        ]
        tokens = [token for token in tokens if token]
        if not tokens:
            return None

        for token in tokens:
            if token not in self.stopwords:
                return token
        return tokens[0]

    def matches(self, first: str, second: str) -> bool:
        first_topic = self.topic(first)
        second_topic = self.topic(second)
        if first_topic is None or second_topic is None:
            return False
        return first_topic in second.lower() or second_topic in first.lower()


DEFAULT_SCORER = ContainmentSimilarityScorer()
