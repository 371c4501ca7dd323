"""
Keyword sentiment labeller for raw news articles.

Gives each article a provisional label before any AI refinement:
count positive and negative cue words appearing in the title and
description; the larger count wins, a tie is neutral.
"""

from typing import Iterable, Optional

from .models import SentimentLabel


POSITIVE_WORDS: tuple[str, ...] = (
    "growth", "profit", "success", "innovation", "sustainability",
    "diversity", "award", "record", "exceeds", "strong", "partnership",
    "expansion", "breakthrough", "renewable", "clean", "green",
    "inclusive", "equity",
)

NEGATIVE_WORDS: tuple[str, ...] = (
    "lawsuit", "fine", "scandal", "layoff", "decline", "loss",
    "controversy", "investigation", "pollution", "violation",
    "discrimination", "unsafe", "breach", "fraud", "recall", "strike",
)


class KeywordSentimentLabeler:
    """Substring-count sentiment labeller."""

    def __init__(
        self,
        positive_words: Optional[Iterable[str]] = None,
        negative_words: Optional[Iterable[str]] = None,
    ) -> None:
        self.positive_words = tuple(w.lower() for w in (positive_words or POSITIVE_WORDS))
        self.negative_words = tuple(w.lower() for w in (negative_words or NEGATIVE_WORDS))

    def label(self, title: str, description: str = "") -> SentimentLabel:
        text = f"{title} {description}".lower()
        positive = sum(1 for w in self.positive_words if w in text)
        negative = sum(1 for w in self.negative_words if w in text)

        if positive > negative:
            return SentimentLabel.POSITIVE
        if negative > positive:
            return SentimentLabel.NEGATIVE
        return SentimentLabel.NEUTRAL
