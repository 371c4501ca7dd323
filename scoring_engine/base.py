"""
Scoring Engine - Scorer Interface.

A scorer turns (profile, baseline, news) into a full score vector,
or returns None to say "I could not score this, ask the next one".
The service tries its scorers in order; the last one must always
answer.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from news.models import NewsItem

from .models import CompanyProfile, ImpactScoreVector, ScoreSource


class BaseImpactScorer(ABC):
    """Abstract impact scorer."""

    @property
    @abstractmethod
    def source(self) -> ScoreSource:
        """Label recorded on results this scorer produced."""
        pass

    @property
    def available(self) -> bool:
        """False when the scorer would certainly decline (e.g. no credential)."""
        return True

    @abstractmethod
    async def score(
        self,
        profile: CompanyProfile,
        baseline: ImpactScoreVector,
        news: Sequence[NewsItem],
    ) -> Optional[ImpactScoreVector]:
        """Score a company. Must not raise; None means "use fallback"."""
        pass
