"""
Scoring Engine - Scoring Service.

============================================================
RESPONSIBILITY
============================================================
Single entry point for impact scores: compute_impact_scores().

Per request:
    CACHE_HIT -> return cached result
    otherwise BASELINE -> NEWS_FETCH -> (SENTIMENT_REFINE)
              -> scorers in order (AI, then heuristic)
              -> AGGREGATE -> CACHE_WRITE -> return

============================================================
DESIGN PRINCIPLES
============================================================
- Always answers: provider trouble degrades the source of the
  scores, never availability
- Only the provider calls suspend; everything else is synchronous
- With single_flight, concurrent misses for one key share a single
  computation; without it, the last writer wins the cache slot
- No retries, no timeouts of its own (providers own those)

============================================================
"""

import asyncio
import logging
from typing import Any, Optional, Sequence

from core.clock import ClockProtocol, SystemClock
from core.config import AppSettings
from genai import GeminiClient
from news import NewsApiSource, NewsGateway

from .aggregation import overall_score
from .ai_scorer import AIScorer
from .base import BaseImpactScorer
from .baseline import sector_baseline
from .cache import ScoreCache, cache_key
from .heuristic import HeuristicScorer
from .models import CompanyProfile, ImpactCategory, ImpactScoreResult


logger = logging.getLogger(__name__)


class ScoringService:
    """
    Orchestrates baseline, news, scoring, aggregation and caching.

    Usage:
        service = ScoringService.from_settings(AppSettings.from_env())
        result = await service.compute_impact_scores(profile, "environmental")
        service.clear_score_cache("AAPL")
    """

    NEWS_LIMIT = 10

    def __init__(
        self,
        news_gateway: NewsGateway,
        scorers: Optional[Sequence[BaseImpactScorer]] = None,
        cache: Optional[ScoreCache] = None,
        clock: Optional[ClockProtocol] = None,
        single_flight: bool = True,
    ) -> None:
        self.clock = clock or SystemClock()
        self.news_gateway = news_gateway
        self.cache = cache or ScoreCache(clock=self.clock)
        self.single_flight = single_flight

        scorers = list(scorers) if scorers is not None else [HeuristicScorer()]
        if not scorers or not isinstance(scorers[-1], HeuristicScorer):
            scorers.append(HeuristicScorer())
        self.scorers: list[BaseImpactScorer] = scorers

        self._inflight: dict[str, asyncio.Task] = {}
        self._stats = {
            "requests": 0,
            "computations": 0,
            "shared_computations": 0,
        }

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        clock: Optional[ClockProtocol] = None,
    ) -> "ScoringService":
        """Wire the production graph from settings."""
        clock = clock or SystemClock()
        generator = GeminiClient(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout=settings.http_timeout_seconds,
        )
        gateway = NewsGateway(
            source=NewsApiSource(
                api_key=settings.news_api_key,
                base_url=settings.news_api_base_url,
                cache_ttl=settings.news_cache_ttl_seconds,
                timeout=settings.http_timeout_seconds,
                clock=clock,
            ),
            generator=generator,
            clock=clock,
        )
        return cls(
            news_gateway=gateway,
            scorers=[AIScorer(generator), HeuristicScorer()],
            cache=ScoreCache(ttl_seconds=settings.score_cache_ttl_seconds, clock=clock),
            clock=clock,
            single_flight=settings.single_flight,
        )

    # ─────────────────────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────────────────────

    async def compute_impact_scores(
        self,
        profile: CompanyProfile,
        category: Any = ImpactCategory.BROAD,
    ) -> ImpactScoreResult:
        """
        Scores, overall score and news for a company.

        Provider failures never surface here; only an unexpected
        fault inside the pipeline itself can raise.
        """
        category = ImpactCategory.parse(category)
        self._stats["requests"] += 1

        cached = self.cache.get(profile.symbol, category)
        if cached is not None:
            logger.debug(f"[ScoringService] Using cached scores for {profile.symbol}-{category.value}")
            return cached

        if not self.single_flight:
            return await self._compute(profile, category)

        key = cache_key(profile.symbol, category)
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._compute(profile, category))
            self._inflight[key] = task
            task.add_done_callback(lambda done, k=key: self._forget(k, done))
        else:
            self._stats["shared_computations"] += 1
            logger.debug(f"[ScoringService] Joining in-flight computation for {key}")

        # A cancelled waiter must not cancel the computation others share
        return await asyncio.shield(task)

    def clear_score_cache(self, symbol: Optional[str] = None) -> int:
        """Invalidate cached scores for a symbol, or all of them."""
        return self.cache.invalidate(symbol)

    def get_stats(self) -> dict[str, Any]:
        return {
            **self._stats,
            "in_flight": len(self._inflight),
            "cache": self.cache.get_stats(),
            "news": self.news_gateway.get_stats(),
        }

    async def close(self) -> None:
        """Close provider sessions."""
        await self.news_gateway.close()
        generators = [self.news_gateway.generator]
        generators += [getattr(scorer, "generator", None) for scorer in self.scorers]
        # The gateway and the AI scorer usually share one client
        unique = {id(g): g for g in generators if g is not None}
        for generator in unique.values():
            await generator.close()

    # ─────────────────────────────────────────────────────────────
    # Pipeline
    # ─────────────────────────────────────────────────────────────

    async def _compute(
        self,
        profile: CompanyProfile,
        category: ImpactCategory,
    ) -> ImpactScoreResult:
        self._stats["computations"] += 1
        logger.info(
            f"[ScoringService] Computing scores for {profile.symbol} ({profile.name}), "
            f"sector={profile.sector}, category={category.value}"
        )

        baseline = sector_baseline(profile.sector)
        logger.debug(f"[ScoringService] Baseline for {profile.sector}: {baseline.to_dict()}")

        news = await self.news_gateway.fetch_news(profile.name, profile.symbol, self.NEWS_LIMIT)
        logger.info(f"[ScoringService] Fetched {len(news)} news articles for {profile.symbol}")

        news = await self.news_gateway.refine_sentiment(news, profile.name)

        for scorer in self.scorers:
            scores = await scorer.score(profile, baseline, news)
            if scores is not None:
                scored_by = scorer.source
                break
        else:
            # Unreachable: the last scorer is always a HeuristicScorer
            raise RuntimeError("no scorer produced a result")

        logger.info(f"[ScoringService] Using {scored_by.value} scores for {profile.symbol}")

        result = ImpactScoreResult(
            scores=scores,
            overall_impact_score=overall_score(scores, category),
            news=tuple(news),
            scored_by=scored_by,
        )
        logger.info(
            f"[ScoringService] Overall {category.value} score for {profile.symbol}: "
            f"{result.overall_impact_score}"
        )

        self.cache.put(profile.symbol, category, result)
        return result

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
