"""
Tests for the Impact Scorers.

============================================================
PURPOSE
============================================================
HeuristicScorer:
- Keyword matching and per-update clamping
- Monotonicity in sentiment

AIScorer:
- Prompt content
- Response parsing onto the baseline
- Declining (None) on every failure mode

============================================================
"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Optional

from genai import BaseTextGenerator, MalformedResponseError, ProviderCallError
from news.models import NewsItem, SentimentLabel
from scoring_engine import (
    AIScorer,
    CompanyProfile,
    HeuristicScorer,
    ImpactDimension,
    ImpactScoreVector,
    ScoreSource,
    build_scoring_prompt,
    parse_scoring_response,
    sector_baseline,
)


NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

TESLA = CompanyProfile(
    symbol="TSLA",
    name="Tesla Inc.",
    sector="Automotive",
    industry="Auto Manufacturers",
    description="Electric vehicle and clean energy company.",
)


def article(
    title: str,
    description: str = "",
    sentiment: SentimentLabel = SentimentLabel.NEUTRAL,
    age_days: int = 0,
    index: int = 0,
) -> NewsItem:
    return NewsItem(
        id=f"TSLA-news-{index}",
        title=title,
        description=description,
        url="https://example.com",
        source="Wire",
        published_at=NOW - timedelta(days=age_days),
        sentiment=sentiment,
    )


class ScriptedGenerator(BaseTextGenerator):
    """Generator returning a scripted answer or raising."""

    def __init__(self, answer: str = "", error: Optional[Exception] = None, enabled: bool = True):
        super().__init__()
        self.answer = answer
        self.error = error
        self._enabled = enabled
        self.calls: list[dict] = []

    @property
    def name(self) -> str:
        return "scripted"

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def _generate(self, prompt, temperature, max_output_tokens) -> str:
        self.calls.append({
            "prompt": prompt,
            "temperature": temperature,
            "max_output_tokens": max_output_tokens,
        })
        if self.error:
            raise self.error
        return self.answer


# ============================================================
# HEURISTIC SCORER
# ============================================================

class TestHeuristicScorer:
    """Tests for HeuristicScorer."""

    def test_negative_labor_article(self):
        baseline = sector_baseline("Automotive")
        news = [article("Tesla faces labor violation claims", sentiment=SentimentLabel.NEGATIVE)]

        adjusted = HeuristicScorer().adjust(baseline, news)

        assert adjusted.labor_practices == 67
        for dimension in ImpactDimension:
            if dimension is not ImpactDimension.LABOR_PRACTICES:
                assert adjusted[dimension] == baseline[dimension]

    def test_neutral_news_changes_nothing(self):
        baseline = sector_baseline("Automotive")
        news = [article("Carbon emissions and worker safety update")]

        assert HeuristicScorer().adjust(baseline, news) == baseline

    def test_empty_news_returns_baseline(self):
        baseline = sector_baseline("Energy")
        assert HeuristicScorer().adjust(baseline, []) == baseline

    def test_one_article_moves_a_dimension_once(self):
        baseline = ImpactScoreVector.uniform(70)
        news = [article("Climate climate carbon", "more carbon", sentiment=SentimentLabel.POSITIVE)]

        assert HeuristicScorer().adjust(baseline, news).environmental == 73

    def test_matching_is_case_insensitive(self):
        baseline = ImpactScoreVector.uniform(70)
        news = [article("SOLAR expansion", sentiment=SentimentLabel.POSITIVE)]

        adjusted = HeuristicScorer().adjust(baseline, news)

        assert adjusted.environmental == 73
        assert adjusted.long_term_profitability == 73

    def test_clamps_after_every_update(self):
        baseline = ImpactScoreVector.uniform(70).with_scores({ImpactDimension.ENVIRONMENTAL: 99})
        news = [
            article("solar", sentiment=SentimentLabel.POSITIVE, index=0),
            article("solar", sentiment=SentimentLabel.NEGATIVE, index=1),
        ]

        # 99 -> 100 (clamped) -> 97, not 99 -> 102 -> 99
        assert HeuristicScorer().adjust(baseline, news).environmental == 97

    def test_floor_clamp(self):
        baseline = ImpactScoreVector.uniform(70).with_scores({ImpactDimension.PAY_EQUALITY: 1})
        news = [article("wage cut", sentiment=SentimentLabel.NEGATIVE)]

        assert HeuristicScorer().adjust(baseline, news).pay_equality == 0

    def test_monotone_in_sentiment(self):
        baseline = sector_baseline("Technology")
        scorer = HeuristicScorer()
        titles = ["Board governance reform", "Record earnings and solar investment", "Wage data"]

        for index, title in enumerate(titles):
            before = scorer.adjust(baseline, [article(title, sentiment=SentimentLabel.NEUTRAL, index=index)])
            after = scorer.adjust(baseline, [article(title, sentiment=SentimentLabel.POSITIVE, index=index)])
            for dimension in ImpactDimension:
                assert after[dimension] >= before[dimension]

    def test_custom_keyword_table(self):
        scorer = HeuristicScorer(keywords={ImpactDimension.SOCIAL_IMPACT: ["Rocket"]})
        news = [article("rocket launch", sentiment=SentimentLabel.POSITIVE)]

        adjusted = scorer.adjust(ImpactScoreVector.uniform(70), news)

        assert adjusted.social_impact == 73
        assert adjusted.environmental == 70

    @pytest.mark.asyncio
    async def test_score_always_answers(self):
        scores = await HeuristicScorer().score(TESLA, sector_baseline("Automotive"), [])

        assert scores == sector_baseline("Automotive")
        assert HeuristicScorer().source == ScoreSource.HEURISTIC


# ============================================================
# AI PROMPT AND PARSING
# ============================================================

class TestScoringPrompt:
    """Tests for build_scoring_prompt."""

    def test_identity_and_baseline(self):
        prompt = build_scoring_prompt(TESLA, sector_baseline("Automotive"), [])

        assert "Company: Tesla Inc. (TSLA)" in prompt
        assert "Sector: Automotive" in prompt
        assert '"environmental": 60' in prompt
        assert '"laborPractices": <score 0-100>' in prompt
        assert "No recent news available" in prompt

    def test_asks_about_actual_reputation(self):
        prompt = build_scoring_prompt(TESLA, sector_baseline("Automotive"), [])

        reputation = prompt.index("Think about Tesla Inc.'s ACTUAL reputation:")
        assert prompt.index("Starting baseline") < reputation < prompt.index("Return ONLY")
        assert "- What controversies or achievements has it had?" in prompt
        assert "- How does it compare to peers?" in prompt

    def test_only_ten_most_recent_articles(self):
        news = [article(f"Story {i}", age_days=i, index=i) for i in range(12)]
        prompt = build_scoring_prompt(TESLA, sector_baseline("Automotive"), list(reversed(news)))

        assert '1. "Story 0"' in prompt
        assert '10. "Story 9"' in prompt
        assert "Story 10" not in prompt
        assert "Story 11" not in prompt


class TestParseScoringResponse:
    """Tests for parse_scoring_response."""

    def test_overlays_recognized_keys(self):
        baseline = sector_baseline("Automotive")
        text = '```json\n{"environmental": 82.6, "laborPractices": 140, "bogus": 1, "payEquality": "high"}\n```'

        scores = parse_scoring_response(text, baseline)

        assert scores.environmental == 83
        assert scores.labor_practices == 100
        assert scores.pay_equality == baseline.pay_equality
        assert scores.social_impact == baseline.social_impact

    def test_booleans_are_not_scores(self):
        baseline = ImpactScoreVector.uniform(70)
        scores = parse_scoring_response('{"environmental": true}', baseline)
        assert scores.environmental == 70

    def test_no_object_is_none(self):
        assert parse_scoring_response("I cannot help with that.", ImpactScoreVector.uniform()) is None


# ============================================================
# AI SCORER
# ============================================================

class TestAIScorer:
    """Tests for AIScorer."""

    @pytest.mark.asyncio
    async def test_success(self):
        generator = ScriptedGenerator('{"environmental": 90, "corporateImpact": 40}')
        scorer = AIScorer(generator)

        scores = await scorer.score(TESLA, sector_baseline("Automotive"), [])

        assert scores.environmental == 90
        assert scores.corporate_impact == 40
        assert scores.labor_practices == 70
        assert generator.calls[0]["temperature"] == 0.7
        assert generator.calls[0]["max_output_tokens"] == 500

    @pytest.mark.asyncio
    async def test_disabled_generator_declines_without_calling(self):
        generator = ScriptedGenerator("{}", enabled=False)
        scorer = AIScorer(generator)

        assert scorer.available is False
        assert await scorer.score(TESLA, sector_baseline("Automotive"), []) is None
        assert generator.calls == []

    @pytest.mark.asyncio
    async def test_no_generator_declines(self):
        assert await AIScorer(None).score(TESLA, sector_baseline("Automotive"), []) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        ProviderCallError("503", source_name="scripted", status_code=503),
        MalformedResponseError("garbled", source_name="scripted"),
        RuntimeError("unexpected"),
    ])
    async def test_errors_decline(self, error):
        scorer = AIScorer(ScriptedGenerator(error=error))
        assert await scorer.score(TESLA, sector_baseline("Automotive"), []) is None

    @pytest.mark.asyncio
    async def test_unparseable_answer_declines(self):
        scorer = AIScorer(ScriptedGenerator("Scores are generally good."))
        assert await scorer.score(TESLA, sector_baseline("Automotive"), []) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", [123, {"environmental": 90}, None])
    async def test_non_text_answer_declines(self, answer):
        scorer = AIScorer(ScriptedGenerator(answer))
        assert await scorer.score(TESLA, sector_baseline("Automotive"), []) is None
