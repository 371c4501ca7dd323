"""
Scoring Engine - AI Scorer.

============================================================
RESPONSIBILITY
============================================================
Asks a generative text model to re-score a company, seeded with
the sector baseline and recent news.

- Prompt construction (company identity, news, baseline seed)
- Response parsing (first balanced JSON object in the text)
- Failure mapping: every failure is "None", never an exception

============================================================
RESPONSE CONTRACT
============================================================
- Recognized dimension keys with finite numeric values overwrite
  the baseline, rounded and clamped to [0, 100]
- Missing, unknown or non-numeric keys keep the baseline value
- No parseable JSON object -> None

============================================================
"""

import json
import logging
import math
from typing import Any, Optional, Sequence

from genai import BaseTextGenerator, GenerationError, extract_json_object
from news.models import NewsItem

from .base import BaseImpactScorer
from .models import CompanyProfile, ImpactDimension, ImpactScoreVector, ScoreSource


logger = logging.getLogger(__name__)


MAX_PROMPT_ARTICLES = 10
TEMPERATURE = 0.7
MAX_OUTPUT_TOKENS = 500


def _news_section(profile: CompanyProfile, news: Sequence[NewsItem]) -> str:
    if not news:
        return (
            f"No recent news available. Based on your knowledge about {profile.name} "
            f"and companies in the {profile.sector} sector, provide impact scores."
        )

    recent = sorted(news, key=lambda item: item.published_at, reverse=True)[:MAX_PROMPT_ARTICLES]
    articles = "\n\n".join(
        f'{i + 1}. "{item.title}" ({item.source}, {item.published_at:%Y-%m-%d})\n'
        f"   {item.description}"
        for i, item in enumerate(recent)
    )
    return (
        "Recent news articles about this company:\n\n"
        f"{articles}\n\n"
        "Based on these news articles AND your knowledge about the company, provide impact scores."
    )


def build_scoring_prompt(
    profile: CompanyProfile,
    baseline: ImpactScoreVector,
    news: Sequence[NewsItem],
) -> str:
    """Build the scoring prompt for one company."""
    name = profile.name
    seed = json.dumps(baseline.to_dict(), indent=2)
    schema = ",\n".join(f'  "{d.value}": <score 0-100>' for d in ImpactDimension)

    return f"""
You are an ESG (Environmental, Social, Governance) analyst helping retail investors understand the real-world impact of companies.

IMPORTANT: Analyze THIS SPECIFIC COMPANY based on its unique characteristics and reputation.

Company: {name} ({profile.symbol})
Sector: {profile.sector}
Industry: {profile.industry}
Description: {profile.description}

{_news_section(profile, news)}

Provide SPECIFIC impact scores on a 0-100 scale for THIS COMPANY ({name}).
DO NOT give generic sector scores - evaluate {name}'s actual track record.

Consider {name}'s specific:
- Environmental initiatives, carbon footprint, and climate commitments
- Labor practices, workplace safety, and employee treatment
- Social impact, community involvement, and data privacy
- Gender diversity in leadership and workforce
- Pay equity and compensation fairness
- Corporate governance, board independence, and transparency
- Financial performance and profitability trends

Starting baseline (sector averages - ADJUST for {name}'s reality):
{seed}

Think about {name}'s ACTUAL reputation:
- What is this company known for?
- What controversies or achievements has it had?
- How does it compare to peers?

Return ONLY a valid JSON object (no explanation, no markdown, no code blocks):
{{
{schema}
}}
""".strip()


def _is_score(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def parse_scoring_response(
    text: str,
    baseline: ImpactScoreVector,
) -> Optional[ImpactScoreVector]:
    """Overlay the model's scores on the baseline; None if no JSON object."""
    parsed = extract_json_object(text)
    if parsed is None:
        return None

    updates = {
        dimension: parsed[dimension.value]
        for dimension in ImpactDimension
        if _is_score(parsed.get(dimension.value))
    }
    return baseline.with_scores(updates)


class AIScorer(BaseImpactScorer):
    """
    LLM-backed scorer.

    Declines (returns None) when the generator is disabled, the call
    fails, or the answer holds no JSON object.
    """

    def __init__(
        self,
        generator: Optional[BaseTextGenerator],
        temperature: float = TEMPERATURE,
        max_output_tokens: int = MAX_OUTPUT_TOKENS,
    ) -> None:
        self.generator = generator
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

    @property
    def source(self) -> ScoreSource:
        return ScoreSource.AI

    @property
    def available(self) -> bool:
        return self.generator is not None and self.generator.enabled

    async def score(
        self,
        profile: CompanyProfile,
        baseline: ImpactScoreVector,
        news: Sequence[NewsItem],
    ) -> Optional[ImpactScoreVector]:
        if not self.available:
            logger.info(f"[AIScorer] No AI provider configured, skipping AI scoring for {profile.symbol}")
            return None

        prompt = build_scoring_prompt(profile, baseline, news)
        logger.info(f"[AIScorer] Requesting AI analysis for {profile.symbol}")

        try:
            text = await self.generator.generate(
                prompt,
                temperature=self.temperature,
                max_output_tokens=self.max_output_tokens,
            )
        except GenerationError as e:
            logger.error(f"[AIScorer] AI scoring failed for {profile.symbol}: {e}")
            return None
        except Exception as e:
            logger.error(f"[AIScorer] Unexpected error scoring {profile.symbol}: {e}", exc_info=True)
            return None

        scores = parse_scoring_response(text, baseline)
        if scores is None:
            logger.error(f"[AIScorer] Could not parse AI response for {profile.symbol}: {text[:200]!r}")
            return None

        logger.info(f"[AIScorer] AI scores for {profile.symbol}: {scores.to_dict()}")
        return scores
