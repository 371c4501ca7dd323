"""
Scoring Engine - Data Models.

============================================================
RESPONSIBILITY
============================================================
Types shared by every stage of the impact scoring pipeline.

- ImpactDimension: the 8 fixed scoring axes
- ImpactCategory: named views aggregating a subset of axes
- ImpactScoreVector: total, immutable 0-100 score per axis
- CompanyProfile: caller-owned company identity
- ImpactScoreResult: what compute_impact_scores returns

============================================================
INVARIANTS
============================================================
- A vector always carries all 8 dimensions, each an int in [0, 100]
- Vectors, profiles, results and news items are frozen
- Symbols are upper-case everywhere

============================================================
"""

import math
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Iterator, Mapping, Optional

from news.models import NewsItem


SCORE_MIN = 0
SCORE_MAX = 100
DEFAULT_DIMENSION_SCORE = 70


def clamp_score(value: float) -> int:
    """Round half-up and clamp to [0, 100]."""
    rounded = math.floor(value + 0.5)
    return int(max(SCORE_MIN, min(SCORE_MAX, rounded)))


def canonical_symbol(symbol: str) -> str:
    return symbol.strip().upper()


# ============================================================
# ENUMS
# ============================================================

class ImpactDimension(Enum):
    """The 8 impact axes. Values are the wire keys."""
    ENVIRONMENTAL = "environmental"
    LABOR_PRACTICES = "laborPractices"
    SOCIAL_IMPACT = "socialImpact"
    GENDER_EQUALITY = "genderEquality"
    PAY_EQUALITY = "payEquality"
    CORPORATE_IMPACT = "corporateImpact"
    SHORT_TERM_PROFITABILITY = "shortTermProfitability"
    LONG_TERM_PROFITABILITY = "longTermProfitability"

    @property
    def field_name(self) -> str:
        """Attribute name on ImpactScoreVector."""
        return self.name.lower()


class ImpactCategory(Enum):
    """A named view over the dimensions."""
    BROAD = "broad"
    ENVIRONMENTAL = "environmental"
    SOCIAL = "social"
    RACIAL_JUSTICE = "racialJustice"
    WORKPLACE_EQUALITY = "workplaceEquality"
    GENDER_EQUALITY = "genderEquality"

    @classmethod
    def parse(cls, value: Any) -> "ImpactCategory":
        """Map a raw category id to a member; unknown or empty means BROAD."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip():
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return cls.BROAD


class ScoreSource(Enum):
    """Which scorer produced a vector."""
    AI = "ai"
    HEURISTIC = "heuristic"


# ============================================================
# SCORE VECTOR
# ============================================================

@dataclass(frozen=True)
class ImpactScoreVector:
    """
    Total mapping of ImpactDimension -> int in [0, 100].

    Totality is structural: every dimension is a required field.
    Out-of-range or fractional inputs are rounded and clamped.
    """
    environmental: int
    labor_practices: int
    social_impact: int
    gender_equality: int
    pay_equality: int
    corporate_impact: int
    short_term_profitability: int
    long_term_profitability: int

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"{f.name} must be numeric, got {value!r}")
            if not math.isfinite(value):
                raise ValueError(f"{f.name} must be finite, got {value!r}")
            object.__setattr__(self, f.name, clamp_score(value))

    @classmethod
    def uniform(cls, value: int = DEFAULT_DIMENSION_SCORE) -> "ImpactScoreVector":
        return cls(**{d.field_name: value for d in ImpactDimension})

    @classmethod
    def from_mapping(
        cls,
        scores: Mapping[Any, float],
        default: int = DEFAULT_DIMENSION_SCORE,
    ) -> "ImpactScoreVector":
        """
        Build from a partial mapping keyed by ImpactDimension or wire key.

        Missing dimensions take ``default``.
        """
        values = {}
        for dimension in ImpactDimension:
            if dimension in scores:
                values[dimension.field_name] = scores[dimension]
            elif dimension.value in scores:
                values[dimension.field_name] = scores[dimension.value]
            else:
                values[dimension.field_name] = default
        return cls(**values)

    def __getitem__(self, dimension: ImpactDimension) -> int:
        return getattr(self, dimension.field_name)

    def __iter__(self) -> Iterator[tuple[ImpactDimension, int]]:
        for dimension in ImpactDimension:
            yield dimension, self[dimension]

    def values(self) -> list[int]:
        return [score for _, score in self]

    def with_scores(self, updates: Mapping[ImpactDimension, float]) -> "ImpactScoreVector":
        """Copy with some dimensions replaced (clamped)."""
        return replace(self, **{d.field_name: v for d, v in updates.items()})

    def to_dict(self) -> dict[str, int]:
        """Wire form, keyed by camelCase dimension id."""
        return {dimension.value: score for dimension, score in self}


# ============================================================
# COMPANY PROFILE
# ============================================================

@dataclass(frozen=True)
class CompanyProfile:
    """
    Company identity used as scoring input.

    Owned by the caller; the scoring engine never persists it.
    """
    symbol: str
    name: str
    sector: str = "Unknown"
    industry: str = "Unknown"
    description: str = ""
    logo: Optional[str] = None
    market_cap: Optional[float] = None
    pe_ratio: Optional[float] = None
    dividend_yield: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "symbol", canonical_symbol(self.symbol))
        if not self.symbol:
            raise ValueError("symbol must not be empty")

    @classmethod
    def degenerate(cls, symbol: str) -> "CompanyProfile":
        """Placeholder profile for a symbol nothing is known about."""
        symbol = canonical_symbol(symbol)
        return cls(
            symbol=symbol,
            name=symbol,
            sector="Unknown",
            industry="Unknown",
            description=f"Stock symbol {symbol}",
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "symbol": self.symbol,
            "name": self.name,
            "description": self.description,
            "sector": self.sector,
            "industry": self.industry,
        }
        if self.logo is not None:
            data["logo"] = self.logo
        if self.market_cap is not None:
            data["marketCap"] = self.market_cap
        if self.pe_ratio is not None:
            data["peRatio"] = self.pe_ratio
        if self.dividend_yield is not None:
            data["dividendYield"] = self.dividend_yield
        return data


# ============================================================
# RESULT
# ============================================================

@dataclass(frozen=True)
class ImpactScoreResult:
    """Output of one scoring computation (fresh or cached)."""
    scores: ImpactScoreVector
    overall_impact_score: int
    news: tuple[NewsItem, ...]
    scored_by: ScoreSource

    def to_dict(self) -> dict[str, Any]:
        return {
            "scores": self.scores.to_dict(),
            "overallImpactScore": self.overall_impact_score,
            "news": [item.to_dict() for item in self.news],
            "scoredBy": self.scored_by.value,
        }
