"""
Competitive index — four peer-benchmarking metrics folded into one 0-100 score.

Weights:
  market share          30%   (0-100)
  NPS                   25%   (0-100)
  win/loss ratio        25%   (0-100)
  competitor benchmark  20%   (0-150)

Inputs are trusted to be in range. Only the final weighted sum is clamped to
[0, 100] before rounding; individual terms are not.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict

from core.utils import clamp, finite_or, round_half_away

COMPETITIVE_INDEX_WEIGHTS: Dict[str, float] = {
    "market_share": 0.30,
    "nps_score": 0.25,
    "win_loss_ratio": 0.25,
    "competitor_benchmark": 0.20,
}


@dataclass(frozen=True)
class CompetitiveIndexInputs:
    market_share: float = 0.0
    nps_score: float = 0.0
    win_loss_ratio: float = 0.0
    competitor_benchmark: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "marketShare": self.market_share,
            "npsScore": self.nps_score,
            "winLossRatio": self.win_loss_ratio,
            "competitorBenchmark": self.competitor_benchmark,
        }


@dataclass(frozen=True)
class CompetitiveIndexScore:
    score: int
    breakdown: CompetitiveIndexInputs

    def to_dict(self) -> Dict:
        return {"competitiveIndexScore": self.score, "breakdown": self.breakdown.to_dict()}


def _coerce_inputs(market_share, nps_score, win_loss_ratio, competitor_benchmark) -> CompetitiveIndexInputs:
    return CompetitiveIndexInputs(
        market_share=finite_or(market_share, 0.0),
        nps_score=finite_or(nps_score, 0.0),
        win_loss_ratio=finite_or(win_loss_ratio, 0.0),
        competitor_benchmark=finite_or(competitor_benchmark, 0.0),
    )


def _score(inputs: CompetitiveIndexInputs) -> int:
    weighted = sum(COMPETITIVE_INDEX_WEIGHTS[k] * v for k, v in asdict(inputs).items())
    return int(round_half_away(clamp(weighted, 0.0, 100.0), 0))


def calculate_competitive_index(
    market_share: float,
    nps_score: float,
    win_loss_ratio: float,
    competitor_benchmark: float,
) -> int:
    """Weighted 0-100 competitive index. Non-finite inputs count as 0."""
    return _score(_coerce_inputs(market_share, nps_score, win_loss_ratio, competitor_benchmark))


def competitive_index_report(
    market_share: float,
    nps_score: float,
    win_loss_ratio: float,
    competitor_benchmark: float,
) -> CompetitiveIndexScore:
    """Score plus the inputs it was built from, as stored by the reporting layer."""
    inputs = _coerce_inputs(market_share, nps_score, win_loss_ratio, competitor_benchmark)
    return CompetitiveIndexScore(score=_score(inputs), breakdown=inputs)
