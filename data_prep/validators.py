"""
Data quality checks for projection sets before they reach the engine.

Catches problems early:
- Missing baseline or scenario (the engine would refuse to compare)
- Degenerate projections (no positive EBITDA or net income)
- Net income unusable so the EBITDA proxy kicks in
- Discount / growth rates outside plausible bounds
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from core.config import DEFAULT_CONFIG, EngineConfig
from core.schema import SCENARIO_KEYS, ROIProjectionSet
from core.utils import to_float


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for a projection set."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  ✗ {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not lines:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def validate_projection_set(
    projection_set: ROIProjectionSet,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> ValidationResult:
    """
    Run all validation checks on a projection set.
    Returns a ValidationResult with errors (blocking) and warnings (informational).
    """
    result = ValidationResult()

    # --- Presence ---
    if projection_set.baseline is None:
        result.errors.append("Baseline projection is missing.")
    if projection_set.resolve_scenario() is None:
        result.errors.append(
            "No scenario projection (realistic, optimistic or pessimistic) is present."
        )

    # --- Discount rate ---
    rate = to_float(projection_set.discount_rate)
    if rate is None:
        result.warnings.append(
            f"Discount rate is missing or not a number; "
            f"{config.default_discount_rate:.2%} will be used."
        )
    elif rate <= -1.0:
        result.errors.append(f"Discount rate {rate} is at or below -100%.")
    elif rate > 1.0:
        result.warnings.append(
            f"Discount rate {rate} > 1.0 — check if it is in percent vs decimal form."
        )

    # --- Per-projection ---
    for name in SCENARIO_KEYS:
        proj = projection_set.get(name)
        if proj is None:
            continue

        if proj.is_degenerate:
            result.warnings.append(
                f"{name}: no positive EBITDA or net income; operating cash flows will be "
                f"zero or negative (only non-positive figures to build them from)."
            )

        net_income = to_float(proj.net_income)
        ebitda = to_float(proj.ebitda)
        if (net_income is None or net_income <= 0) and ebitda is not None:
            result.warnings.append(
                f"{name}: net income unavailable or non-positive; using EBITDA x "
                f"{config.ebitda_to_fcf} as free-cash-flow proxy."
            )

        growth = to_float(proj.growth_rate)
        if growth is not None:
            if growth > 1.0:
                result.warnings.append(
                    f"{name}: growth rate {growth} > 1.0 — check percent vs decimal form."
                )
            elif growth > config.terminal_growth_cap:
                result.warnings.append(
                    f"{name}: growth rate {growth:.2%} exceeds the terminal growth cap; "
                    f"{config.terminal_growth_cap:.2%} is used for the terminal value."
                )

        multiple = to_float(proj.terminal_multiple)
        if multiple is not None and multiple < 0:
            result.warnings.append(f"{name}: negative terminal multiple {multiple}.")

        if proj.initial_investment is not None and to_float(proj.initial_investment) is None:
            result.warnings.append(f"{name}: initial investment is not a number; 0 will be used.")

    return result
