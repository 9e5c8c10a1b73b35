"""
Boundary models for projection payloads.

Projections arrive as loosely-typed JSON (request bodies, stored simulation
results, estimation-service answers). Numbers may be strings, blanks or
garbage; like a JS Number() they coerce to a float when they can and to
"missing" when they can't. Nothing here raises on bad numeric content.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from core.schema import Projection, ROIProjectionSet
from core.utils import to_float


class ProjectionPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    ebitda: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("ebitda", "EBITDA", "Ebitda")
    )
    net_income: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("netIncome", "net_income", "NetIncome")
    )
    initial_investment: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("initialInvestment", "initial_investment", "InitialInvestment"),
    )
    growth_rate: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("growthRate", "growth_rate", "GrowthRate")
    )
    terminal_multiple: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("terminalMultiple", "terminal_multiple", "TerminalMultiple"),
    )

    @field_validator("*", mode="before")
    @classmethod
    def _lenient_number(cls, value: Any) -> Optional[float]:
        return to_float(value)

    def to_projection(self) -> Projection:
        return Projection(
            ebitda=self.ebitda,
            net_income=self.net_income,
            initial_investment=self.initial_investment,
            growth_rate=self.growth_rate,
            terminal_multiple=self.terminal_multiple,
        )


class ProjectionSetPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    baseline: Optional[ProjectionPayload] = None
    optimistic: Optional[ProjectionPayload] = None
    realistic: Optional[ProjectionPayload] = None
    pessimistic: Optional[ProjectionPayload] = None
    discount_rate: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("discountRate", "discount_rate")
    )

    @field_validator("baseline", "optimistic", "realistic", "pessimistic", mode="before")
    @classmethod
    def _mapping_or_none(cls, value: Any) -> Any:
        # a scenario that is not an object is treated as absent
        if isinstance(value, (Mapping, ProjectionPayload)):
            return value
        return None

    @field_validator("discount_rate", mode="before")
    @classmethod
    def _lenient_rate(cls, value: Any) -> Optional[float]:
        return to_float(value)

    def to_projection_set(self) -> ROIProjectionSet:
        def conv(p: Optional[ProjectionPayload]) -> Optional[Projection]:
            return p.to_projection() if p is not None else None

        return ROIProjectionSet(
            baseline=conv(self.baseline),
            optimistic=conv(self.optimistic),
            realistic=conv(self.realistic),
            pessimistic=conv(self.pessimistic),
            discount_rate=self.discount_rate,
        )
