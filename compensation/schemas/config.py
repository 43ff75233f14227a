"""Bodies for the configuration endpoints."""
from __future__ import annotations

from pydantic import ConfigDict, Field, RootModel
from pydantic.alias_generators import to_camel

from compensation.domain import CheckinTier

from .salary import CamelModel


class ConfigMap(RootModel[dict[str, str | int]]):
    """Flat ``key -> value`` map; values are stored as text."""


class CheckinTierSchema(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    min_count: int
    max_count: int
    points: int
    label: str = ""

    def to_domain(self) -> CheckinTier:
        return CheckinTier(
            min_count=self.min_count,
            max_count=self.max_count,
            points=self.points,
            label=self.label,
        )


class CheckinTiersRequest(CamelModel):
    tiers: list[CheckinTierSchema] = Field(default_factory=list)


class RotationThresholdsOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    promotion_points_threshold: int
    demotion_salary_threshold: int
    demotion_consecutive_months: int
    dismissal_points_threshold: int
    dismissal_consecutive_months: int
