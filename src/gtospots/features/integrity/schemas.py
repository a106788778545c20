from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...core.models import BatchReport, HandIntent, NodeIntent, TurnType, ValidationResult

__all__ = [
    "BatchReportPayload",
    "FailurePayload",
    "FrequencyPayload",
    "FrequencyRequest",
    "RepairPayload",
    "ValidationPayload",
]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ValidationPayload(_APIModel):
    spot_id: str | None = Field(default=None, alias="id")
    ok: bool
    errors: list[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, spot: Any, result: ValidationResult) -> ValidationPayload:
        spot_id = spot.get("id") if isinstance(spot, dict) else None
        return cls(
            spot_id=spot_id if isinstance(spot_id, str) else None,
            ok=result.ok,
            errors=list(result.errors),
        )


class FailurePayload(_APIModel):
    spot_id: str = Field(alias="id")
    errors: list[str]


class BatchReportPayload(_APIModel):
    total: int
    ok: int
    bad: int
    failures: list[FailurePayload] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: BatchReport) -> BatchReportPayload:
        return cls(
            total=report.total,
            ok=report.ok,
            bad=report.bad,
            failures=[FailurePayload(spot_id=item.spot_id, errors=list(item.errors)) for item in report.failures],
        )


class RepairPayload(_APIModel):
    spot: Any
    validation: ValidationPayload
    changed: bool


class FrequencyRequest(_APIModel):
    hand_intent: HandIntent
    turn_type: TurnType
    node_intent: NodeIntent
    num_options: int = Field(ge=0, le=12)

    @field_validator("hand_intent", "turn_type", "node_intent", mode="before")
    @classmethod
    def _normalize_key(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class FrequencyPayload(_APIModel):
    hand_intent: HandIntent
    turn_type: TurnType
    node_intent: NodeIntent
    freq: list[float]
