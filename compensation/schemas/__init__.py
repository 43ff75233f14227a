"""Pydantic schemas for request and response payloads."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from .config import CheckinTierSchema, CheckinTiersRequest, ConfigMap, RotationThresholdsOut
from .salary import (
    ArchiveRequest,
    ArchiveResponse,
    BatchRecordIn,
    BatchSaveRequest,
    BatchSaveResponse,
    CalculationResultOut,
    CamelModel,
    CreatePeriodRequest,
    DimensionInputIn,
    MemberSalaryDetailOut,
    MemberSalaryRankOut,
    PeriodOut,
    SalaryMemberOut,
    SalaryRecordOut,
    SalaryRecordUpdate,
    SalaryReportOut,
    SalaryStatsOut,
    ViolationOut,
)


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_dump(item) for item in value]
    return value


def ok(data: Any = None) -> dict[str, Any]:
    """Wrap ``data`` in the ``{"success": true, "data": ...}`` envelope."""

    return {"success": True, "data": _dump(data)}


__all__ = [
    "ArchiveRequest",
    "ArchiveResponse",
    "BatchRecordIn",
    "BatchSaveRequest",
    "BatchSaveResponse",
    "CalculationResultOut",
    "CamelModel",
    "CheckinTierSchema",
    "CheckinTiersRequest",
    "ConfigMap",
    "CreatePeriodRequest",
    "DimensionInputIn",
    "MemberSalaryDetailOut",
    "MemberSalaryRankOut",
    "PeriodOut",
    "RotationThresholdsOut",
    "SalaryMemberOut",
    "SalaryRecordOut",
    "SalaryRecordUpdate",
    "SalaryReportOut",
    "SalaryStatsOut",
    "ViolationOut",
    "ok",
]
