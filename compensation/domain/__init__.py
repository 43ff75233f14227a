"""Framework-free value objects for the compensation engine."""

from .salary import (
    BatchSaveResult,
    BatchValidationResult,
    CalculationResult,
    CheckinTier,
    DimensionInput,
    FieldViolation,
    PeriodSummary,
    RotationThresholds,
    SalaryConfigSnapshot,
    SalaryRecordEdit,
)

__all__ = [
    "BatchSaveResult",
    "BatchValidationResult",
    "CalculationResult",
    "CheckinTier",
    "DimensionInput",
    "FieldViolation",
    "PeriodSummary",
    "RotationThresholds",
    "SalaryConfigSnapshot",
    "SalaryRecordEdit",
]
