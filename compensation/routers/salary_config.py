"""Routes for reading and saving business configuration."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from compensation.schemas import (
    CheckinTierSchema,
    CheckinTiersRequest,
    ConfigMap,
    RotationThresholdsOut,
    ok,
)
from compensation.services import SalaryConfigService

from .dependencies import get_config_service

router = APIRouter(prefix="/api/salary-config", tags=["salary-config"])


@router.get("")
def get_config(service: SalaryConfigService = Depends(get_config_service)):
    return ok(service.get_all_config())


@router.put("")
def save_config(
    body: ConfigMap,
    service: SalaryConfigService = Depends(get_config_service),
):
    service.save_config(body.root)
    return ok(service.get_all_config())


@router.get("/checkin-tiers")
def get_checkin_tiers(service: SalaryConfigService = Depends(get_config_service)):
    return ok([CheckinTierSchema.model_validate(tier) for tier in service.get_checkin_tiers()])


@router.put("/checkin-tiers")
def save_checkin_tiers(
    body: CheckinTiersRequest,
    service: SalaryConfigService = Depends(get_config_service),
):
    service.save_checkin_tiers(tier.to_domain() for tier in body.tiers)
    return ok([CheckinTierSchema.model_validate(tier) for tier in service.get_checkin_tiers()])


@router.get("/rotation-thresholds")
def get_rotation_thresholds(service: SalaryConfigService = Depends(get_config_service)):
    return ok(RotationThresholdsOut.model_validate(service.get_rotation_thresholds()))
