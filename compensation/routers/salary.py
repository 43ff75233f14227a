"""Routes for salary periods, records, batch edits and reports."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from compensation.core.logger import get_logger
from compensation.schemas import (
    ArchiveRequest,
    ArchiveResponse,
    BatchSaveRequest,
    BatchSaveResponse,
    CalculationResultOut,
    CreatePeriodRequest,
    DimensionInputIn,
    PeriodOut,
    SalaryMemberOut,
    SalaryRecordOut,
    SalaryRecordUpdate,
    SalaryReportOut,
    SalaryStatsOut,
    ViolationOut,
    ok,
)
from compensation.services import SalaryReportService, SalaryService

from .dependencies import get_report_service, get_salary_service

router = APIRouter(prefix="/api/salary", tags=["salary"])
LOGGER = get_logger(__name__)


def _records_out(records) -> list[SalaryRecordOut]:
    return [SalaryRecordOut.model_validate(record) for record in records]


@router.post("/periods")
def create_period(
    body: CreatePeriodRequest,
    service: SalaryService = Depends(get_salary_service),
):
    records = service.create_period(body.period)
    return ok(_records_out(records))


@router.get("/periods")
def list_periods(service: SalaryService = Depends(get_salary_service)):
    return ok([PeriodOut.model_validate(summary) for summary in service.get_period_list()])


@router.get("/periods/latest")
def latest_period(service: SalaryService = Depends(get_salary_service)):
    return ok({"period": service.get_latest_active_period()})


@router.post("/calculate-distribute")
def calculate_and_distribute(
    period: str = Query(...),
    service: SalaryService = Depends(get_salary_service),
):
    return ok(_records_out(service.calculate_and_distribute(period)))


@router.post("/calculate-member")
def calculate_member(
    body: DimensionInputIn,
    service: SalaryService = Depends(get_salary_service),
):
    result = service.calculate_member_points(body.to_domain())
    return ok(CalculationResultOut.model_validate(result))


@router.get("/list")
def list_records(
    period: str | None = Query(default=None),
    service: SalaryService = Depends(get_salary_service),
):
    return ok(_records_out(service.get_salary_list(period)))


@router.get("/members")
def list_members(
    period: str | None = Query(default=None),
    service: SalaryService = Depends(get_salary_service),
):
    rows = service.get_salary_members(period)
    return ok(
        [
            SalaryMemberOut(
                user_id=row.member.id,
                username=row.member.username,
                role=row.member.role.value,
                record=SalaryRecordOut.model_validate(row.record) if row.record else None,
            )
            for row in rows
        ]
    )


@router.put("/{record_id}")
def update_record(
    record_id: int,
    body: SalaryRecordUpdate,
    service: SalaryService = Depends(get_salary_service),
):
    record = service.update_salary_record(record_id, body.changes(), version=body.version)
    return ok(SalaryRecordOut.model_validate(record))


@router.post("/batch-save")
def batch_save(
    body: BatchSaveRequest,
    service: SalaryService = Depends(get_salary_service),
):
    result = service.batch_save_with_validation(
        [record.to_edit() for record in body.records],
        body.operator_id,
        body.period,
    )
    response = BatchSaveResponse(
        success=result.success,
        saved_records=_records_out(result.saved_records),
        global_error=result.global_error,
        errors=[ViolationOut.model_validate(violation) for violation in result.errors],
        violating_user_ids=list(result.violating_user_ids),
    )
    # A rejected batch is a normal outcome for the editing UI, not an HTTP error.
    return {"success": result.success, "data": response.model_dump(mode="json", by_alias=True)}


@router.post("/archive")
def archive(
    body: ArchiveRequest,
    service: SalaryService = Depends(get_salary_service),
):
    count = service.archive_salary_records(body.operator_id, body.period)
    return ok(ArchiveResponse(period=body.period, archived_count=count))


@router.get("/report")
def report(
    period: str = Query(...),
    service: SalaryReportService = Depends(get_report_service),
):
    return ok(SalaryReportOut.model_validate(service.generate_salary_report(period)))


@router.get("/stats")
def stats(
    period: str = Query(...),
    service: SalaryReportService = Depends(get_report_service),
):
    return ok(SalaryStatsOut.model_validate(service.get_salary_stats(period)))
