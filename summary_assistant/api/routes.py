"""HTTP route handlers for summary generation, audits and exports."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response

from summary_assistant.api.deps import Services, get_services
from summary_assistant.api.schemas import (
    DateRangeModel,
    DiffResponseModel,
    ExportRequestModel,
    ExportResponseModel,
    ExportStatsModel,
    GenerateSummaryRequestModel,
    GenerateSummaryResponseModel,
    MonthAuditResponseModel,
    MonthModel,
)
from summary_assistant.api.security import Identity, require_capability
from summary_assistant.audit.classifier import ChangeFilter
from summary_assistant.audit.export import ExportError
from summary_assistant.audit.status import AuditStatus
from summary_assistant.constants import Capabilities
from summary_assistant.summarizer.models import ErrorKind, SummaryError


router = APIRouter()

_ERROR_STATUS = {
    ErrorKind.MISSING_CONFIG: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
}


def _summary_error(error: SummaryError) -> HTTPException:
    detail = {"error": error.kind.value, "details": error.message}
    if error.status_code is not None:
        detail["upstream_status"] = error.status_code
    return HTTPException(
        status_code=_ERROR_STATUS.get(error.kind, status.HTTP_502_BAD_GATEWAY),
        detail=detail,
    )


def _export_error(error: ExportError, status_code: int) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={"error": error.code, "details": error.message},
    )


def _validate_month(year: int, month: int) -> None:
    if not 1 <= month <= 12:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_input", "details": "`month` must be 1-12."},
        )


@router.post("/v1/summaries", response_model=GenerateSummaryResponseModel)
async def generate_summary(
    body: GenerateSummaryRequestModel,
    identity: Identity = Depends(require_capability(Capabilities.EDIT)),
    services: Services = Depends(get_services),
):
    result = await services.summaries.generate_for_post(
        identity.user_id, body.post_id, body.content, body.regions
    )
    if isinstance(result, SummaryError):
        raise _summary_error(result)
    return GenerateSummaryResponseModel(summary=result.summary, word_count=result.word_count)


@router.get("/v1/audit/months", response_model=List[MonthModel])
async def audit_months(
    identity: Identity = Depends(require_capability(Capabilities.MANAGE)),
    services: Services = Depends(get_services),
):
    return [MonthModel(year=year, month=month) for year, month in services.audit.available_months()]


@router.get("/v1/audit/latest", response_model=MonthAuditResponseModel)
async def audit_latest(
    identity: Identity = Depends(require_capability(Capabilities.MANAGE)),
    services: Services = Depends(get_services),
):
    latest = services.audit.most_recent_month()
    if latest is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "no_posts", "details": "Geen berichten gevonden voor audit"},
        )
    return MonthAuditResponseModel.from_domain(services.audit.analyze_month(*latest))


@router.get("/v1/audit/{year}/{month}", response_model=MonthAuditResponseModel)
async def audit_month(
    year: int,
    month: int,
    status_filter: Optional[AuditStatus] = Query(default=None, alias="status"),
    change: Optional[ChangeFilter] = Query(default=None),
    identity: Identity = Depends(require_capability(Capabilities.MANAGE)),
    services: Services = Depends(get_services),
):
    _validate_month(year, month)
    audit = services.audit.analyze_month(year, month, status_filter, change)
    return MonthAuditResponseModel.from_domain(audit)


@router.get("/v1/audit/posts/{post_id}/diff", response_model=DiffResponseModel)
async def audit_post_diff(
    post_id: int,
    identity: Identity = Depends(require_capability(Capabilities.MANAGE)),
    services: Services = Depends(get_services),
):
    diff = services.audit.diff_post(post_id)
    if diff is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "invalid_input", "details": f"Bericht {post_id} niet gevonden"},
        )
    return DiffResponseModel(before=diff.before, after=diff.after)


@router.post("/v1/exports/training-data", response_model=ExportResponseModel)
async def create_training_export(
    body: ExportRequestModel,
    identity: Identity = Depends(require_capability(Capabilities.MANAGE)),
    services: Services = Depends(get_services),
):
    data = services.exporter.generate(body.start_date, body.end_date, body.limit)
    if isinstance(data, ExportError):
        raise _export_error(data, status.HTTP_404_NOT_FOUND)

    prepared = services.exports.prepare(data.entries)
    if isinstance(prepared, ExportError):
        raise _export_error(prepared, status.HTTP_404_NOT_FOUND)

    return ExportResponseModel(
        message=data.message,
        download_key=prepared.download_key,
        filename=prepared.filename,
        line_count=prepared.line_count,
        file_size=prepared.file_size,
        stats=ExportStatsModel(
            total_posts=data.stats.total_posts,
            processed=data.stats.processed,
            skipped=data.stats.skipped,
            date_range=DateRangeModel(start=data.stats.date_start, end=data.stats.date_end),
        ),
    )


@router.get("/v1/exports/{download_key}")
async def download_training_export(
    download_key: str,
    identity: Identity = Depends(require_capability(Capabilities.MANAGE)),
    services: Services = Depends(get_services),
):
    stored = services.exports.take(download_key)
    if isinstance(stored, ExportError):
        raise _export_error(stored, status.HTTP_404_NOT_FOUND)
    return Response(
        content=stored.content,
        media_type="application/jsonl",
        headers={
            "Content-Disposition": f'attachment; filename="{stored.filename}"',
            "Cache-Control": "no-cache, must-revalidate",
        },
    )
