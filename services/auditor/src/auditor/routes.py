"""
Auditor API router for ModSentinel.

Read endpoints for the reference dataset status and cached participant
classifications, plus the session feed through which the host publishes
its roster to the in-memory session provider.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request, Response, status

from ms_common.models import (
    ClassificationResult,
    DatasetStatus,
    DisallowedDetectedEvent,
    ParticipantRecord,
)

from auditor.runtime import AuditorRuntime
from auditor.schemas import (
    ClassifyResponse,
    RefreshResponse,
    RosterEntryRequest,
    SessionJoinRequest,
    SessionStateResponse,
    SummaryResponse,
)

router = APIRouter(prefix="/api/v1", tags=["auditor"])


def _runtime(request: Request) -> AuditorRuntime:
    return request.app.state.runtime


def _session_state(runtime: AuditorRuntime) -> SessionStateResponse:
    return SessionStateResponse(
        in_session=runtime.provider.in_session,
        session_name=runtime.provider.current_session_name(),
        participant_count=len(runtime.provider.roster()),
    )


# ── dataset ──


@router.get("/dataset", response_model=DatasetStatus)
async def dataset_status(request: Request) -> DatasetStatus:
    return _runtime(request).store.status()


@router.post("/dataset/refresh", response_model=RefreshResponse, status_code=status.HTTP_202_ACCEPTED)
async def refresh_dataset(request: Request) -> RefreshResponse:
    task = _runtime(request).loader.fetch_data()
    return RefreshResponse(started=task is not None)


# ── classification queries ──


@router.get("/summary", response_model=SummaryResponse)
async def summary(request: Request) -> SummaryResponse:
    runtime = _runtime(request)
    return SummaryResponse(
        in_session=runtime.provider.in_session,
        session_name=runtime.provider.current_session_name(),
        summary=runtime.classifier.get_summary(),
    )


@router.get("/participants", response_model=list[ClassificationResult])
async def list_participants(request: Request) -> list[ClassificationResult]:
    return _runtime(request).classifier.get_cached_results()


@router.get("/participants/flagged", response_model=list[ClassificationResult])
async def list_flagged(request: Request) -> list[ClassificationResult]:
    return _runtime(request).classifier.get_flagged_results()


@router.get("/participants/by-actor/{actor_number}", response_model=ClassificationResult)
async def get_by_actor(actor_number: int, request: Request) -> ClassificationResult:
    result = _runtime(request).classifier.get_cached_result_by_actor(actor_number)
    if result is None:
        raise HTTPException(status_code=404, detail="Participant not found")
    return result


@router.get("/participants/{handle}", response_model=ClassificationResult)
async def get_participant(handle: str, request: Request) -> ClassificationResult:
    result = _runtime(request).classifier.get_cached_result(handle)
    if result is None:
        raise HTTPException(status_code=404, detail="Participant not found")
    return result


@router.post("/classify", response_model=ClassifyResponse)
async def classify_now(request: Request) -> ClassifyResponse:
    results = _runtime(request).classifier.classify_all_participants()
    return ClassifyResponse(
        classified=len(results),
        flagged=sum(1 for r in results if r.has_disallowed),
    )


@router.get("/detections", response_model=list[DisallowedDetectedEvent])
async def list_detections(
    request: Request,
    limit: int = Query(50, ge=1, le=100),
) -> list[DisallowedDetectedEvent]:
    return _runtime(request).dispatcher.recent(limit)


# ── session feed ──


@router.get("/session", response_model=SessionStateResponse)
async def get_session(request: Request) -> SessionStateResponse:
    return _session_state(_runtime(request))


@router.put("/session", response_model=SessionStateResponse)
async def join_session(body: SessionJoinRequest, request: Request) -> SessionStateResponse:
    runtime = _runtime(request)
    runtime.provider.join(body.session_name)
    return _session_state(runtime)


@router.delete("/session", response_model=SessionStateResponse)
async def leave_session(request: Request) -> SessionStateResponse:
    runtime = _runtime(request)
    runtime.provider.leave()
    return _session_state(runtime)


@router.put("/roster/{handle}", response_model=ParticipantRecord)
async def upsert_participant(
    handle: str,
    body: RosterEntryRequest,
    request: Request,
) -> ParticipantRecord:
    runtime = _runtime(request)
    if not runtime.provider.in_session:
        raise HTTPException(status_code=409, detail="Not in a session")
    record = ParticipantRecord(handle=handle, **body.model_dump())
    runtime.provider.upsert(record)
    return record


@router.delete("/roster/{handle}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_participant(handle: str, request: Request) -> Response:
    if not _runtime(request).provider.remove(handle):
        raise HTTPException(status_code=404, detail="Participant not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
