"""Scan/generate REST endpoints."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import Field

from .errors import EmptyExamSet, PlanningError
from .planner_service import PlannerService, PlanningOutcome, PlanningRequest

router = APIRouter(prefix="/api/planner", tags=["planner"])
logger = logging.getLogger(__name__)

_service: Optional[PlannerService] = None


def get_planner_service() -> PlannerService:
    global _service
    if _service is None:
        _service = PlannerService()
    return _service


class GenerateRequest(PlanningRequest):
    decisions: List[bool] = Field(default_factory=list)


def _http_error(exc: PlanningError) -> HTTPException:
    if isinstance(exc, EmptyExamSet):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    # Bad window, preference or decision list: the request itself must change.
    return HTTPException(status_code=422, detail=str(exc))


@router.post("/scan", response_model=PlanningOutcome)
def scan(
    request: PlanningRequest,
    response: Response,
    service: PlannerService = Depends(get_planner_service),
) -> PlanningOutcome:
    try:
        outcome = service.scan(request)
    except PlanningError as exc:
        raise _http_error(exc) from exc
    response.status_code = status.HTTP_201_CREATED if outcome.success else status.HTTP_409_CONFLICT
    return outcome


@router.post("/generate", response_model=PlanningOutcome, status_code=status.HTTP_201_CREATED)
def generate(
    request: GenerateRequest,
    service: PlannerService = Depends(get_planner_service),
) -> PlanningOutcome:
    try:
        return service.generate(request, request.decisions)
    except PlanningError as exc:
        logger.info("Generate request for %s rejected: %s", request.learner_id, exc)
        raise _http_error(exc) from exc


__all__ = ["GenerateRequest", "get_planner_service", "router"]
