# api/app/api/v1/endpoints/scores.py
from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.deps.errors import to_http
from app.api.deps.repos import get_score_service
from app.core.enums import HafalanType
from app.core.exceptions import DomainError
from app.core.security import CurrentUser, get_current_user, get_staff_user
from app.schemas.scores import ScoreIn, ScoreOut
from app.services.scoring import ErrorTally, ScoreService

router = APIRouter(tags=["scores"])


@router.post("/scores", response_model=ScoreOut, status_code=status.HTTP_201_CREATED)
def record_score(
    payload: ScoreIn,
    service: ScoreService = Depends(get_score_service),
    current: CurrentUser = Depends(get_staff_user),
):
    try:
        return service.record(
            current,
            student_id=payload.student_id,
            curriculum_id=payload.curriculum_id,
            errors=ErrorTally(**payload.errors.model_dump()),
            hafalan_type=HafalanType(payload.hafalan_type),
            progress=payload.progress,
            note=payload.note,
        )
    except DomainError as e:
        raise to_http(e)


@router.get("/students/{student_id}/scores", response_model=List[ScoreOut])
def score_history(
    student_id: UUID,
    limit: int = Query(20, ge=1, le=200),
    service: ScoreService = Depends(get_score_service),
    current: CurrentUser = Depends(get_current_user),
):
    try:
        return service.history(current, student_id, limit=limit)
    except DomainError as e:
        raise to_http(e)
