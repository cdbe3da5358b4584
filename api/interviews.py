"""
Interview routes.

  GET/POST    /api/v1/applications/{application_id}/interviews
  PUT/DELETE  /api/v1/interviews/{interview_id}
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.applications import require_application
from auth.dependencies import db_session, get_current_user
from database.helpers import (
    add_child,
    apply_changes,
    delete_row,
    get_owned_interview,
    list_interviews,
)
from database.models import Interview, User
from utils.schemas import InterviewCreate, InterviewOut, InterviewUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["interviews"])


async def require_interview(session: AsyncSession, user: User, interview_id: int) -> Interview:
    interview = await get_owned_interview(session, user.id, interview_id)
    if interview is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Interview not found")
    return interview


@router.get("/applications/{application_id}/interviews")
async def get_interviews(
    application_id: int,
    session: AsyncSession = Depends(db_session),
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    application = await require_application(session, user, application_id)
    interviews = await list_interviews(session, application.id)
    return {"interviews": [InterviewOut.model_validate(i) for i in interviews]}


@router.post("/applications/{application_id}/interviews", status_code=status.HTTP_201_CREATED)
async def post_interview(
    application_id: int,
    body: InterviewCreate,
    session: AsyncSession = Depends(db_session),
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    application = await require_application(session, user, application_id)
    interview = await add_child(session, Interview(application_id=application.id, **body.model_dump()))
    await session.commit()
    logger.info("User %s scheduled interview %s", user.id, interview.id)
    return {
        "message": "Interview created successfully",
        "interview": InterviewOut.model_validate(interview),
    }


@router.put("/interviews/{interview_id}")
async def put_interview(
    interview_id: int,
    body: InterviewUpdate,
    session: AsyncSession = Depends(db_session),
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    interview = await require_interview(session, user, interview_id)
    await apply_changes(session, interview, body.changes())
    await session.commit()
    return {
        "message": "Interview updated successfully",
        "interview": InterviewOut.model_validate(interview),
    }


@router.delete("/interviews/{interview_id}")
async def remove_interview(
    interview_id: int,
    session: AsyncSession = Depends(db_session),
    user: User = Depends(get_current_user),
) -> Dict[str, str]:
    interview = await require_interview(session, user, interview_id)
    await delete_row(session, interview)
    await session.commit()
    return {"message": "Interview deleted successfully"}
