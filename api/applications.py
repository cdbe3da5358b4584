"""
Application routes — list, create, read, update and delete job applications.

Route prefix: /api/v1/applications
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, get_current_user
from database.helpers import (
    create_application,
    delete_application,
    get_application_children,
    get_owned_application,
    list_applications,
    update_application,
)
from database.models import User
from utils.schemas import (
    ApplicationCreate,
    ApplicationOut,
    ApplicationStatus,
    ApplicationSummary,
    ApplicationUpdate,
    ContactOut,
    DocumentOut,
    InterviewOut,
    StatusHistoryOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["applications"])

APPLICATION_NOT_FOUND = "Application not found"


async def require_application(session: AsyncSession, user: User, application_id: int):
    """Load an application owned by ``user`` or answer 404."""
    application = await get_owned_application(session, user.id, application_id)
    if application is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=APPLICATION_NOT_FOUND,
        )
    return application


@router.get("")
async def get_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    sort_by: str = Query("applied_date", alias="sortBy"),
    sort_order: str = Query("DESC", alias="sortOrder"),
    session: AsyncSession = Depends(db_session),
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    rows = await list_applications(
        session,
        user.id,
        status=status_filter.value if status_filter else None,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    applications = [
        ApplicationSummary(
            **ApplicationOut.model_validate(application).model_dump(),
            interview_count=interviews or 0,
            document_count=documents or 0,
            contact_count=contacts or 0,
        )
        for application, interviews, documents, contacts in rows
    ]
    return {"applications": applications, "total": len(applications)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def post_application(
    body: ApplicationCreate,
    session: AsyncSession = Depends(db_session),
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    application = await create_application(session, user.id, body.model_dump())
    await session.commit()
    logger.info("User %s created application %s", user.id, application.id)
    return {
        "message": "Application created successfully",
        "application": ApplicationOut.model_validate(application),
    }


@router.get("/{application_id}")
async def get_application(
    application_id: int,
    session: AsyncSession = Depends(db_session),
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    application = await require_application(session, user, application_id)
    children = await get_application_children(session, application.id)
    return {
        "application": ApplicationOut.model_validate(application),
        "statusHistory": [StatusHistoryOut.model_validate(r) for r in children["status_history"]],
        "contacts": [ContactOut.model_validate(r) for r in children["contacts"]],
        "documents": [DocumentOut.model_validate(r) for r in children["documents"]],
        "interviews": [InterviewOut.model_validate(r) for r in children["interviews"]],
    }


@router.put("/{application_id}")
async def put_application(
    application_id: int,
    body: ApplicationUpdate,
    session: AsyncSession = Depends(db_session),
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    application = await require_application(session, user, application_id)
    entry = await update_application(session, application, body.changes())
    await session.commit()
    if entry is not None:
        logger.info("Application %s: %s", application.id, entry.notes)
    return {
        "message": "Application updated successfully",
        "application": ApplicationOut.model_validate(application),
    }


@router.delete("/{application_id}")
async def remove_application(
    application_id: int,
    session: AsyncSession = Depends(db_session),
    user: User = Depends(get_current_user),
) -> Dict[str, str]:
    application = await require_application(session, user, application_id)
    await delete_application(session, application)
    await session.commit()
    logger.info("User %s deleted application %s", user.id, application_id)
    return {"message": "Application deleted successfully"}
