"""
Dashboard statistics for the signed-in user.

Route prefix: /api/v1/dashboard
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, get_current_user
from database.helpers import dashboard_stats
from database.models import User
from utils.schemas import ApplicationOut, DashboardStats, InterviewOut, MonthCount, UpcomingInterviewOut

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    session: AsyncSession = Depends(db_session),
    user: User = Depends(get_current_user),
) -> DashboardStats:
    stats = await dashboard_stats(session, user.id)
    return DashboardStats(
        total_applications=stats["total_applications"],
        by_status=stats["by_status"],
        recent_applications=[ApplicationOut.model_validate(a) for a in stats["recent_applications"]],
        upcoming_interviews=[
            UpcomingInterviewOut(
                **InterviewOut.model_validate(interview).model_dump(),
                company_name=company_name,
                position_title=position_title,
            )
            for interview, company_name, position_title in stats["upcoming_interviews"]
        ],
        applications_by_month=[MonthCount(**m) for m in stats["applications_by_month"]],
    )
