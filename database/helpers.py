"""
Database helper functions — ownership-scoped lookups and writes.

Every lookup takes the acting ``user_id``. Child records (contacts,
interviews, documents, status history) are only ever reached through a join
on their parent application's owner, so a bare id never grants access.
A ``None`` result means "not found for this user", whether the row is
missing or belongs to someone else.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import (
    Application,
    Contact,
    Document,
    Interview,
    StatusHistory,
)
from utils.schemas import SORTABLE_COLUMNS, ApplicationStatus

logger = logging.getLogger(__name__)

UPCOMING_WINDOW = timedelta(days=7)
RECENT_LIMIT = 5
MONTHS_LIMIT = 6


# ── Applications ────────────────────────────────────────────────────


async def get_owned_application(
    session: AsyncSession,
    user_id: int,
    application_id: int,
) -> Optional[Application]:
    result = await session.execute(
        select(Application).where(
            Application.id == application_id,
            Application.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def list_applications(
    session: AsyncSession,
    user_id: int,
    *,
    status: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: str = "applied_date",
    sort_order: str = "DESC",
) -> List[Tuple[Application, int, int, int]]:
    """
    Return ``(application, interview_count, document_count, contact_count)``
    rows for the user. Unknown sort columns/orders are ignored.
    """
    interview_count = (
        select(func.count(Interview.id))
        .where(Interview.application_id == Application.id)
        .scalar_subquery()
    )
    document_count = (
        select(func.count(Document.id))
        .where(Document.application_id == Application.id)
        .scalar_subquery()
    )
    contact_count = (
        select(func.count(Contact.id))
        .where(Contact.application_id == Application.id)
        .scalar_subquery()
    )

    stmt = select(
        Application,
        interview_count.label("interview_count"),
        document_count.label("document_count"),
        contact_count.label("contact_count"),
    ).where(Application.user_id == user_id)

    if status:
        stmt = stmt.where(Application.status == status)

    if search:
        pattern = f"%{search.lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Application.company_name).like(pattern),
                func.lower(Application.position_title).like(pattern),
            )
        )

    order = sort_order.upper() if sort_order else ""
    if sort_by in SORTABLE_COLUMNS and order in ("ASC", "DESC"):
        column = getattr(Application, sort_by)
        stmt = stmt.order_by(column.asc() if order == "ASC" else column.desc(), Application.id)
    else:
        stmt = stmt.order_by(Application.applied_date.desc(), Application.id)

    result = await session.execute(stmt)
    return [tuple(row) for row in result.all()]


async def create_application(
    session: AsyncSession,
    user_id: int,
    fields: Dict[str, Any],
) -> Application:
    """Insert an application together with its first status-history row."""
    application = Application(user_id=user_id, **fields)
    session.add(application)
    await session.flush()

    session.add(
        StatusHistory(
            application_id=application.id,
            status=application.status,
            notes="Application created",
        )
    )
    await session.flush()
    return application


async def update_application(
    session: AsyncSession,
    application: Application,
    changes: Dict[str, Any],
) -> Optional[StatusHistory]:
    """
    Apply ``changes`` to an owned application.

    Appends a status-history row when (and only when) the status actually
    changes; returns that row, or ``None`` if the status was left alone.
    """
    previous_status = application.status
    for field, value in changes.items():
        setattr(application, field, value)
    application.updated_at = datetime.now(timezone.utc)

    entry = None
    new_status = changes.get("status")
    if new_status is not None and new_status != previous_status:
        entry = StatusHistory(
            application_id=application.id,
            status=new_status,
            notes=f"Status changed from {previous_status} to {new_status}",
        )
        session.add(entry)

    await session.flush()
    return entry


async def delete_application(session: AsyncSession, application: Application) -> None:
    """Delete an owned application and everything hanging off it."""
    for child in (StatusHistory, Contact, Interview, Document):
        await session.execute(delete(child).where(child.application_id == application.id))
    await session.execute(
        delete(Application).where(
            Application.id == application.id,
            Application.user_id == application.user_id,
        )
    )
    await session.flush()


async def get_application_children(
    session: AsyncSession,
    application_id: int,
) -> Dict[str, Sequence[Any]]:
    """Child rows of an application the caller has already proven ownership of."""
    history = await session.execute(
        select(StatusHistory)
        .where(StatusHistory.application_id == application_id)
        .order_by(StatusHistory.changed_at.desc(), StatusHistory.id.desc())
    )
    contacts = await session.execute(
        select(Contact)
        .where(Contact.application_id == application_id)
        .order_by(Contact.created_at.desc(), Contact.id.desc())
    )
    documents = await session.execute(
        select(Document)
        .where(Document.application_id == application_id)
        .order_by(Document.uploaded_at.desc(), Document.id.desc())
    )
    interviews = await session.execute(
        select(Interview)
        .where(Interview.application_id == application_id)
        .order_by(Interview.scheduled_at.asc(), Interview.id)
    )
    return {
        "status_history": history.scalars().all(),
        "contacts": contacts.scalars().all(),
        "documents": documents.scalars().all(),
        "interviews": interviews.scalars().all(),
    }


# ── Contacts ────────────────────────────────────────────────────────


async def list_contacts(session: AsyncSession, application_id: int) -> Sequence[Contact]:
    result = await session.execute(
        select(Contact)
        .where(Contact.application_id == application_id)
        .order_by(Contact.created_at.desc(), Contact.id.desc())
    )
    return result.scalars().all()


async def get_owned_contact(
    session: AsyncSession,
    user_id: int,
    contact_id: int,
) -> Optional[Contact]:
    result = await session.execute(
        select(Contact)
        .join(Application, Contact.application_id == Application.id)
        .where(Contact.id == contact_id, Application.user_id == user_id)
    )
    return result.scalar_one_or_none()


# ── Interviews ──────────────────────────────────────────────────────


async def list_interviews(session: AsyncSession, application_id: int) -> Sequence[Interview]:
    result = await session.execute(
        select(Interview)
        .where(Interview.application_id == application_id)
        .order_by(Interview.scheduled_at.asc(), Interview.id)
    )
    return result.scalars().all()


async def get_owned_interview(
    session: AsyncSession,
    user_id: int,
    interview_id: int,
) -> Optional[Interview]:
    result = await session.execute(
        select(Interview)
        .join(Application, Interview.application_id == Application.id)
        .where(Interview.id == interview_id, Application.user_id == user_id)
    )
    return result.scalar_one_or_none()


# ── Generic child writes ────────────────────────────────────────────


async def add_child(session: AsyncSession, row: Any) -> Any:
    session.add(row)
    await session.flush()
    return row


async def apply_changes(session: AsyncSession, row: Any, changes: Dict[str, Any]) -> Any:
    for field, value in changes.items():
        setattr(row, field, value)
    await session.flush()
    return row


async def delete_row(session: AsyncSession, row: Any) -> None:
    await session.delete(row)
    await session.flush()


# ── Dashboard ───────────────────────────────────────────────────────


async def dashboard_stats(
    session: AsyncSession,
    user_id: int,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    now = now or datetime.now(timezone.utc)

    status_rows = await session.execute(
        select(Application.status, func.count(Application.id))
        .where(Application.user_id == user_id)
        .group_by(Application.status)
    )
    by_status = {s.value: 0 for s in ApplicationStatus}
    for status, count in status_rows.all():
        by_status[status] = int(count)
    total = sum(by_status.values())

    recent = await session.execute(
        select(Application)
        .where(Application.user_id == user_id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .limit(RECENT_LIMIT)
    )

    upcoming = await session.execute(
        select(Interview, Application.company_name, Application.position_title)
        .join(Application, Interview.application_id == Application.id)
        .where(
            Application.user_id == user_id,
            Interview.scheduled_at >= now,
            Interview.scheduled_at <= now + UPCOMING_WINDOW,
            Interview.completed.is_(False),
        )
        .order_by(Interview.scheduled_at.asc())
    )

    # Bucketed in Python: no dialect-specific date functions in queries.
    applied_dates = await session.execute(
        select(Application.applied_date).where(Application.user_id == user_id)
    )
    months = Counter(d.strftime("%Y-%m") for d in applied_dates.scalars().all() if d is not None)
    by_month = [
        {"month": month, "count": months[month]}
        for month in sorted(months, reverse=True)[:MONTHS_LIMIT]
    ]

    return {
        "total_applications": total,
        "by_status": by_status,
        "recent_applications": recent.scalars().all(),
        "upcoming_interviews": [
            (interview, company_name, position_title)
            for interview, company_name, position_title in upcoming.all()
        ],
        "applications_by_month": by_month,
    }
