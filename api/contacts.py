"""
Contact routes.

  GET/POST    /api/v1/applications/{application_id}/contacts
  PUT/DELETE  /api/v1/contacts/{contact_id}
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
    get_owned_contact,
    list_contacts,
)
from database.models import Contact, User
from utils.schemas import ContactCreate, ContactOut, ContactUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["contacts"])


async def require_contact(session: AsyncSession, user: User, contact_id: int) -> Contact:
    contact = await get_owned_contact(session, user.id, contact_id)
    if contact is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found")
    return contact


@router.get("/applications/{application_id}/contacts")
async def get_contacts(
    application_id: int,
    session: AsyncSession = Depends(db_session),
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    application = await require_application(session, user, application_id)
    contacts = await list_contacts(session, application.id)
    return {"contacts": [ContactOut.model_validate(c) for c in contacts]}


@router.post("/applications/{application_id}/contacts", status_code=status.HTTP_201_CREATED)
async def post_contact(
    application_id: int,
    body: ContactCreate,
    session: AsyncSession = Depends(db_session),
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    application = await require_application(session, user, application_id)
    contact = await add_child(session, Contact(application_id=application.id, **body.model_dump()))
    await session.commit()
    return {
        "message": "Contact created successfully",
        "contact": ContactOut.model_validate(contact),
    }


@router.put("/contacts/{contact_id}")
async def put_contact(
    contact_id: int,
    body: ContactUpdate,
    session: AsyncSession = Depends(db_session),
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    contact = await require_contact(session, user, contact_id)
    await apply_changes(session, contact, body.changes())
    await session.commit()
    return {
        "message": "Contact updated successfully",
        "contact": ContactOut.model_validate(contact),
    }


@router.delete("/contacts/{contact_id}")
async def remove_contact(
    contact_id: int,
    session: AsyncSession = Depends(db_session),
    user: User = Depends(get_current_user),
) -> Dict[str, str]:
    contact = await require_contact(session, user, contact_id)
    await delete_row(session, contact)
    await session.commit()
    logger.info("User %s deleted contact %s", user.id, contact_id)
    return {"message": "Contact deleted successfully"}
