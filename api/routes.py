"""
REST API routers.

``router`` bundles the resource routes mounted under the API prefix;
``health_router`` is mounted at the root and stays public.
"""

from __future__ import annotations

from typing import Dict

from fastapi import APIRouter

from api.applications import router as applications_router
from api.contacts import router as contacts_router
from api.dashboard import router as dashboard_router
from api.interviews import router as interviews_router

router = APIRouter()
router.include_router(applications_router)
router.include_router(contacts_router)
router.include_router(interviews_router)
router.include_router(dashboard_router)

health_router = APIRouter(tags=["health"])


@health_router.get("/health")
async def health_check() -> Dict[str, str]:
    return {"status": "ok"}
