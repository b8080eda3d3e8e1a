"""V1 API router: aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from facededup.presentation.api.v1.endpoints.health import router as health_router
from facededup.presentation.api.v1.endpoints.processes import router as processes_router
from facededup.presentation.api.v1.endpoints.conflicts import router as conflicts_router
from facededup.presentation.api.v1.endpoints.exceptions import router as exceptions_router
from facededup.presentation.api.v1.endpoints.duplicate_records import (
    router as duplicate_records_router,
)

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(processes_router)
router.include_router(conflicts_router)
router.include_router(exceptions_router)
router.include_router(duplicate_records_router)
