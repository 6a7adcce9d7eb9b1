from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from appointments.api.v1.schemas import CleanupResultSchema
from appointments.application.use_cases.cleanup import CleanupSweeper
from appointments.wiring.dependencies import get_cleanup_sweeper

router = APIRouter(prefix="/cleanup")
logger = logging.getLogger(__name__)


@router.post("/run", response_model=CleanupResultSchema)
def run_cleanup(sweeper: CleanupSweeper = Depends(get_cleanup_sweeper)):
    """Called by the login flow so users see a pruned list right away."""
    removed = sweeper.run_cleanup_now()
    logger.info("On-demand cleanup finished", extra={"removed": removed})
    return CleanupResultSchema(removed=removed)
