"""API v1 router aggregator.

All v1 routes live under /api/v1 and require the admin key.
"""

from fastapi import APIRouter

from fanjobo.api.deps import AdminKey
from fanjobo.api.v1 import events, wizard_sessions

router = APIRouter(dependencies=[AdminKey])

router.include_router(events.router, prefix="/bot/events", tags=["bot-events"])
router.include_router(
    wizard_sessions.router, prefix="/wizard-sessions", tags=["wizard-sessions"]
)
