"""Wizard sessions API.

Lists active sessions and force-cancels stuck ones. Sessions are in-memory,
so this reflects the current process only.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from fanjobo.api.deps import Controller
from fanjobo.core.errors import NotFoundError
from fanjobo.core.pagination import PaginationParams, pagination_params
from fanjobo.core.responses import ListResponse, PaginationMeta
from fanjobo.schemas.bot import WizardSessionSummary
from fanjobo.wizards.state import WizardKind

router = APIRouter()

Pagination = Annotated[PaginationParams, Depends(pagination_params)]


@router.get("")
async def list_wizard_sessions(
    controller: Controller,
    pagination: Pagination,
) -> ListResponse[WizardSessionSummary]:
    """List active sessions, soonest to expire first."""
    entries = controller.sessions.entries()
    window = entries[pagination.offset : pagination.offset + pagination.limit]
    return ListResponse(
        data=[
            WizardSessionSummary.from_entry(
                entry,
                controller.catalog.get(entry.session.kind)
                .step_at(entry.session.step_index)
                .key,
            )
            for entry in window
        ],
        meta=PaginationMeta(
            total=len(entries),
            page=pagination.page,
            per_page=pagination.per_page,
        ),
    )


@router.delete("/{actor_id}/{kind}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_wizard_session(
    actor_id: str,
    kind: WizardKind,
    controller: Controller,
) -> None:
    """Force-cancel an actor's session.

    Raises:
        NotFoundError: No active session for this actor and kind.
    """
    if not await controller.cancel(actor_id, kind):
        raise NotFoundError("Wizard session", f"{actor_id}/{kind.value}")
