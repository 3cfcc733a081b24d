"""Bot events API.

Delivers chat events on behalf of an actor, exactly as the Telegram
transport would. Used by operators to drive a wizard and by integration
tests.
"""

from typing import Annotated

from fastapi import APIRouter, Form, UploadFile

from fanjobo.api.deps import Dispatcher
from fanjobo.core.config import settings
from fanjobo.core.file_validation import read_file_with_size_limit
from fanjobo.core.responses import DataResponse
from fanjobo.schemas.bot import EventResult, ReplyResponse, TextEventRequest
from fanjobo.wizards.state import DocumentEvent, DocumentRef, TextEvent

router = APIRouter()


# =============================================================================
# POST /bot/events
# =============================================================================


@router.post("")
async def deliver_text_event(
    request: TextEventRequest,
    dispatcher: Dispatcher,
) -> DataResponse[EventResult]:
    """Deliver a text message for an actor."""
    handled, reply = await dispatcher.dispatch(
        request.actor_id,
        TextEvent(request.text),
        display_name=request.display_name,
    )
    return DataResponse(
        data=EventResult(handled=handled, reply=ReplyResponse.from_reply(reply))
    )


# =============================================================================
# POST /bot/events/document
# =============================================================================


@router.post("/document")
async def deliver_document_event(
    actor_id: Annotated[str, Form(min_length=1, max_length=64)],
    file: UploadFile,
    dispatcher: Dispatcher,
) -> DataResponse[EventResult]:
    """Deliver a document for an actor (multipart upload).

    The bytes travel inline with the event, so no transport download is
    needed. Size is checked while reading; type checks happen in the
    wizard's file step.
    """
    content = await read_file_with_size_limit(
        file, max_size=settings.wizard_upload_max_size_mb * 1024 * 1024
    )
    document = DocumentRef(
        file_id=f"upload:{file.filename or 'document'}",
        file_name=file.filename,
        mime_type=file.content_type,
        file_size=len(content),
        content=content,
    )
    handled, reply = await dispatcher.dispatch(actor_id, DocumentEvent(document))
    return DataResponse(
        data=EventResult(handled=handled, reply=ReplyResponse.from_reply(reply))
    )
