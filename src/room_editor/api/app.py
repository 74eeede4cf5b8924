"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from room_editor.api.auth import require_user
from room_editor.api.models import (
    EditHistoryResponse,
    EditRequest,
    EditResponse,
    EditTurnPayload,
    ListingPayload,
    PicturePayload,
    ScrapeRequest,
    ScrapeResponse,
)
from room_editor.app_logging import configure_logging
from room_editor.containers import AppContainer
from room_editor.domain.edits import EditTurn
from room_editor.domain.errors import RoomEditorError
from room_editor.domain.listings import ListingRecord


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(RoomEditorError)
    async def handle_room_editor_error(
        request: Request, exc: RoomEditorError
    ) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": str(exc) or type(exc).__name__},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/rooms/edit", response_model=EditResponse)
    async def edit_room_image(
        body: EditRequest, request: Request, user_id: str = Depends(require_user)
    ) -> EditResponse:
        """Apply a natural-language edit to a room's current image."""
        state_container: AppContainer = request.app.state.container
        new_ref = await state_container.edit_service.submit_edit(
            body.room_id or "",
            body.user_message or "",
            body.current_image_url or "",
            owner_id=user_id,
        )
        return EditResponse(new_image_url=new_ref)

    @app.get("/rooms/{room_id}/edits", response_model=EditHistoryResponse)
    async def room_edit_history(
        room_id: str, request: Request, user_id: str = Depends(require_user)
    ) -> EditHistoryResponse:
        """Return a room's edit conversation in sequence order."""
        state_container: AppContainer = request.app.state.container
        room = state_container.edit_service.authorize_room(room_id, user_id)
        turns = state_container.edit_service.list_turns(room_id)
        return EditHistoryResponse(
            room_id=room_id,
            current_image_url=room.current_image_ref,
            turns=[_turn_payload(turn) for turn in turns],
        )

    @app.post(
        "/listings/scrape",
        response_model=ScrapeResponse,
        dependencies=[Depends(require_user)],
    )
    async def scrape_listing(body: ScrapeRequest, request: Request) -> ScrapeResponse:
        """Scrape a listing page into title, address and pictures."""
        state_container: AppContainer = request.app.state.container
        record = await state_container.scrape_service.scrape_listing(body.url or "")
        return ScrapeResponse(data=_listing_payload(record))

    return app


def _turn_payload(turn: EditTurn) -> EditTurnPayload:
    return EditTurnPayload(
        role=turn.role.value,
        text=turn.text,
        image_url=turn.image_ref,
        sequence=turn.sequence,
        failed=turn.failed,
        created_at=turn.created_at,
    )


def _listing_payload(record: ListingRecord) -> ListingPayload:
    return ListingPayload(
        title=record.title,
        address=record.address,
        pictures=[
            PicturePayload(url=picture.url, title=picture.title)
            for picture in record.pictures
        ],
    )
