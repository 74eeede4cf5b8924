"""Orchestration of room image edits."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from room_editor.domain.edits import EditTurn, Room, TurnRole
from room_editor.domain.errors import (
    ForbiddenError,
    InvalidInputError,
    NoDataError,
    ProviderUnavailableError,
    RoomEditorError,
    StorageFailureError,
)
from room_editor.services.decoder import DecodedImage, decode_image
from room_editor.services.polling import EditJobPoller, ImageEditProvider
from room_editor.services.room_locks import RoomLockRegistry

SUCCESS_MESSAGE = "Image edited successfully"

_logger = logging.getLogger(__name__)


class EditTurnRepository(Protocol):
    """Persistence interface for a room's edit conversation."""

    def get_max_sequence(self, room_id: str) -> int | None:
        """Return the highest sequence stored for the room, if any."""

    def append_turn(  # noqa: PLR0913
        self,
        room_id: str,
        role: TurnRole,
        text: str,
        image_ref: str,
        sequence: int,
        failed: bool = False,
    ) -> EditTurn:
        """Store a turn and return it with its write timestamp."""

    def list_turns(self, room_id: str) -> list[EditTurn]:
        """Return the room's turns in ascending sequence order."""


class RoomRepository(Protocol):
    """Persistence interface for rooms."""

    def get_room(self, room_id: str) -> Room | None:
        """Return a room by id, if present."""

    def update_current_image(self, room_id: str, image_ref: str) -> None:
        """Point the room at a new current image."""


class BlobStore(Protocol):
    """Key-value store for image blobs."""

    def put(self, name: str, data: bytes, content_type: str) -> str:
        """Store bytes under a name and return a public reference."""


@dataclass
class EditService:
    """Submits edit jobs and records the conversation around them."""

    turn_repository: EditTurnRepository
    room_repository: RoomRepository
    blob_store: BlobStore
    provider: ImageEditProvider
    poller: EditJobPoller
    room_locks: RoomLockRegistry = field(default_factory=RoomLockRegistry)
    default_content_type: str = "image/jpeg"
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(tz=UTC))

    async def submit_edit(
        self,
        room_id: str,
        instruction: str,
        current_image_ref: str,
        *,
        owner_id: str | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> str:
        """Apply an instruction to the room's image and return the new ref.

        When an owner is given, the room must belong to them. Edits for one
        room run one at a time. Once the user turn is written, any failure
        still writes the assistant turn, marked as failed, before the error is
        raised; the room keeps its current image in that case. Errors outside
        the RoomEditorError family are raised as RoomEditorError.
        """
        if not all(map(_present, (room_id, instruction, current_image_ref))):
            raise InvalidInputError("Missing roomId, userMessage or currentImageUrl")
        if owner_id is not None:
            self.authorize_room(room_id, owner_id)

        async with self.room_locks.hold(room_id):
            sequence = self._next_sequence(room_id)
            self._append(room_id, TurnRole.USER, instruction, current_image_ref, sequence)
            try:
                new_ref = await self._run_job(
                    room_id, instruction, current_image_ref, owner_id, cancel_event
                )
                self._append(
                    room_id, TurnRole.ASSISTANT, SUCCESS_MESSAGE, new_ref, sequence + 1
                )
                self._update_room(room_id, new_ref)
            except (RoomEditorError, asyncio.CancelledError) as exc:
                self._record_failure(room_id, current_image_ref, sequence + 1, exc)
                raise
            except Exception as exc:
                self._record_failure(room_id, current_image_ref, sequence + 1, exc)
                raise RoomEditorError(f"Image edit failed unexpectedly: {exc}") from exc
        return new_ref

    def list_turns(self, room_id: str) -> list[EditTurn]:
        """Return the room's edit conversation in order."""
        return self.turn_repository.list_turns(room_id)

    def authorize_room(self, room_id: str, owner_id: str) -> Room:
        """Return the room if it belongs to the given user."""
        try:
            room = self.room_repository.get_room(room_id)
        except Exception as exc:
            raise StorageFailureError(f"Failed to read room: {exc}") from exc
        if room is None:
            raise NoDataError("Room not found")
        if room.owner_id != owner_id:
            raise ForbiddenError("Room does not belong to the current user")
        return room

    async def _run_job(
        self,
        room_id: str,
        instruction: str,
        current_image_ref: str,
        owner_id: str | None,
        cancel_event: asyncio.Event | None,
    ) -> str:
        try:
            job_id = await self.provider.submit(instruction, current_image_ref)
        except Exception as exc:
            _logger.warning("Edit submission failed for room %s: %s", room_id, exc)
            raise ProviderUnavailableError(
                f"Failed to initiate image generation: {exc}"
            ) from exc
        _logger.info("Submitted edit job %s for room %s", job_id, room_id)

        payload = await self.poller.poll(job_id, self.provider, cancel_event)
        image = decode_image(payload, self.default_content_type)
        return self._store(room_id, owner_id, image)

    def _next_sequence(self, room_id: str) -> int:
        try:
            latest = self.turn_repository.get_max_sequence(room_id)
        except Exception as exc:
            raise StorageFailureError(f"Failed to read edit history: {exc}") from exc
        return 0 if latest is None else latest + 1

    def _append(  # noqa: PLR0913
        self,
        room_id: str,
        role: TurnRole,
        text: str,
        image_ref: str,
        sequence: int,
        failed: bool = False,
    ) -> EditTurn:
        try:
            return self.turn_repository.append_turn(
                room_id=room_id,
                role=role,
                text=text,
                image_ref=image_ref,
                sequence=sequence,
                failed=failed,
            )
        except Exception as exc:
            raise StorageFailureError(f"Failed to save {role.value} edit: {exc}") from exc

    def _store(self, room_id: str, owner_id: str | None, image: DecodedImage) -> str:
        stamp = int(self.clock().timestamp() * 1000)
        name = f"{room_id}/{stamp}-edited.{image.extension}"
        if owner_id:
            name = f"{owner_id}/{name}"
        try:
            return self.blob_store.put(name, image.data, image.content_type)
        except Exception as exc:
            raise StorageFailureError(f"Failed to store edited image: {exc}") from exc

    def _update_room(self, room_id: str, image_ref: str) -> None:
        try:
            self.room_repository.update_current_image(room_id, image_ref)
        except Exception as exc:
            raise StorageFailureError(f"Failed to update room image: {exc}") from exc

    def _record_failure(
        self,
        room_id: str,
        image_ref: str,
        sequence: int,
        exc: BaseException,
    ) -> None:
        """Close the conversation pair with a failure-marked assistant turn."""
        if self._has_turn(room_id, sequence):
            return
        message = str(exc) or type(exc).__name__
        try:
            self.turn_repository.append_turn(
                room_id=room_id,
                role=TurnRole.ASSISTANT,
                text=f"Image edit failed: {message}",
                image_ref=image_ref,
                sequence=sequence,
                failed=True,
            )
        except Exception:
            _logger.exception("Failed to record edit failure for room %s", room_id)

    def _has_turn(self, room_id: str, sequence: int) -> bool:
        try:
            latest = self.turn_repository.get_max_sequence(room_id)
        except Exception:
            _logger.exception("Failed to read edit history for room %s", room_id)
            return False
        return latest is not None and latest >= sequence


def _present(value: str | None) -> bool:
    return bool(value and value.strip())
