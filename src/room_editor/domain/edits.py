"""Domain models for room edit conversations."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TurnRole(Enum):
    """Author of a turn in a room's edit conversation."""

    USER = "user"
    ASSISTANT = "assistant"


class JobStatus(Enum):
    """Observed state of a provider-side edit job."""

    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class EditTurn:
    """Single logged entry in a room's edit conversation."""

    room_id: str
    role: TurnRole
    text: str
    image_ref: str
    sequence: int
    created_at: datetime
    failed: bool = False


@dataclass(frozen=True)
class Room:
    """Room with the image currently shown to the user."""

    id: str
    current_image_ref: str | None
    owner_id: str | None = None


@dataclass(frozen=True)
class JobSnapshot:
    """Result of one status query against the image-edit provider."""

    status: JobStatus
    payload: str | None = None
