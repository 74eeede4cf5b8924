"""Pydantic models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class EditRequest(BaseModel):
    """Body of an edit request."""

    model_config = ConfigDict(populate_by_name=True)

    room_id: str | None = Field(default=None, alias="roomId")
    user_message: str | None = Field(default=None, alias="userMessage")
    current_image_url: str | None = Field(default=None, alias="currentImageUrl")


class EditResponse(BaseModel):
    """Result of a completed edit."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    new_image_url: str = Field(alias="newImageUrl")


class EditTurnPayload(BaseModel):
    """One turn of a room's edit conversation."""

    role: str
    text: str
    image_url: str
    sequence: int
    failed: bool
    created_at: datetime


class EditHistoryResponse(BaseModel):
    """Ordered edit conversation for a room."""

    room_id: str
    current_image_url: str | None = None
    turns: list[EditTurnPayload]


class ScrapeRequest(BaseModel):
    """Body of a listing scrape request."""

    url: str | None = None


class PicturePayload(BaseModel):
    """Normalized listing picture."""

    url: str
    title: str | None = None


class ListingPayload(BaseModel):
    """Normalized listing data."""

    title: str
    address: str | None = None
    pictures: list[PicturePayload]


class ScrapeResponse(BaseModel):
    """Result of a listing scrape."""

    success: bool = True
    data: ListingPayload
