"""Supabase-backed room repository."""

from dataclasses import dataclass

from supabase import Client

from room_editor.domain.edits import Room
from room_editor.services.edits import RoomRepository


@dataclass
class SupabaseRoomRepository(RoomRepository):
    """Supabase implementation for the rooms table."""

    client: Client

    def get_room(self, room_id: str) -> Room | None:
        """Return a room by id, with the owner of its posting."""
        response = (
            self.client.table("rooms")
            .select("id, current_image_url, postings(user_id)")
            .eq("id", room_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        posting = row.get("postings")
        owner_id = posting.get("user_id") if isinstance(posting, dict) else None
        return Room(
            id=str(row["id"]),
            current_image_ref=row.get("current_image_url"),
            owner_id=str(owner_id) if owner_id else None,
        )

    def update_current_image(self, room_id: str, image_ref: str) -> None:
        """Set the room's current image URL."""
        response = (
            self.client.table("rooms")
            .update({"current_image_url": image_ref})
            .eq("id", room_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Room {room_id} not found")
