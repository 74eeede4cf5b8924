"""Supabase-backed room edit conversation repository."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from room_editor.domain.edits import EditTurn, TurnRole
from room_editor.services.edits import EditTurnRepository

_COLUMNS = "room_id, edit_type, description, image_url, edit_order, failed, created_at"


@dataclass
class SupabaseEditTurnRepository(EditTurnRepository):
    """Supabase implementation for the room_edits table."""

    client: Client

    def get_max_sequence(self, room_id: str) -> int | None:
        """Return the highest edit_order stored for the room."""
        response = (
            self.client.table("room_edits")
            .select("edit_order")
            .eq("room_id", room_id)
            .order("edit_order", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return int(response.data[0]["edit_order"])

    def append_turn(  # noqa: PLR0913
        self,
        room_id: str,
        role: TurnRole,
        text: str,
        image_ref: str,
        sequence: int,
        failed: bool = False,
    ) -> EditTurn:
        """Insert a turn row and return it."""
        response = (
            self.client.table("room_edits")
            .insert(
                {
                    "room_id": room_id,
                    "edit_type": role.value,
                    "description": text,
                    "image_url": image_ref,
                    "edit_order": sequence,
                    "failed": failed,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create room edit")
        return _row_to_turn(response.data[0])

    def list_turns(self, room_id: str) -> list[EditTurn]:
        """Return all turns for a room ordered by edit_order."""
        response = (
            self.client.table("room_edits")
            .select(_COLUMNS)
            .eq("room_id", room_id)
            .order("edit_order")
            .execute()
        )
        return [_row_to_turn(row) for row in response.data or []]


def _row_to_turn(row: dict[str, object]) -> EditTurn:
    created_at_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(str(created_at_raw))
        if created_at_raw
        else datetime.now(tz=UTC)
    )
    return EditTurn(
        room_id=str(row["room_id"]),
        role=TurnRole(row["edit_type"]),
        text=str(row.get("description") or ""),
        image_ref=str(row.get("image_url") or ""),
        sequence=int(row["edit_order"]),
        created_at=created_at,
        failed=bool(row.get("failed", False)),
    )
