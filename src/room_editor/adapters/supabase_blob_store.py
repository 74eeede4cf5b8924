"""Supabase Storage blob store."""

from dataclasses import dataclass

from supabase import Client

from room_editor.services.edits import BlobStore


@dataclass
class SupabaseBlobStore(BlobStore):
    """Stores images in a public Supabase Storage bucket."""

    client: Client
    bucket: str

    def put(self, name: str, data: bytes, content_type: str) -> str:
        """Upload bytes and return their public URL."""
        bucket = self.client.storage.from_(self.bucket)
        bucket.upload(path=name, file=data, file_options={"content-type": content_type})
        return bucket.get_public_url(name)
