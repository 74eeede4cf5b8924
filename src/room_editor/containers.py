"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from room_editor.adapters.apify_client import HttpxApifyClient
from room_editor.adapters.flux_client import HttpxFluxClient
from room_editor.adapters.supabase_auth import AuthVerifier, SupabaseAuthVerifier
from room_editor.adapters.supabase_blob_store import SupabaseBlobStore
from room_editor.adapters.supabase_edit_repository import SupabaseEditTurnRepository
from room_editor.adapters.supabase_room_repository import SupabaseRoomRepository
from room_editor.config import Settings, parse_allowed_domains
from room_editor.services.edits import EditService
from room_editor.services.polling import EditJobPoller, PollPolicy
from room_editor.services.scrape import ScrapeService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_verifier: AuthVerifier
    edit_service: EditService
    scrape_service: ScrapeService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    flux_client = HttpxFluxClient.create(
        api_key=resolved_settings.bfl_api_key,
        base_url=resolved_settings.bfl_base_url,
        model=resolved_settings.bfl_model,
        seed=resolved_settings.bfl_seed,
        output_format=resolved_settings.bfl_output_format,
    )
    apify_client = HttpxApifyClient.create(
        token=resolved_settings.apify_token,
        actor_id=resolved_settings.apify_actor_id,
        base_url=resolved_settings.apify_base_url,
        wait_for_finish_seconds=resolved_settings.apify_wait_for_finish_seconds,
    )
    edit_service = EditService(
        turn_repository=SupabaseEditTurnRepository(supabase_client),
        room_repository=SupabaseRoomRepository(supabase_client),
        blob_store=SupabaseBlobStore(
            supabase_client, bucket=resolved_settings.room_images_bucket
        ),
        provider=flux_client,
        poller=EditJobPoller(
            policy=PollPolicy(
                interval_seconds=resolved_settings.poll_interval_seconds,
                max_attempts=resolved_settings.poll_max_attempts,
            )
        ),
        default_content_type=f"image/{resolved_settings.bfl_output_format}",
    )
    scrape_service = ScrapeService(
        provider=apify_client,
        allowed_domains=parse_allowed_domains(
            resolved_settings.scrape_allowed_domains
        ),
    )

    async def close_resources() -> None:
        await flux_client.close()
        await apify_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_verifier=SupabaseAuthVerifier(supabase_client),
        edit_service=edit_service,
        scrape_service=scrape_service,
        close_resources=close_resources,
    )
