"""Polling of asynchronous image-edit jobs."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol

from room_editor.domain.edits import JobSnapshot, JobStatus
from room_editor.domain.errors import (
    EditCancelledError,
    EditTimedOutError,
    ProviderFailedError,
)

_logger = logging.getLogger(__name__)


class ImageEditProvider(Protocol):
    """Interface for the external image-edit service."""

    async def submit(self, instruction: str, image_ref: str) -> str:
        """Start an edit job and return its provider id."""

    async def get_status(self, job_id: str) -> JobSnapshot:
        """Return the current state of a job."""


@dataclass(frozen=True)
class PollPolicy:
    """Polling cadence and attempt ceiling."""

    interval_seconds: float = 2.0
    max_attempts: int = 60

    @property
    def timeout_seconds(self) -> float:
        """Upper bound on time spent polling one job."""
        return self.interval_seconds * self.max_attempts


@dataclass
class EditJobPoller:
    """Waits for a provider job to reach a terminal state."""

    policy: PollPolicy = field(default_factory=PollPolicy)
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    async def poll(
        self,
        job_id: str,
        provider: ImageEditProvider,
        cancel_event: asyncio.Event | None = None,
    ) -> str:
        """Poll until the job is ready and return its image payload.

        Errors raised by a single status query are logged and count as an
        attempt; only a failed job or an exhausted ceiling stops the loop.
        """
        for attempt in range(1, self.policy.max_attempts + 1):
            await self._wait(cancel_event)
            try:
                snapshot = await provider.get_status(job_id)
            except Exception as exc:
                _logger.warning(
                    "Status query failed for job %s (attempt %s/%s): %s",
                    job_id,
                    attempt,
                    self.policy.max_attempts,
                    exc,
                )
                continue

            if snapshot.status is JobStatus.READY:
                if not snapshot.payload:
                    raise ProviderFailedError("Image generation returned no result")
                _logger.info("Job %s ready after %s attempts", job_id, attempt)
                return snapshot.payload
            if snapshot.status is JobStatus.FAILED:
                _logger.warning("Job %s failed on attempt %s", job_id, attempt)
                raise ProviderFailedError("Image generation failed")

        _logger.warning(
            "Job %s timed out after %s attempts", job_id, self.policy.max_attempts
        )
        raise EditTimedOutError("Image generation timed out")

    async def _wait(self, cancel_event: asyncio.Event | None) -> None:
        if cancel_event is None:
            await self.sleep(self.policy.interval_seconds)
            return
        if cancel_event.is_set():
            raise EditCancelledError("Image generation was cancelled")
        sleeper = asyncio.ensure_future(self.sleep(self.policy.interval_seconds))
        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({sleeper, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (sleeper, waiter):
                if not task.done():
                    task.cancel()
        if cancel_event.is_set():
            raise EditCancelledError("Image generation was cancelled")
