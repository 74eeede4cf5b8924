"""Black Forest Labs Flux API client."""

from dataclasses import dataclass

import httpx

from room_editor.domain.edits import JobSnapshot, JobStatus
from room_editor.services.polling import ImageEditProvider

_STATUS_MAP = {
    "Ready": JobStatus.READY,
    "Failed": JobStatus.FAILED,
}


@dataclass
class HttpxFluxClient(ImageEditProvider):
    """HTTPX-backed image-edit provider for the Flux API."""

    api_key: str
    base_url: str
    model: str
    http_client: httpx.AsyncClient
    seed: int = 42
    output_format: str = "jpeg"

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        api_key: str,
        base_url: str,
        model: str,
        seed: int = 42,
        output_format: str = "jpeg",
    ) -> "HttpxFluxClient":
        """Create a Flux client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            model=model,
            http_client=httpx.AsyncClient(),
            seed=seed,
            output_format=output_format,
        )

    async def submit(self, instruction: str, image_ref: str) -> str:
        """Start an image edit and return the request id."""
        response = await self.http_client.post(
            f"{self.base_url}/{self.model}",
            headers={"x-key": self.api_key},
            json={
                "prompt": instruction,
                "input_image": image_ref,
                "seed": self.seed,
                "output_format": self.output_format,
            },
            timeout=30,
        )
        response.raise_for_status()
        job_id = response.json().get("id")
        if not job_id:
            raise RuntimeError("Flux API returned no request id")
        return str(job_id)

    async def get_status(self, job_id: str) -> JobSnapshot:
        """Fetch the current result state for a request id."""
        response = await self.http_client.get(
            f"{self.base_url}/get_result",
            params={"id": job_id},
            headers={"x-key": self.api_key},
            timeout=15,
        )
        response.raise_for_status()
        payload = response.json()
        status = _STATUS_MAP.get(payload.get("status"), JobStatus.PENDING)
        sample = None
        result = payload.get("result")
        if status is JobStatus.READY and isinstance(result, dict):
            sample = result.get("sample")
        if not isinstance(sample, str):
            sample = None
        return JobSnapshot(status=status, payload=sample)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
