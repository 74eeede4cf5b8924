"""Apify actor client for listing scrapes."""

from dataclasses import dataclass

import httpx

from room_editor.services.scrape import ListingScrapeProvider


@dataclass
class HttpxApifyClient(ListingScrapeProvider):
    """Runs an Apify actor synchronously and reads its default dataset."""

    token: str
    actor_id: str
    base_url: str
    http_client: httpx.AsyncClient
    wait_for_finish_seconds: int = 300

    @classmethod
    def create(
        cls,
        token: str,
        actor_id: str,
        base_url: str,
        wait_for_finish_seconds: int = 300,
    ) -> "HttpxApifyClient":
        """Create an Apify client with a managed httpx session."""
        return cls(
            token=token,
            actor_id=actor_id,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            wait_for_finish_seconds=wait_for_finish_seconds,
        )

    async def scrape(self, url: str) -> list[dict[str, object]]:
        """Run the actor for one start URL and return the dataset items."""
        headers = {"Authorization": f"Bearer {self.token}"}
        run_response = await self.http_client.post(
            f"{self.base_url}/acts/{self.actor_id}/runs",
            params={"waitForFinish": self.wait_for_finish_seconds},
            headers=headers,
            json={"startUrls": [url]},
            timeout=self.wait_for_finish_seconds + 30,
        )
        run_response.raise_for_status()
        run = run_response.json().get("data") or {}
        dataset_id = run.get("defaultDatasetId")
        if not dataset_id:
            raise RuntimeError("No dataset ID returned from Apify")

        items_response = await self.http_client.get(
            f"{self.base_url}/datasets/{dataset_id}/items",
            headers=headers,
            timeout=30,
        )
        items_response.raise_for_status()
        items = items_response.json()
        if not isinstance(items, list):
            raise RuntimeError("Apify dataset returned an unexpected payload")
        return items

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
