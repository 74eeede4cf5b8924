"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from room_editor.adapters.apify_client import HttpxApifyClient
from room_editor.adapters.flux_client import HttpxFluxClient
from room_editor.domain.edits import JobStatus


def _flux_client(handler) -> HttpxFluxClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxFluxClient(
        api_key="bfl-key",
        base_url="https://api.bfl.test/v1",
        model="flux-2-pro",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_flux_client_submit_sends_prompt_and_image() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["key"] = request.headers["x-key"]
        seen["body"] = json.loads(request.content.decode())
        return httpx.Response(200, json={"id": "job-1", "polling_url": "ignored"})

    client = _flux_client(handler)

    job_id = asyncio.run(client.submit("make the walls blue", "https://img.test/a.jpg"))

    assert job_id == "job-1"
    assert seen["path"] == "/v1/flux-2-pro"
    assert seen["key"] == "bfl-key"
    assert seen["body"] == {
        "prompt": "make the walls blue",
        "input_image": "https://img.test/a.jpg",
        "seed": 42,
        "output_format": "jpeg",
    }


def test_flux_client_submit_raises_on_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"detail": "bad image"})

    client = _flux_client(handler)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.submit("make it blue", "https://img.test/a.jpg"))


def test_flux_client_get_status_maps_states() -> None:
    responses = iter(
        [
            {"id": "job-1", "status": "Pending"},
            {"id": "job-1", "status": "Ready", "result": {"sample": "Zm9v"}},
            {"id": "job-1", "status": "Failed"},
        ]
    )

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/get_result"
        assert request.url.params["id"] == "job-1"
        return httpx.Response(200, json=next(responses))

    client = _flux_client(handler)

    first = asyncio.run(client.get_status("job-1"))
    second = asyncio.run(client.get_status("job-1"))
    third = asyncio.run(client.get_status("job-1"))

    assert first.status is JobStatus.PENDING
    assert (second.status, second.payload) == (JobStatus.READY, "Zm9v")
    assert third.status is JobStatus.FAILED


@pytest.mark.parametrize("sample", [123, {"url": "x"}, None])
def test_flux_client_ignores_non_string_sample(sample: object) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"id": "job-1", "status": "Ready", "result": {"sample": sample}}
        )

    snapshot = asyncio.run(_flux_client(handler).get_status("job-1"))

    assert snapshot.status is JobStatus.READY
    assert snapshot.payload is None


def test_apify_client_runs_actor_and_reads_dataset() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/runs"):
            return httpx.Response(
                201,
                json={"data": {"defaultDatasetId": "ds-1", "status": "SUCCEEDED"}},
            )
        return httpx.Response(200, json=[{"title": "Flat"}])

    client = HttpxApifyClient(
        token="apify-token",
        actor_id="actor-1",
        base_url="https://api.apify.test/v2",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    items = asyncio.run(client.scrape("https://www.immobilienscout24.de/expose/1"))

    assert items == [{"title": "Flat"}]
    run_request, items_request = seen
    assert run_request.url.path == "/v2/acts/actor-1/runs"
    assert run_request.url.params["waitForFinish"] == "300"
    assert run_request.headers["Authorization"] == "Bearer apify-token"
    assert json.loads(run_request.content.decode()) == {
        "startUrls": ["https://www.immobilienscout24.de/expose/1"]
    }
    assert items_request.url.path == "/v2/datasets/ds-1/items"


def test_apify_client_requires_dataset_id() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, json={"data": {"status": "FAILED"}})

    client = HttpxApifyClient(
        token="apify-token",
        actor_id="actor-1",
        base_url="https://api.apify.test/v2",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(RuntimeError, match="dataset"):
        asyncio.run(client.scrape("https://www.immobilienscout24.de/expose/1"))
