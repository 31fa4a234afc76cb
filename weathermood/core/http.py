from __future__ import annotations

import json
from typing import Any

import httpx

from weathermood.core.config import Settings
from weathermood.core.errors import MalformedResponse, NetworkFailure


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    limits = httpx.Limits(max_keepalive_connections=10, max_connections=20)
    timeout = httpx.Timeout(settings.http_timeout_seconds)
    return httpx.AsyncClient(
        timeout=timeout,
        limits=limits,
        headers={"User-Agent": "weathermood/0.1"},
        follow_redirects=True,
    )


async def request_json(
    client: httpx.AsyncClient,
    *,
    url: str,
    params: dict[str, Any],
    label: str,
) -> tuple[httpx.Response, dict[str, Any]]:
    """GET ``url`` once and decode a JSON object body.

    The status code is not checked here; some providers put their own status
    inside the body and callers decide which of the two wins.
    """
    try:
        resp = await client.get(url, params=params)
    except httpx.TimeoutException as exc:
        raise NetworkFailure(f"{label} request timed out") from exc
    except httpx.HTTPError as exc:
        raise NetworkFailure(f"{label} upstream error: {type(exc).__name__}") from exc

    try:
        data = resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        if resp.status_code != 200:
            raise NetworkFailure(
                f"{label} upstream status {resp.status_code}", status_code=resp.status_code
            ) from exc
        raise MalformedResponse(f"{label} returned a non-JSON body") from exc

    if not isinstance(data, dict):
        raise MalformedResponse(f"{label} returned an unexpected payload")
    return resp, data
