"""HTTP transport for the presentation backend.

Every operation is a POST to `<base_url>/<operation>` with body
`{"options": <canonical request>}`. The backend answers with an RPC
envelope:

    {"statusCode": 0, "result": <value>}               # success
    {"statusCode": <code>, "errorMessage": "..."}        # failure

Failures become PresentationError carrying the reported status. Network
failures become PresentationError(ERROR), timeouts
PresentationError(BACKEND_TIMEOUT), both chained to the httpx exception.
"""

from __future__ import annotations

__all__ = [
    "USER_AGENT",
    "HttpPresentationTransport",
]

import json
import uuid
from typing import Any

import httpx

from presentation_client import __version__
from presentation_client.constants import (
    APP_NAME,
    CLIENT_ID_HEADER,
    DEFAULT_BASE_URL,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
)
from presentation_client.exceptions import PresentationError, PresentationStatus
from presentation_client.models.requests import CanonicalLabelRequest, CanonicalRequest
from presentation_client.telemetry.system import get_system_logger, is_transport_error

USER_AGENT = f"{APP_NAME}/{__version__}"

_logger = get_system_logger()


class HttpPresentationTransport:
    """PresentationTransport over HTTP (httpx.AsyncClient).

    Args:
        base_url: Backend URL, e.g. "http://localhost:3001/presentation".
        timeout: Request timeout in seconds.
        client_id: Value of the X-Client-Id header. Random if not given.
        client: Pre-configured client (tests, custom transports). When given,
            base_url and timeout are ignored and the client is not closed by
            aclose().
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        client_id: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.client_id = client_id or uuid.uuid4().hex
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
        )
        self._client.headers.update({"User-Agent": USER_AGENT, CLIENT_ID_HEADER: self.client_id})

    async def get_nodes_count(self, request: CanonicalRequest) -> int:
        return int(await self._call("getNodesCount", request) or 0)

    async def get_paged_nodes(self, request: CanonicalRequest) -> dict[str, Any]:
        return await self._call("getPagedNodes", request) or {"total": 0, "items": []}

    async def get_filtered_node_paths(self, request: CanonicalRequest) -> list[Any]:
        return await self._call("getFilteredNodePaths", request) or []

    async def get_node_paths(self, request: CanonicalRequest) -> list[Any]:
        return await self._call("getNodePaths", request) or []

    async def load_hierarchy(self, request: CanonicalRequest) -> None:
        await self._call("loadHierarchy", request)

    async def get_content_descriptor(self, request: CanonicalRequest) -> dict[str, Any] | None:
        return await self._call("getContentDescriptor", request)

    async def get_content_set_size(self, request: CanonicalRequest) -> int:
        return int(await self._call("getContentSetSize", request) or 0)

    async def get_paged_content_set(self, request: CanonicalRequest) -> dict[str, Any]:
        return await self._call("getPagedContentSet", request) or {"total": 0, "items": []}

    async def get_paged_content(self, request: CanonicalRequest) -> dict[str, Any] | None:
        return await self._call("getPagedContent", request)

    async def get_paged_distinct_values(self, request: CanonicalRequest) -> dict[str, Any]:
        return await self._call("getPagedDistinctValues", request) or {"total": 0, "items": []}

    async def get_display_label_definition(self, request: CanonicalLabelRequest) -> dict[str, Any]:
        return await self._call("getDisplayLabelDefinition", request)

    async def get_paged_display_label_definitions(self, request: CanonicalLabelRequest) -> dict[str, Any]:
        return await self._call("getPagedDisplayLabelDefinitions", request) or {"total": 0, "items": []}

    async def compare_hierarchies(self, request: CanonicalRequest) -> list[Any]:
        return await self._call("compareHierarchies", request) or []

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def _call(self, operation: str, request: CanonicalRequest | CanonicalLabelRequest) -> Any:
        """POST one operation and unwrap the RPC envelope.

        Args:
            operation: Operation name (URL path segment).
            request: Canonical request sent as `options`.

        Returns:
            The envelope's `result` (None when absent).

        Raises:
            PresentationError: On transport failure or a non-success status.
        """
        try:
            response = await self._client.post(f"/{operation}", json={"options": request.to_wire()})
        except httpx.TimeoutException as e:
            self._log_failure(operation, e)
            raise PresentationError(PresentationStatus.BACKEND_TIMEOUT, f"{operation} timed out") from e
        except httpx.HTTPError as e:
            self._log_failure(operation, e)
            raise PresentationError(PresentationStatus.ERROR, f"{operation} failed: {e}") from e

        envelope = _decode_envelope(operation, response)
        status = envelope.get("statusCode", PresentationStatus.SUCCESS)
        if status != PresentationStatus.SUCCESS:
            raise PresentationError.from_dict({"status": status, "message": envelope.get("errorMessage")})
        return envelope.get("result")

    def _log_failure(self, operation: str, exc: Exception) -> None:
        _logger.warning(
            {
                "event": "transport_request_failed",
                "message": f"Presentation request {operation} failed: {exc}",
                "operation": operation,
                "error_type": type(exc).__name__,
                "unreachable": is_transport_error(exc),
            }
        )


def _decode_envelope(operation: str, response: httpx.Response) -> dict[str, Any]:
    try:
        envelope = response.json()
    except json.JSONDecodeError as e:
        if response.is_error:
            raise PresentationError(
                PresentationStatus.ERROR, f"{operation} failed with HTTP {response.status_code}"
            ) from e
        raise PresentationError(
            PresentationStatus.INVALID_RESPONSE, f"{operation} returned a non-JSON response"
        ) from e

    if not isinstance(envelope, dict):
        raise PresentationError(PresentationStatus.INVALID_RESPONSE, f"{operation} returned an invalid response")
    if response.is_error and "statusCode" not in envelope:
        # HTTP error without an RPC envelope
        return {
            "statusCode": PresentationStatus.ERROR,
            "errorMessage": envelope.get("message") or f"{operation} failed with HTTP {response.status_code}",
        }
    return envelope
