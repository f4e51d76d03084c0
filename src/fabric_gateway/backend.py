"""Backend invoker - the single seam to the content-processing backend.

Operation handlers depend only on the ``BackendInvoker`` protocol. The
default implementation talks to a Fabric-style pattern API over HTTP.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel, ConfigDict, Field

from .config import GatewayConfig

logger = logging.getLogger(__name__)


class PatternResult(BaseModel):
    """Normalized outcome of a successful backend invocation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pattern_id: str = Field(alias="patternId")
    output: Any
    metadata: dict[str, Any] | None = None

    def to_wire(self) -> dict[str, Any]:
        """Serialize with protocol (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BackendError(Exception):
    """The backend call failed. Carries only a human-readable message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@runtime_checkable
class BackendInvoker(Protocol):
    """Contract for invoking a backend operation.

    Implementations return a ``PatternResult`` or raise ``BackendError``.
    Mapping failures to client-facing codes is the caller's job.
    """

    async def invoke(self, operation: str, params: dict[str, Any]) -> PatternResult:
        """Run ``operation`` with ``params``."""
        ...


class FabricBackend:
    """HTTP client for a Fabric pattern API.

    Each invocation is ``POST /patterns/{operation}/execute`` with the body
    ``{"input": params}``. The reply is either a bare JSON string or an
    object with ``output`` and optional ``metadata``.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str = "",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.AsyncClient(
            base_url=api_url,
            headers=headers,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: GatewayConfig) -> FabricBackend:
        """Build a backend from gateway configuration."""
        return cls(
            api_url=config.api_url,
            api_key=config.api_key,
            timeout=config.backend_timeout,
        )

    async def invoke(self, operation: str, params: dict[str, Any]) -> PatternResult:
        """Execute a pattern and normalize its reply."""
        logger.debug(f"Invoking pattern {operation}")
        try:
            response = await self._client.post(
                f"/patterns/{operation}/execute",
                json={"input": params},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as e:
            raise BackendError(f"Pattern {operation} timed out") from e
        except httpx.HTTPStatusError as e:
            raise BackendError(
                f"Pattern {operation} failed with status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise BackendError(f"Pattern {operation} request failed: {e}") from e
        except ValueError as e:
            raise BackendError(f"Pattern {operation} returned invalid JSON") from e

        return _to_pattern_result(operation, payload)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()


def _to_pattern_result(operation: str, payload: Any) -> PatternResult:
    if isinstance(payload, str):
        return PatternResult(pattern_id=operation, output=payload)

    if not isinstance(payload, dict) or "output" not in payload:
        raise BackendError(f"Pattern {operation} returned an unexpected reply")

    metadata = payload.get("metadata")
    if metadata is not None and not isinstance(metadata, dict):
        raise BackendError(f"Pattern {operation} returned malformed metadata")

    return PatternResult(pattern_id=operation, output=payload["output"], metadata=metadata)
