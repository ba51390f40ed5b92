"""
Courseware Backend — Resource API Client
==========================================

What:  Async client mirroring the server's three resource operations
       (list, get_by_id, create) so calling code never touches HTTP directly.
How:   One httpx request per call against `{base_url}{api_prefix}/{path}`;
       responses are decoded into the definition's read model.
Who:   Presentation code, scripts, and other services talking to the API.

Failure contract:
    Every failure raises TransportError with the original exception chained:
      - connection errors and timeouts  → status_code=None
      - non-2xx responses               → status_code and the server's message
      - bodies that cannot be decoded   → status_code of the response
    There are no retries, no caching and no request deduplication; the caller
    decides what to do with a failure.

Example:
    async with course_client(base_url="http://localhost:8000") as client:
        created = await client.create({"title": "Intro to Systems", "rating": 4.5})
        same = await client.get_by_id(created.id)
"""

import logging
from typing import Any, Dict, Generic, List, Optional

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from courseware import __version__
from courseware.config import settings
from courseware.exceptions import TransportError
from courseware.middleware.request_id import request_id_var
from courseware.schemas.course import COURSE, CourseResponse
from courseware.schemas.resource import ModelT, ResourceDefinition

logger = logging.getLogger(__name__)


class ResourceClient(Generic[ModelT]):
    """
    Remote facade for one resource.

    Args:
        definition: Resource whose routes and models to use
        base_url:   Server origin (defaults to settings.api_base_url)
        api_prefix: Prefix the resource routers are mounted under (defaults to settings)
        timeout:    Per-request timeout in seconds (defaults to settings.client_timeout)
        client:     Existing httpx.AsyncClient to send requests with; the caller
                    keeps ownership and must close it

    Attributes:
        endpoint: Collection URL, e.g. http://localhost:8000/api/courses
    """

    def __init__(
        self,
        definition: ResourceDefinition[ModelT],
        base_url: Optional[str] = None,
        api_prefix: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.definition = definition
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        prefix = settings.api_prefix if api_prefix is None else api_prefix
        prefix = prefix.strip("/")
        self.endpoint = "/".join(part for part in (self.base_url, prefix, definition.path) if part)
        self.timeout = settings.client_timeout if timeout is None else timeout

        self._owns_client = client is None
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "ResourceClient[ModelT]":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": f"courseware-client/{__version__}",
        }
        # Forward the correlation id when called from inside a request
        rid = request_id_var.get("")
        if rid:
            headers["X-Request-ID"] = rid
        return headers

    async def _request(self, method: str, url: str, json: Any = None) -> httpx.Response:
        client = self._get_client()
        logger.debug("%s %s", method, url)
        try:
            response = await client.request(method, url, json=json, headers=self._headers())
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            details = _error_body(e.response)
            message = details.get("message") or f"{method} {url} returned {e.response.status_code}"
            logger.warning("%s %s failed with %d: %s", method, url, e.response.status_code, message)
            raise TransportError(
                message=message,
                status_code=e.response.status_code,
                details=details,
                context={"method": method, "url": url},
            ) from e
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, repr(e))
            raise TransportError(
                message=f"{method} {url} failed: {e!r}",
                context={"method": method, "url": url, "error_type": type(e).__name__},
            ) from e
        return response

    def _decode(self, response: httpx.Response, many: bool = False) -> Any:
        try:
            data = response.json()
            if many:
                if not isinstance(data, list):
                    raise ValueError(f"expected a JSON array, got {type(data).__name__}")
                return [self.definition.decode(item) for item in data]
            return self.definition.decode(data)
        except (ValueError, PydanticValidationError) as e:
            raise TransportError(
                message=f"Could not decode {self.definition.name} response: {e}",
                status_code=response.status_code,
                context={"url": str(response.request.url)},
            ) from e

    # ── Operations ────────────────────────────────────────────────────────

    async def list(self) -> List[ModelT]:
        """
        Fetch every instance.

        An empty collection comes back from the server as 404, which surfaces
        here as TransportError(status_code=404), not as an empty list.
        """
        response = await self._request("GET", self.endpoint)
        return self._decode(response, many=True)

    async def get_by_id(self, resource_id: str) -> ModelT:
        """Fetch one instance; unknown ids raise TransportError(status_code=404)."""
        response = await self._request("GET", f"{self.endpoint}/{resource_id}")
        return self._decode(response)

    async def create(self, payload: Any) -> ModelT:
        """
        Create an instance and return it with its assigned id.

        Args:
            payload: Mapping of wire-named fields, or a pydantic model
        """
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(mode="json", by_alias=True, exclude_unset=True)
        response = await self._request("POST", self.endpoint, json=payload)
        return self._decode(response)


def _error_body(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {"message": response.text} if response.text else {}
    return body if isinstance(body, dict) else {"body": body}


def course_client(**kwargs: Any) -> ResourceClient[CourseResponse]:
    """Build a ResourceClient for courses; kwargs are passed to ResourceClient."""
    return ResourceClient(COURSE, **kwargs)
