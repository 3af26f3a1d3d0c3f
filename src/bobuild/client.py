"""Bobuild REST API client.

Provides an httpx-based client for the Bobuild JSON API with Bearer token auth.
Every route lives under /_api on the target host. List endpoints are paginated
with a zero-based ``page`` query parameter and an ``{"items": [...], "total": n}``
envelope; the client follows pages until ``total`` items have been collected.

Responses are decoded with pydantic, so callers pass the type they expect back
(a BaseModel, a dataclass, a TypedDict, ``dict``, ``list[...]``) and receive a
validated instance.
"""

import logging
from collections.abc import Iterator
from functools import lru_cache
from typing import Any, TypeVar

import httpx
import pydantic_core
from pydantic import TypeAdapter, ValidationError

from .config import DEFAULT_TIMEOUT_SECONDS, BobuildConfig, get_config
from .models import DeleteResponse, InsertMultipleResponse, InsertResponse, ListEnvelope
from .timing import timed_operation
from .urls import make_url, with_page

__all__ = [
    "APIStatusError",
    "BobuildClient",
    "BobuildClientError",
    "DecodeError",
    "NetworkError",
    "PaginationError",
    "RequestBuildError",
    "RequestTimeoutError",
]

logger = logging.getLogger("bobuild.client")

T = TypeVar("T")


class BobuildClientError(Exception):
    """Raised when a Bobuild API request fails.

    Base class for every error the client raises; the underlying httpx or
    pydantic exception is chained as ``__cause__``.
    """

    pass


class RequestBuildError(BobuildClientError):
    """Raised when the request cannot be built (bad URL, unencodable payload)."""

    pass


class NetworkError(BobuildClientError):
    """Raised when the HTTP exchange fails at the transport level."""

    pass


class RequestTimeoutError(NetworkError):
    """Raised when a request exceeds the configured timeout."""

    pass


class APIStatusError(BobuildClientError):
    """Raised when the API answers with any status other than 200.

    Attributes:
        status_code: HTTP status code
        reason: HTTP reason phrase
        url: Requested URL
        body: Response body text (POST requests only, None otherwise)
    """

    def __init__(
        self,
        status_code: int,
        reason: str,
        url: str,
        body: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self.url = url
        self.body = body
        message = f"API call failed with status: {status_code} {reason}".rstrip()
        if body:
            message = f"{message} {body}"
        super().__init__(message)


class DecodeError(BobuildClientError):
    """Raised when a response body is not JSON or does not match the expected type."""

    pass


class PaginationError(BobuildClientError):
    """Raised when a list endpoint reports more items than it ever returns."""

    pass


@lru_cache(maxsize=256)
def _cached_adapter(result_type: Any) -> TypeAdapter:
    return TypeAdapter(result_type)


def _type_adapter(result_type: Any) -> TypeAdapter:
    try:
        return _cached_adapter(result_type)
    except TypeError:
        # Unhashable type expressions (e.g. Annotated with dict metadata)
        return TypeAdapter(result_type)


class BobuildClient:
    """Bobuild REST API client using httpx with Bearer token auth.

    Uses one long-lived httpx.Client with connection pooling. The client holds
    no mutable state of its own, so one instance may be shared by several
    threads; concurrent callers issue independent request sequences.

    Attributes:
        client: Underlying httpx.Client (Authorization and Accept headers preset)

    Example:
        >>> with BobuildClient("app.example.com", "secret-key") as api:
        ...     user = api.get("/users/123", User)
        ...     users = api.get_list("/users?active=1", User)
        ...     created = api.insert("/users/insert", {"name": "Bob"})
    """

    def __init__(
        self,
        host: str,
        api_key: str,
        use_tls: bool = True,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            host: API host without scheme (e.g. app.example.com), or a base URL
                that already carries one (e.g. http://127.0.0.1:8080)
            api_key: Bearer token sent as ``Authorization: Bearer <api_key>``
            use_tls: Build https:// URLs from host when True (default)
            timeout: Timeout for each individual request, in seconds
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        """
        self._host = host.rstrip("/")
        self._use_tls = use_tls
        self._timeout = timeout

        self.client = httpx.Client(
            timeout=httpx.Timeout(timeout),
            headers={
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: BobuildConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> "BobuildClient":
        """Build a client from BobuildConfig (environment / .env).

        Args:
            config: Optional BobuildConfig instance. Uses get_config() if not provided.
            transport: Optional httpx transport override
        """
        config = config or get_config()
        return cls(
            host=config.host,
            api_key=config.api_key.get_secret_value(),
            use_tls=config.use_tls,
            timeout=config.timeout_seconds,
            transport=transport,
        )

    @property
    def host(self) -> str:
        return self._host

    @property
    def use_tls(self) -> bool:
        return self._use_tls

    @property
    def timeout(self) -> float:
        return self._timeout

    def __repr__(self) -> str:
        return f"BobuildClient(host={self._host!r}, use_tls={self._use_tls})"

    def make_url(self, endpoint: str) -> str:
        """Resolve an endpoint against this client's host. See urls.make_url."""
        return make_url(self._host, endpoint, self._use_tls)

    # --- Single-object fetch ---

    def get(self, endpoint: str, result_type: type[T] = Any) -> T:  # type: ignore[assignment]
        """GET an endpoint and decode the JSON body.

        Args:
            endpoint: Path relative to /_api (e.g. "/users/123") or absolute URL
            result_type: Type to decode the body into (default: raw JSON)

        Returns:
            Decoded response body

        Raises:
            RequestBuildError: If the URL cannot be used
            NetworkError: On connection failure or timeout
            APIStatusError: If the status is not 200
            DecodeError: If the body does not decode into result_type
        """
        return self._request("GET", endpoint, result_type)

    def post(
        self,
        endpoint: str,
        payload: Any = None,
        result_type: type[T] = Any,  # type: ignore[assignment]
    ) -> T:
        """POST a JSON payload and decode the JSON body.

        Args:
            endpoint: Path relative to /_api or absolute URL
            payload: JSON-serializable value (dict, list, BaseModel, dataclass).
                None sends an empty body.
            result_type: Type to decode the body into (default: raw JSON)

        Returns:
            Decoded response body

        Raises:
            RequestBuildError: If the payload cannot be encoded or the URL cannot be used
            NetworkError: On connection failure or timeout
            APIStatusError: If the status is not 200 (message includes the body)
            DecodeError: If the body does not decode into result_type
        """
        content = None
        if payload is not None:
            try:
                content = pydantic_core.to_json(payload)
            except pydantic_core.PydanticSerializationError as e:
                raise RequestBuildError(f"Failed to marshal payload: {e}") from e
        return self._request("POST", endpoint, result_type, content=content)

    # --- Paginated list fetch ---

    def iter_pages(
        self,
        endpoint: str,
        item_type: type[T] = Any,  # type: ignore[assignment]
    ) -> Iterator[ListEnvelope[T]]:
        """Lazily fetch the pages of a list endpoint.

        Page 0 is requested first; further pages are requested only while the
        items seen so far are fewer than the server-reported total, and only
        as the caller advances the iterator.

        Args:
            endpoint: List endpoint, with or without an existing query string
            item_type: Type of each item in the envelope

        Yields:
            One ListEnvelope per page, in page order

        Raises:
            BobuildClientError: If any page fails (see get())
            PaginationError: If a page comes back empty before total is reached
        """
        envelope_type = ListEnvelope[item_type]
        page = 0
        fetched = 0

        while True:
            envelope = self.get(with_page(endpoint, page), envelope_type)
            fetched += len(envelope.items)

            logger.debug(
                "bobuild_list_page",
                extra={
                    "endpoint": endpoint,
                    "page": page,
                    "page_items": len(envelope.items),
                    "total_so_far": fetched,
                    "total": envelope.total,
                },
            )

            if fetched < envelope.total and not envelope.items:
                raise PaginationError(
                    f"Page {page} of {endpoint} returned no items "
                    f"after {fetched} of {envelope.total}"
                )

            yield envelope

            if fetched >= envelope.total:
                break
            page += 1

        logger.debug(
            "bobuild_list_complete",
            extra={"endpoint": endpoint, "pages": page + 1, "total_items": fetched},
        )

    def iter_items(
        self,
        endpoint: str,
        item_type: type[T] = Any,  # type: ignore[assignment]
    ) -> Iterator[T]:
        """Lazily yield the items of a list endpoint across all pages."""
        for envelope in self.iter_pages(endpoint, item_type):
            yield from envelope.items

    def get_list(
        self,
        endpoint: str,
        item_type: type[T] = Any,  # type: ignore[assignment]
    ) -> list[T]:
        """Fetch every page of a list endpoint and merge the items.

        Either all items are returned or an exception is raised; items from
        pages fetched before a failure are discarded.

        Example:
            >>> users = api.get_list("/users", User)
        """
        return list(self.iter_items(endpoint, item_type))

    # --- Mutation envelopes ---

    def insert(self, endpoint: str, payload: Any) -> InsertResponse:
        """POST a single object; returns {success, error, object, id}."""
        return self.post(endpoint, payload, InsertResponse)

    def insert_multiple(self, endpoint: str, payload: Any) -> InsertMultipleResponse:
        """POST several objects; returns {success, error, object, id: [...]}."""
        return self.post(endpoint, payload, InsertMultipleResponse)

    def delete(self, endpoint: str, payload: Any = None) -> DeleteResponse:
        """POST a delete request; returns {success, error}.

        Args:
            endpoint: Delete endpoint (e.g. "/users/123/delete")
            payload: Optional JSON body; omitted when None
        """
        return self.post(endpoint, payload, DeleteResponse)

    # --- Core HTTP ---

    def _request(
        self,
        method: str,
        endpoint: str,
        result_type: Any,
        content: bytes | None = None,
    ) -> Any:
        """Perform one HTTP exchange and decode the body.

        Args:
            method: GET or POST
            endpoint: Relative path or absolute URL
            result_type: Type for pydantic validation of the body
            content: Encoded JSON body (POST only)

        Returns:
            Body validated against result_type
        """
        url = self.make_url(endpoint)
        headers = {"Content-Type": "application/json"} if method == "POST" else None

        try:
            request = self.client.build_request(
                method, url, content=content, headers=headers
            )
        except (httpx.InvalidURL, ValueError) as e:
            raise RequestBuildError(f"Error creating HTTP request for {url}: {e}") from e

        with timed_operation(
            "bobuild_request",
            logger,
            level=logging.DEBUG,
            extra={"method": method, "url": url},
        ) as log_context:
            try:
                response = self.client.send(request)
            except httpx.UnsupportedProtocol as e:
                raise RequestBuildError(
                    f"Error creating HTTP request for {url}: {e}"
                ) from e
            except httpx.TimeoutException as e:
                raise RequestTimeoutError(
                    f"{method} {url} timed out after {self._timeout}s"
                ) from e
            except httpx.HTTPError as e:
                raise NetworkError(f"Error making {method} request to {url}: {e}") from e

            log_context["status_code"] = response.status_code

            if response.status_code != httpx.codes.OK:
                raise APIStatusError(
                    response.status_code,
                    response.reason_phrase,
                    url,
                    body=response.text if method == "POST" else None,
                )

        try:
            return _type_adapter(result_type).validate_json(response.content)
        except ValidationError as e:
            raise DecodeError(f"Error parsing JSON response from {url}: {e}") from e

    # --- Lifecycle ---

    def close(self) -> None:
        """Close the HTTP client and release pooled connections."""
        self.client.close()

    def __enter__(self) -> "BobuildClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
