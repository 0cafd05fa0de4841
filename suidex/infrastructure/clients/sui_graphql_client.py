from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
import json
import logging
from typing import Any

import httpx


logger = logging.getLogger(__name__)

DEFAULT_SUI_GRAPHQL_URL = "https://graphql.mainnet.sui.io/graphql"

OBJECT_FIELDS = """
    address
    version
    digest
    asMoveObject {
      contents {
        type { repr }
        json
      }
    }
"""

OBJECT_QUERY = f"""
query GetObject($address: SuiAddress!) {{
  object(address: $address) {{{OBJECT_FIELDS}  }}
}}
"""

OBJECTS_BY_TYPE_QUERY = f"""
query ObjectsByType($type: String!, $first: Int!, $after: String) {{
  objects(first: $first, after: $after, filter: {{ type: $type }}) {{
    pageInfo {{ hasNextPage endCursor }}
    nodes {{{OBJECT_FIELDS}    }}
  }}
}}
"""


class SuiGraphQLError(RuntimeError):
    """The endpoint answered with a GraphQL ``errors`` list."""

    def __init__(self, messages: list[str]):
        self.messages = messages
        super().__init__(f"GraphQL errors: {', '.join(messages)}")


class SuiGraphQLHTTPError(RuntimeError):
    def __init__(self, status_code: int, reason: str):
        self.status_code = status_code
        super().__init__(f"GraphQL request failed: {status_code} {reason}".rstrip())


class SuiGraphQLProtocolError(RuntimeError):
    pass


@dataclass(frozen=True)
class SuiGraphQLClientSettings:
    url: str = DEFAULT_SUI_GRAPHQL_URL
    timeout_seconds: float = 15.0
    max_retries: int = 3
    initial_backoff_ms: int = 500


@dataclass(frozen=True)
class ObjectPage:
    nodes: list[dict[str, Any]]
    has_next_page: bool
    end_cursor: str | None


class SuiGraphQLClient:
    """Read-only client for the Sui GraphQL RPC.

    Only transport failures (connection, DNS, timeouts) are retried. HTTP
    status errors, malformed bodies and GraphQL ``errors`` are raised on the
    first occurrence since repeating the same request would not change them.
    """

    def __init__(
        self,
        settings: SuiGraphQLClientSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._settings = settings
        self._transport = transport
        self._sleep = sleep

    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        attempts = max(1, self._settings.max_retries)
        for attempt in range(attempts - 1):
            try:
                return await self._post(query, variables or {})
            except httpx.TransportError as exc:
                logger.warning(
                    "sui_graphql_client: graphql_retry attempt=%s/%s error=%s",
                    attempt + 1,
                    attempts,
                    exc,
                )
                backoff_ms = self._settings.initial_backoff_ms * (2**attempt)
                await self._sleep(backoff_ms / 1000.0)

        return await self._post(query, variables or {})

    async def query_object(self, address: str) -> dict[str, Any] | None:
        data = await self.execute(OBJECT_QUERY, {"address": address})
        return data.get("object")

    async def query_objects(self, addresses: list[str]) -> list[dict[str, Any]]:
        if not addresses:
            return []

        declarations = ", ".join(f"$a{index}: SuiAddress!" for index in range(len(addresses)))
        selections = "\n".join(
            f"  obj{index}: object(address: $a{index}) {{{OBJECT_FIELDS}  }}"
            for index in range(len(addresses))
        )
        query = f"query GetMultipleObjects({declarations}) {{\n{selections}\n}}"
        variables = {f"a{index}": address for index, address in enumerate(addresses)}

        data = await self.execute(query, variables)
        objects = [data.get(f"obj{index}") for index in range(len(addresses))]
        found = [obj for obj in objects if obj]
        if len(found) != len(addresses):
            logger.info(
                "sui_graphql_client: objects_missing requested=%s found=%s",
                len(addresses),
                len(found),
            )
        return found

    async def list_objects_by_type(
        self,
        object_type: str,
        *,
        first: int = 50,
        after: str | None = None,
    ) -> ObjectPage:
        data = await self.execute(
            OBJECTS_BY_TYPE_QUERY,
            {"type": object_type, "first": first, "after": after},
        )
        connection = data.get("objects") or {}
        page_info = connection.get("pageInfo") or {}
        return ObjectPage(
            nodes=[node for node in connection.get("nodes") or [] if node],
            has_next_page=bool(page_info.get("hasNextPage")),
            end_cursor=page_info.get("endCursor"),
        )

    async def iter_objects_by_type(
        self,
        object_type: str,
        *,
        page_size: int = 50,
        max_pages: int | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        cursor: str | None = None
        pages = 0
        while True:
            page = await self.list_objects_by_type(object_type, first=page_size, after=cursor)
            pages += 1
            for node in page.nodes:
                yield node
            if not page.has_next_page or not page.end_cursor:
                break
            if max_pages is not None and pages >= max_pages:
                logger.info(
                    "sui_graphql_client: pagination_capped type=%s pages=%s",
                    object_type,
                    pages,
                )
                break
            cursor = page.end_cursor

    async def _post(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        async with httpx.AsyncClient(
            timeout=self._settings.timeout_seconds,
            transport=self._transport,
        ) as client:
            response = await client.post(
                self._settings.url,
                json={"query": query, "variables": variables},
            )

        if not response.is_success:
            raise SuiGraphQLHTTPError(response.status_code, response.reason_phrase)

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise SuiGraphQLProtocolError(f"GraphQL response is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise SuiGraphQLProtocolError("GraphQL response body must be a JSON object.")

        errors = payload.get("errors") or []
        if errors:
            raise SuiGraphQLError(
                [str(err.get("message", err)) if isinstance(err, dict) else str(err) for err in errors]
            )
        return payload.get("data") or {}


def move_object_contents(node: dict[str, Any] | None) -> tuple[str | None, dict[str, Any]]:
    """Return ``(type repr, json fields)`` of an object node, empty when not a Move object."""
    contents = ((node or {}).get("asMoveObject") or {}).get("contents") or {}
    type_info = contents.get("type")
    type_repr = type_info.get("repr") if isinstance(type_info, dict) else type_info
    fields = contents.get("json")
    return type_repr, fields if isinstance(fields, dict) else {}
