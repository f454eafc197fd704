"""Asynchronous Home Assistant REST API wrapper."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from hass_rest.core.config import ConnectionSettings, resolve_settings
from hass_rest.core.errors import DecodeError, TransportError
from hass_rest.logic.error_log import parse_error_log
from hass_rest.services.models import (
    Calendar,
    Config,
    ConfigCheckResponse,
    ErrorLogEntry,
    Event,
    HistoryEntry,
    LogbookEntry,
    Service,
    SimpleResponse,
    State,
    StateRequest,
    TemplateRequest,
)

logger = logging.getLogger("hass_rest")

T = TypeVar("T")


def _timestamp_segment(start_time: datetime | None) -> str:
    if start_time is None:
        return ""
    return "/" + start_time.isoformat()


class HomeAssistantAPI:
    """Async client for Home Assistant's REST API bound to one set of connection settings."""

    def __init__(
        self,
        settings: ConnectionSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    @property
    def settings(self) -> ConnectionSettings:
        return self._settings

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._settings.token}",
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        try:
            url = httpx.URL(f"{self._settings.url}/api/{path}")
            async with httpx.AsyncClient(
                timeout=self._settings.timeout_seconds,
                verify=self._settings.verify_ssl,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method, url, headers=self._headers(), params=params, json=json
                )
                logger.debug("%s /api/%s -> %s", method, path, response.status_code)
                response.raise_for_status()
        except httpx.InvalidURL as exc:
            logger.warning("%s /api/%s rejected as an invalid URL", method, path)
            raise TransportError(f"Invalid request URL for /api/{path}: {exc}") from exc
        except httpx.TimeoutException as exc:
            logger.warning("%s /api/%s timed out", method, path)
            raise TransportError(f"Home Assistant request to /api/{path} timed out") from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning("%s /api/%s failed with status %s", method, path, status)
            raise TransportError(
                f"Home Assistant returned {status} for /api/{path}", status_code=status
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("%s /api/%s failed: %s", method, path, exc)
            raise TransportError(f"Home Assistant request to /api/{path} failed: {exc}") from exc
        return response

    @staticmethod
    def _decode(response: httpx.Response, model: type[T] | Any) -> T:
        try:
            data = response.json()
        except ValueError as exc:
            raise DecodeError(f"Response from {response.url.path} was not valid JSON") from exc
        try:
            return TypeAdapter(model).validate_python(data)
        except ValidationError as exc:
            raise DecodeError(
                f"Response from {response.url.path} did not match the expected shape: {exc}"
            ) from exc

    async def config(self) -> Config:
        """Fetch the server configuration."""

        response = await self._request("GET", "config")
        return self._decode(response, Config)

    async def events(self) -> list[Event]:
        """List event types and their listener counts."""

        response = await self._request("GET", "events")
        return self._decode(response, list[Event])

    async def services(self) -> list[Service]:
        response = await self._request("GET", "services")
        return self._decode(response, list[Service])

    async def history(
        self,
        entity_id: str | None = None,
        *,
        minimal_response: bool = False,
        no_attributes: bool = False,
        significant_changes_only: bool = False,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
    ) -> list[HistoryEntry]:
        """Fetch state history, flattening the per-entity lists into one list.

        Without ``start_time`` the server returns the last day.
        """

        params: dict[str, Any] = {}
        if entity_id:
            params["filter_entity_id"] = entity_id
        if end_time is not None:
            params["end_time"] = end_time.isoformat()
        # flags are presence-only on the server side
        if minimal_response:
            params["minimal_response"] = ""
        if no_attributes:
            params["no_attributes"] = ""
        if significant_changes_only:
            params["significant_changes_only"] = ""

        path = "history/period" + _timestamp_segment(start_time)
        response = await self._request("GET", path, params=params)
        groups = self._decode(response, list[list[HistoryEntry]])
        return [entry for group in groups for entry in group]

    async def logbook(
        self,
        entity_id: str | None = None,
        *,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
    ) -> list[LogbookEntry]:
        params: dict[str, Any] = {}
        if entity_id:
            params["entity"] = entity_id
        if end_time is not None:
            params["end_time"] = end_time.isoformat()

        path = "logbook" + _timestamp_segment(start_time)
        response = await self._request("GET", path, params=params)
        return self._decode(response, list[LogbookEntry])

    async def states(self, entity_id: str | None = None) -> list[State]:
        """Fetch all states, or the single state of ``entity_id`` as a one-item list."""

        if not entity_id:
            response = await self._request("GET", "states")
            return self._decode(response, list[State])

        response = await self._request("GET", f"states/{entity_id}")
        return [self._decode(response, State)]

    async def error_log(self) -> list[ErrorLogEntry]:
        response = await self._request("GET", "error_log")
        return parse_error_log(response.text)

    async def camera_proxy(self, entity_id: str, time: int) -> bytes:
        """Fetch a camera image; ``time`` is a unix timestamp in seconds."""

        response = await self._request(
            "GET", f"camera_proxy/{entity_id}", params={"time": time}
        )
        return response.content

    async def calendars(self) -> list[Calendar]:
        response = await self._request("GET", "calendars")
        return self._decode(response, list[Calendar])

    async def set_state(self, entity_id: str, request: StateRequest) -> State:
        """Create or update the state of an entity."""

        response = await self._request(
            "POST", f"states/{entity_id}", json=request.to_payload()
        )
        return self._decode(response, State)

    async def fire_event(
        self, event_type: str, data: dict[str, Any] | None = None
    ) -> SimpleResponse:
        response = await self._request("POST", f"events/{event_type}", json=data or {})
        return self._decode(response, SimpleResponse)

    async def call_service(
        self,
        domain: str,
        service: str,
        data: dict[str, Any] | None = None,
        *,
        return_response: bool = False,
    ) -> Any:
        """Invoke a service and return the decoded JSON body as-is."""

        params = {"return_response": ""} if return_response else None
        response = await self._request(
            "POST", f"services/{domain}/{service}", params=params, json=data or {}
        )
        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(
                f"Response from services/{domain}/{service} was not valid JSON"
            ) from exc

    async def render_template(self, template: str | TemplateRequest) -> str:
        if isinstance(template, str):
            template = TemplateRequest(template=template)
        response = await self._request("POST", "template", json=template.model_dump())
        return response.text

    async def check_config(self) -> ConfigCheckResponse:
        response = await self._request("POST", "config/core/check_config")
        return self._decode(response, ConfigCheckResponse)

    async def handle_intent(self, data: dict[str, Any]) -> str:
        response = await self._request("POST", "intent/handle", json=data)
        return response.text


def hass(
    url: str | None = None,
    token: str | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> HomeAssistantAPI:
    """Resolve connection settings and return a client bound to them.

    Resolution happens on every call to ``hass()``. The returned client keeps
    the settings it was built with and does not notice later environment
    changes; call ``hass()`` again to pick them up.
    """

    return HomeAssistantAPI(resolve_settings(url, token), transport=transport)
