"""Typed representations of Home Assistant REST responses and request bodies."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, Field


class UnitSystem(BaseModel):
    length: str
    mass: str
    temperature: str
    volume: str
    accumulated_precipitation: str | None = None
    area: str | None = None
    pressure: str | None = None
    wind_speed: str | None = None

    class Config:
        extra = "ignore"


class Config(BaseModel):
    """Response of ``/api/config``."""

    components: list[str]
    config_dir: str
    elevation: float
    latitude: float
    location_name: str
    longitude: float
    time_zone: str
    unit_system: UnitSystem
    version: str
    whitelist_external_dirs: list[str] = Field(default_factory=list)

    class Config:
        extra = "ignore"


class Event(BaseModel):
    event: str
    listener_count: int

    class Config:
        extra = "ignore"


class Service(BaseModel):
    """A domain and the services it exposes, keyed by service name."""

    domain: str
    services: dict[str, Any] = Field(default_factory=dict)

    class Config:
        extra = "ignore"


class Attributes(BaseModel):
    """Entity attributes; keys without a dedicated field are kept as extras."""

    friendly_name: str | None = None
    editable: bool | None = None
    id: str | None = None
    source: str | None = None
    user_id: str | None = None
    icon: str | None = None

    class Config:
        extra = "allow"

    @property
    def other_fields(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class Context(BaseModel):
    id: str
    parent_id: str | None = None
    user_id: str | None = None

    class Config:
        extra = "ignore"


class HistoryEntry(BaseModel):
    """One recorded state; minimal responses omit everything but state and time."""

    entity_id: str | None = None
    state: str
    attributes: Attributes | None = None
    last_changed: datetime
    last_updated: datetime | None = None

    class Config:
        extra = "ignore"


class LogbookEntry(BaseModel):
    name: str
    message: str | None = None
    source: str | None = None
    entity_id: str | None = None
    context_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("context_id", "context_user_id"),
    )
    domain: str | None = None
    when: datetime

    class Config:
        extra = "ignore"


class State(BaseModel):
    """Response item of ``/api/states``."""

    entity_id: str | None = None
    state: str
    attributes: Attributes | None = None
    last_changed: datetime | None = None
    last_reported: datetime | None = None
    last_updated: datetime | None = None
    context: Context | None = None

    class Config:
        extra = "ignore"


class ErrorLogEntry(BaseModel):
    """One record of the server log, including any continuation lines."""

    timestamp: datetime | None = None
    level: str | None = None
    source: str | None = None
    logger: str | None = None
    message: str


class Calendar(BaseModel):
    entity_id: str
    name: str

    class Config:
        extra = "ignore"


class SimpleResponse(BaseModel):
    message: str

    class Config:
        extra = "ignore"


class ConfigCheckResponse(BaseModel):
    result: str
    errors: str | None = None
    warnings: str | None = None

    class Config:
        extra = "ignore"


class StateRequest(BaseModel):
    """Body for creating or updating an entity state."""

    state: str
    attributes: dict[str, Any] | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"state": self.state}
        if self.attributes is not None:
            payload["attributes"] = self.attributes
        return payload


class TemplateRequest(BaseModel):
    template: str
