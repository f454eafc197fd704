"""Command-line entry point printing Home Assistant REST responses as JSON."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Sequence

from pydantic import BaseModel

from hass_rest.core.config import resolve_settings
from hass_rest.core.errors import HomeAssistantError
from hass_rest.services.ha_api import HomeAssistantAPI

logger = logging.getLogger("hass_rest")

ENDPOINTS = (
    "config",
    "events",
    "services",
    "history",
    "logbook",
    "states",
    "error_log",
    "calendars",
)
_FILTERED_ENDPOINTS = {"history", "logbook", "states"}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hass-rest", description="Query a Home Assistant REST endpoint."
    )
    parser.add_argument("endpoint", choices=ENDPOINTS)
    parser.add_argument("--url", help="Base URL, defaults to $HA_URL")
    parser.add_argument("--token", help="Long-lived access token, defaults to $HA_TOKEN")
    parser.add_argument("--entity-id", help="Entity filter for history, logbook and states")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def _to_jsonable(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, list):
        return [_to_jsonable(item) for item in result]
    return result


async def run(api: HomeAssistantAPI, endpoint: str, entity_id: str | None = None) -> Any:
    """Call ``endpoint`` on ``api`` and return the result in JSON-ready form."""

    method = getattr(api, endpoint)
    if endpoint in _FILTERED_ENDPOINTS:
        result = await method(entity_id)
    else:
        result = await method()
    return _to_jsonable(result)


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = resolve_settings(args.url, args.token)
        api = HomeAssistantAPI(settings)
        logger.info("Querying %s on %s", args.endpoint, settings.url)
        output = asyncio.run(run(api, args.endpoint, args.entity_id))
    except HomeAssistantError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
