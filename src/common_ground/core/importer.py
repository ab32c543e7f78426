"""Read calendar event listings exported from a calendar provider."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .exceptions import EventFormatError
from .models import CalendarEvent

LOGGER = logging.getLogger("common_ground.importer")


def events_from_payload(payload: Any) -> list[CalendarEvent]:
    """Parse a provider listing (``{"items": [...]}`` or a bare list).

    Cancelled events no longer block time and are skipped.
    """
    if isinstance(payload, dict):
        items = payload.get("items", [])
    else:
        items = payload
    if not isinstance(items, list):
        raise EventFormatError("Event listing must be a list or an object with an 'items' list")

    events: list[CalendarEvent] = []
    skipped = 0
    for index, item in enumerate(items):
        if isinstance(item, dict) and item.get("status") == "cancelled":
            skipped += 1
            continue
        try:
            events.append(CalendarEvent.from_api_dict(item))
        except EventFormatError as exc:
            raise EventFormatError(f"Event #{index}: {exc}") from exc
    LOGGER.info(
        "Calendar events parsed",
        extra={"event": "events_parsed", "count": len(events), "cancelled": skipped},
    )
    return events


def load_events(path: Path | str) -> list[CalendarEvent]:
    source = Path(path)
    try:
        with source.open("r", encoding="utf-8") as infile:
            payload = json.load(infile)
    except json.JSONDecodeError as exc:
        LOGGER.exception("Invalid JSON in events file", extra={"event": "events_invalid_json", "path": str(source)})
        raise EventFormatError(f"Events file is malformed: {source}") from exc
    except OSError as exc:
        LOGGER.exception("Unable to read events file", extra={"event": "events_read_failed", "path": str(source)})
        raise EventFormatError(f"Unable to read events file: {source}") from exc
    return events_from_payload(payload)
