"""Client for the EONET natural-event feed."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

import requests

from hazwatch.common import distance_km, logthis
from hazwatch.errors import ConnectionError, DeserializationError

RESTURL = "https://eonet.gsfc.nasa.gov/api/v3/events"
TIMEOUT_SECONDS = 30


def _parse_time(value):
    if not isinstance(value, str):
        raise DeserializationError(f"invalid timestamp {value!r}")
    try:
        stamp = datetime.fromisoformat(value)
    except ValueError as exc:
        raise DeserializationError(f"invalid timestamp {value!r}") from exc
    if stamp.tzinfo is None:
        return stamp.replace(tzinfo=timezone.utc)
    return stamp.astimezone(timezone.utc)


def _require(data, key, kind):
    value = data.get(key) if isinstance(data, dict) else None
    if not isinstance(value, kind) or isinstance(value, bool):
        raise DeserializationError(f"field {key!r} is missing or malformed")
    return value


def _optional(data, key, kind):
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, kind) or isinstance(value, bool):
        raise DeserializationError(f"field {key!r} is malformed")
    return value


@dataclass
class Category:
    id: str
    title: str | None = None


@dataclass
class Source:
    id: str | None = None
    url: str | None = None


@dataclass
class Geometry:
    date: datetime
    type: str
    coordinates: list[float]
    magnitude_value: float | None = None
    magnitude_unit: str | None = None


@dataclass
class Event:
    id: str
    title: str
    link: str
    description: str | None = None
    closed: datetime | None = None
    categories: list[Category] = field(default_factory=list)
    sources: list[Source] = field(default_factory=list)
    geometry: list[Geometry] = field(default_factory=list)
    distance: float | None = None

    @classmethod
    def from_json(cls, data):
        """Build an event from one decoded JSON object of the feed."""
        if not isinstance(data, dict):
            raise DeserializationError("event is not an object")
        categories = [
            Category(id=_require(c, "id", str), title=_optional(c, "title", str))
            for c in _require(data, "categories", list)
        ]
        sources = []
        for s in _require(data, "sources", list):
            if not isinstance(s, dict):
                raise DeserializationError("source is not an object")
            sources.append(Source(id=_optional(s, "id", str), url=_optional(s, "url", str)))
        geometry = []
        for g in _require(data, "geometry", list):
            coords = _require(g, "coordinates", list)
            if not all(isinstance(c, (int, float)) and not isinstance(c, bool) for c in coords):
                raise DeserializationError("coordinates must be numbers")
            magnitude = _optional(g, "magnitudeValue", (int, float))
            geometry.append(
                Geometry(
                    date=_parse_time(g.get("date")),
                    type=_require(g, "type", str),
                    coordinates=[float(c) for c in coords],
                    magnitude_value=None if magnitude is None else float(magnitude),
                    magnitude_unit=_optional(g, "magnitudeUnit", str),
                )
            )
        closed = data.get("closed")
        distance = _optional(data, "distance", (int, float))
        return cls(
            id=_require(data, "id", str),
            title=_require(data, "title", str),
            link=_require(data, "link", str),
            description=_optional(data, "description", str),
            closed=None if closed is None else _parse_time(closed),
            categories=categories,
            sources=sources,
            geometry=geometry,
            distance=None if distance is None else float(distance),
        )


def parse_events(payload):
    """Decode the events of a feed payload."""
    if not isinstance(payload, dict) or not isinstance(payload.get("events"), list):
        raise DeserializationError("payload has no 'events' list")
    return [Event.from_json(item) for item in payload["events"]]


def build_url(dt_start, today):
    """Build the feed query URL for a date range."""
    return f"{RESTURL}?start={dt_start}&end={today}&days=90"


def run_call(dt_start, session=None):
    """Fetch the events from `dt_start` (YYYY-MM-DD) until today."""
    today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    url = build_url(dt_start, today)
    logthis(f"EONET: Executing API call [{url}] FROM {dt_start} TO {today}", "INFO")
    http = session or requests
    try:
        reply = http.get(url, timeout=TIMEOUT_SECONDS)
    except requests.RequestException as exc:
        raise ConnectionError(str(exc)) from exc
    try:
        payload = reply.json()
    except ValueError as exc:
        raise DeserializationError(f"invalid JSON payload: {exc}") from exc
    return parse_events(payload)


def handle_call(pgdb, settings, dt_start, session=None):
    """Fetch events since `dt_start`, store them with their distance, and log the call."""
    logthis("EONET: Entering Handle Call", "INFO")
    home = settings.location
    events = run_call(dt_start.strftime("%Y-%m-%d"), session)
    for event in events:
        first = event.geometry[0].coordinates
        event.distance = distance_km(home.latitude, home.longitude, first[0], first[1])
        try:
            pgdb.insert_full_event(event)
        except Exception as exc:  # keep going with the remaining events
            print(repr(exc))
    try:
        pgdb.insert_call_log()
    except Exception as exc:
        print(repr(exc))
    return events