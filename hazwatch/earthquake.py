"""Client for the USGS earthquake feed and the status-bar line it drives."""

import struct
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import requests

from hazwatch.common import distance_km, logthis
from hazwatch.errors import ConnectionError, DeserializationError
from hazwatch.push import push

RESTURL = "https://earthquake.usgs.gov/fdsnws/event/1/query?format=geojson"
TIMEOUT_SECONDS = 30

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_INT_FIELDS = ("time", "updated", "tsunami", "sig", "nst", "gap")
_FLOAT_FIELDS = ("mag", "dmin", "rms")
_OPTIONAL_STR_FIELDS = (
    "place", "url", "detail", "alert", "status", "net", "code", "magType", "title",
)
_OPTIONAL_INT_FIELDS = ("felt",)
_OPTIONAL_FLOAT_FIELDS = ("cdi", "mmi")


@dataclass
class Quake:
    """One earthquake, located relative to home."""

    url: str
    alert: str
    code: str
    magnitude: float
    distance: float
    longitude: float
    latitude: float
    depth: float
    time: int  # nanoseconds since the Unix epoch


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _to_f32(value):
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except (OverflowError, struct.error) as exc:
        raise DeserializationError(f"magnitude {value!r} out of range") from exc


def _fmt_float(value):
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _check_properties(props):
    for key in _INT_FIELDS:
        if not _is_int(props.get(key)):
            raise DeserializationError(f"property {key!r} is missing or not an integer")
    for key in _FLOAT_FIELDS:
        if not _is_number(props.get(key)):
            raise DeserializationError(f"property {key!r} is missing or not a number")
    for key in _OPTIONAL_STR_FIELDS:
        value = props.get(key)
        if value is not None and not isinstance(value, str):
            raise DeserializationError(f"property {key!r} is not a string")
    for key in _OPTIONAL_INT_FIELDS:
        value = props.get(key)
        if value is not None and not _is_int(value):
            raise DeserializationError(f"property {key!r} is not an integer")
    for key in _OPTIONAL_FLOAT_FIELDS:
        value = props.get(key)
        if value is not None and not _is_number(value):
            raise DeserializationError(f"property {key!r} is not a number")


def _quake(feature, latitude, longitude):
    if not isinstance(feature, dict) or not isinstance(feature.get("id"), str):
        raise DeserializationError("feature is not an object with an id")
    props = feature.get("properties")
    geometry = feature.get("geometry")
    if not isinstance(props, dict) or not isinstance(geometry, dict):
        raise DeserializationError("feature lacks properties or geometry")
    coords = geometry.get("coordinates")
    if not isinstance(coords, list) or len(coords) != 3 or not all(_is_number(c) for c in coords):
        raise DeserializationError("geometry needs exactly three numeric coordinates")
    _check_properties(props)

    qlon, qlat, depth = (float(c) for c in coords)
    alert = props.get("alert")
    return Quake(
        url=props.get("url") if props.get("url") is not None else "",
        alert=alert if alert is not None else "green",
        code=props.get("code") if props.get("code") is not None else "",
        magnitude=_to_f32(props["mag"]),
        distance=distance_km(latitude, longitude, qlat, qlon),
        longitude=qlon,
        latitude=qlat,
        depth=depth,
        time=props["time"] * 1_000_000,
    )


def parse_quakes(payload, latitude, longitude):
    """Decode a GeoJSON feed into quakes with their distance from (latitude, longitude)."""
    if not isinstance(payload, dict) or not isinstance(payload.get("features"), list):
        raise DeserializationError("payload has no 'features' list")
    return [_quake(feature, latitude, longitude) for feature in payload["features"]]


def build_url(stdt, endt, longitude, latitude, radius):
    """Build the feed query URL for a time window around a point."""
    return (
        f"{RESTURL}&starttime={stdt}&endtime={endt}"
        f"&latitude={_fmt_float(float(latitude))}&longitude={_fmt_float(float(longitude))}"
        f"&maxradiuskm={radius}"
    )


def run_call(stdt, endt, longitude, latitude, radius, session=None):
    """Fetch the quakes of a time window within `radius` km of a point."""
    url = build_url(stdt, endt, longitude, latitude, radius)
    http = session or requests
    try:
        reply = http.get(url, timeout=TIMEOUT_SECONDS)
    except requests.RequestException as exc:
        raise ConnectionError(str(exc)) from exc
    try:
        payload = reply.json()
    except ValueError as exc:
        raise DeserializationError(f"invalid JSON payload: {exc}") from exc
    return parse_quakes(payload, latitude, longitude)


def magnitude_color(magnitude):
    """Colour name of a magnitude: green, yellow, orange or red."""
    if magnitude < 4.0:
        return "green"
    if magnitude < 5.0:
        return "yellow"
    if magnitude < 6.0:
        return "orange"
    return "red"


def _timestamp(nanos):
    stamp = datetime.fromtimestamp(nanos // 1_000_000_000, timezone.utc)
    return f"{stamp.day:>2}-{_MONTHS[stamp.month - 1]}-{stamp.year:04d} {stamp:%H:%M}"


def status_line(quake, colors):
    """Pango markup describing a quake, coloured by its magnitude."""
    background = getattr(colors, magnitude_color(quake.magnitude))
    return (
        f'<span background="{background}">'
        f" [{_timestamp(quake.time)}] M.{quake.magnitude:.1f} Dist.{quake.distance:.2f} </span>"
    )


def handle_call(stdt, endt, longitude, latitude, radius, output_file, settings, session=None):
    """Fetch quakes, alert the phone and write the status line of the first one."""
    quakes = run_call(stdt, endt, longitude, latitude, radius, session)
    if quakes:
        push(settings.alertzy.account, settings.alertzy.url, "ALERT", f"{len(quakes)} Quakes", "2")
        first = quakes[0]
        Path(output_file).write_text(status_line(first, settings.color), encoding="utf-8")
        logthis(
            f"Event recorded: M:{_fmt_float(first.magnitude)} D:{_fmt_float(first.distance)}"
            f" @{_timestamp(first.time)}",
            "ALERT",
        )
    return quakes