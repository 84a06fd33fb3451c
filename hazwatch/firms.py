"""Client for the FIRMS active-fire feed."""

import csv
import io
from dataclasses import dataclass
from datetime import datetime, timezone

import requests

from hazwatch.common import distance_km, logthis
from hazwatch.errors import ConnectionError, DeserializationError
from hazwatch.push import push

RESTURL = "https://firms.modaps.eosdis.nasa.gov/api"
SAT = "MODIS_SP"
TIMEOUT_SECONDS = 180


@dataclass
class Fire:
    """One fire detection near home."""

    latitude: float
    longitude: float
    bright_ti4: float
    satellite: str
    instrument: str
    confidence: str
    frp: float
    daynight: str
    distance: float
    typ: str
    time: int  # nanoseconds since the Unix epoch, midnight UTC of the detection day


def build_url(mapkey, coordbox, day):
    """Build the area query URL for one day of detections inside a box."""
    return f"{RESTURL}/area/csv/{mapkey}/{SAT}/{coordbox}/1/{day}"


def _fire(record, distance):
    day = datetime.strptime(f"{record[5]} 00:00:00", "%Y-%m-%d %H:%M:%S").replace(tzinfo=timezone.utc)
    return Fire(
        latitude=float(record[0]),
        longitude=float(record[1]),
        bright_ti4=float(record[2]),
        satellite=record[7],
        instrument=record[8],
        confidence=record[9],
        frp=float(record[12]),
        daynight=record[13],
        distance=distance,
        typ=record[14],
        time=int(day.timestamp()) * 1_000_000_000,
    )


def parse_fires(csv_text, latitude, longitude, radius):
    """Decode a CSV feed, keeping the detections within `radius` km of home."""
    reader = csv.reader(io.StringIO(csv_text))
    header = next(reader, None)
    fires = []
    for line, record in enumerate(reader, start=2):
        if not record:
            continue
        if len(record) != len(header):
            raise DeserializationError(
                f"line {line}: {len(record)} fields, header has {len(header)}"
            )
        try:
            distance = distance_km(latitude, longitude, float(record[0]), float(record[1]))
            if distance <= float(radius):
                fires.append(_fire(record, distance))
        except (IndexError, ValueError) as exc:
            raise DeserializationError(f"line {line}: {exc}") from exc
    return fires


def handle_call(mapkey, coordbox, longitude, latitude, radius, settings, session=None):
    """Fetch today's detections, keep the near ones and alert the phone about them."""
    day = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    url = build_url(mapkey, coordbox, day)
    http = session or requests
    try:
        reply = http.get(url, timeout=TIMEOUT_SECONDS)
    except requests.RequestException as exc:
        raise ConnectionError(str(exc)) from exc
    fires = parse_fires(reply.text, latitude, longitude, radius)
    logthis(f"Events recorded: {len(fires)}", "INFO")
    if fires:
        push(settings.alertzy.account, settings.alertzy.url, "ALERT", f"{len(fires)} Fires", "2")
    return fires