"""Command watching earthquakes and fires near home."""

import argparse
import os
from datetime import datetime, timedelta, timezone

from hazwatch import earthquake, firms
from hazwatch.common import logthis
from hazwatch.settings import WobbleSettings

START_OFFSET = timedelta(minutes=10)
DEFAULT_LOOKBACK = timedelta(hours=1)


def path_exists(path):
    """Whether something exists at `path`."""
    return os.path.exists(path)


def engage(settings, start, session=None):
    """Run the earthquake check from `start` until now; failures are reported, not raised."""
    end = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:00")
    logthis(f"Engaging for date: {start} {end}", "INFO")
    loc = settings.location
    try:
        return earthquake.handle_call(
            start, end, loc.longitude, loc.latitude, loc.radius, loc.file, settings, session
        )
    except Exception as exc:
        print(repr(exc))
        return None


def _instant(text):
    try:
        stamp = datetime.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date and time: {text!r}") from None
    return stamp.replace(tzinfo=timezone.utc) if stamp.tzinfo is None else stamp.astimezone(timezone.utc)


def main(argv=None):
    """Entry point: check for earthquakes, then for fires."""
    parser = argparse.ArgumentParser(prog="wobblealert", description="Watch earthquakes and fires near home.")
    parser.add_argument("--config-dir", default=None, help="directory holding config/ (default: working directory)")
    parser.add_argument(
        "--last-entry",
        type=_instant,
        default=None,
        help="time of the last recorded check (default: one hour ago)",
    )
    args = parser.parse_args(argv)

    logthis("Good day", "INFO")
    settings = WobbleSettings.load(args.config_dir)
    last = args.last_entry or datetime.now(timezone.utc) - DEFAULT_LOOKBACK
    engage(settings, (last + START_OFFSET).strftime("%Y-%m-%dT%H:%M:%S"))

    loc = settings.location
    try:
        firms.handle_call(
            settings.nasa.mapkey, settings.nasa.coordbox, loc.longitude, loc.latitude, loc.radius, settings
        )
    except Exception as exc:
        print(repr(exc))
    return 0