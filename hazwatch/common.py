"""Small helpers shared by the hazard watchers: logging, paths and distances."""

import math
import os
from datetime import datetime, timezone

EARTH_RADIUS_KM = 6371.0


def logthis(msg, cat):
    """Print a UTC-timestamped log line tagged with a category."""
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
    print(f"{stamp} [{cat}] {msg}")


def get_current_working_dir():
    """Return the current working directory as a string."""
    return os.getcwd()


def distance_km(lat1, lon1, lat2, lon2):
    """Great-circle distance in kilometres between two points, by the haversine formula."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))