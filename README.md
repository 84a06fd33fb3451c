# hazwatch

Keep an eye on natural hazards around a place you care about: earthquakes,
satellite fire detections and EONET natural events, with phone alerts sent
through an HTTP push service.

## Installation

```
pip install hazwatch
```

For the test suite:

```
pip install "hazwatch[test]"
pytest
```

## Configuration

Settings are read from a `config/` directory (by default under the current
working directory), layered in this order, later sources winning:

1. `config/Default.toml`
2. `config/<RUN_ENV>`: the environment name, `Development` unless `RUN_ENV`
   is set. The file is looked up as given, then with a `.toml`, then a
   `.json` extension. `RUN_ENV` must be `Development` or `Production`.
3. environment variables starting with `EA_`, with `__` separating nested
   keys: `EA_LOCATION__RADIUS=300` overrides `location.radius`.

`hazwatch.settings.WobbleSettings.load(base_dir=None, environ=None)` and
`hazwatch.settings.HazeventsSettings.load(...)` build validated, frozen
settings objects from these sources; a missing field or a value of the wrong
type raises `ValueError`, a missing file `FileNotFoundError`.

Settings for `wobblealert` (`WobbleSettings`):

```toml
[db]
dburl = "http://localhost:8086"
dbname = "quakes"
dborg = "home"
dbapi = "placeholder"

[location]
latitude = 45.0
longitude = 7.0
radius = 500
file = "/tmp/quake_status.txt"

[color]
green = "#2e7d32"
yellow = "#f9a825"
orange = "#ef6c00"
red = "#c62828"

[nasa]
mapkey = "placeholder"
coordbox = "-10,30,30,60"

[alertzy]
account = "placeholder"
url = "https://push.example.com/send"
```

Settings for the event collector (`HazeventsSettings`):

```toml
[dbpg]
dburl = "localhost"
dbport = 5432
dbname = "hazards"
dbuser = "user"
dbpassword = "password"

[location]
latitude = 45.0
longitude = 7.0
radius = 500
file = "/tmp/hazards.txt"

[alertzy]
account = "placeholder"
url = "https://push.example.com/send"
```

## The `wobblealert` command

```
wobblealert [--config-dir DIR] [--last-entry DATETIME]
```

One run:

1. asks the USGS feed for earthquakes within `location.radius` km, from ten
   minutes after `--last-entry` (an ISO date and time, UTC if no offset is
   given; one hour ago by default) until now;
2. if any are found, sends a phone alert (`"<n> Quakes"`) and writes a Pango
   markup line about the first one to `location.file`, for example
   `<span background="#f9a825"> [ 5-Jan-2025 14:03] M.4.2 Dist.123.45 </span>`,
   coloured by magnitude: below 4 green, below 5 yellow, below 6 orange,
   otherwise red;
3. asks FIRMS for today's fire detections inside `nasa.coordbox`, keeps those
   within the radius, and sends a phone alert (`"<n> Fires"`) if any remain.

Failures of either step are printed and the run goes on. Progress is logged to
standard output as `YYYY-MM-DD HH:MM:SS [CATEGORY] message`.

## The event collector

`hazwatch.hazevents.run(settings, pgdb=None, session=None)` fetches EONET
events since the last logged call (or the last 90 days), stores each event
with its distance from home, its geometries and its sources, logs the call,
and pushes an alert summarising the stored events within `location.radius`.
It returns the alert text.

Storage goes through `hazwatch.pgdb.Pgdb`, which takes a `connector`: any
DB-API `connect` function accepting a libpq connection string (such as the
one of a PostgreSQL driver you install yourself):

```python
from hazwatch.hazevents import run
from hazwatch.pgdb import Pgdb
from hazwatch.settings import HazeventsSettings

settings = HazeventsSettings.load()
cfg = settings.dbpg
pgdb = Pgdb(cfg.dburl, cfg.dbport, cfg.dbname, cfg.dbuser, cfg.dbpassword,
            connector=my_driver_connect)
run(settings, pgdb)
```

## Using the building blocks

```python
from hazwatch.common import distance_km
from hazwatch.earthquake import magnitude_color
from hazwatch.push import build_push_url

distance_km(45.0, 7.0, 46.0, 8.0)       # haversine distance in km
magnitude_color(5.3)                     # "orange"
build_push_url("placeholder", "https://push.example.com/send",
               "3 Quakes", "ALERT", "2")
```

- `hazwatch.eonet.parse_events`, `hazwatch.earthquake.parse_quakes` and
  `hazwatch.firms.parse_fires` turn feed payloads into `Event`, `Quake` and
  `Fire` records; malformed payloads raise
  `hazwatch.errors.DeserializationError`.
- `hazwatch.push.push` sends a notification and returns the service's
  `response` field.
- HTTP failures raise `hazwatch.errors.ConnectionError`; every error of the
  package derives from `hazwatch.errors.HazwatchError`.

## What it does not do

- No PostgreSQL driver is included: the event collector needs a `connector`
  passed to `Pgdb`, and without one its database calls raise
  `DatabaseError`. For that reason there is no installed command for it.
- `wobblealert` stores nothing: quakes and fire detections are not written to
  a time-series database, and the start of the earthquake window comes from
  `--last-entry` rather than from a previous run's record. The `[db]` settings
  are read and validated but not used.
- Values are placed into push URLs and SQL statements as they are, without
  escaping.