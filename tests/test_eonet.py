import re
from datetime import datetime, timezone

import pytest
import responses

from hazwatch import eonet
from hazwatch.errors import DeserializationError
from hazwatch.settings import Alertzy, Dbpg, Env, HazeventsSettings, Location

RAW = {
    "id": "EONET_1",
    "title": "Fire A",
    "link": "http://example.com/e1",
    "closed": None,
    "categories": [{"id": "wildfires", "title": "Wildfires"}],
    "sources": [{"id": "SRC", "url": "http://example.com/s"}],
    "geometry": [
        {"date": "2024-01-02T03:04:05Z", "type": "Point", "coordinates": [10.0, 20.0],
         "magnitudeValue": 5, "magnitudeUnit": "acres"}
    ],
}


def test_from_json_fields():
    ev = eonet.Event.from_json(RAW)
    assert ev.id == "EONET_1"
    assert ev.categories[0].id == "wildfires"
    assert ev.geometry[0].date == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert ev.geometry[0].magnitude_value == 5.0
    assert ev.description is None and ev.distance is None


def test_parse_events_errors():
    with pytest.raises(DeserializationError):
        eonet.parse_events({"nope": []})
    with pytest.raises(DeserializationError):
        eonet.parse_events({"events": [{"id": "x"}]})


def test_build_url():
    assert eonet.build_url("2024-01-01", "2024-02-01") == (
        eonet.RESTURL + "?start=2024-01-01&end=2024-02-01&days=90"
    )


class _Store:
    def __init__(self):
        self.events = []
        self.logged = 0

    def insert_full_event(self, event):
        self.events.append(event)

    def insert_call_log(self):
        self.logged += 1


def test_handle_call_sets_distance_and_logs():
    settings = HazeventsSettings(
        env=Env.DEVELOPMENT,
        dbpg=Dbpg("localhost", 5432, "db", "user", "password"),
        location=Location(longitude=20.0, latitude=10.0, radius=100, file="f"),
        alertzy=Alertzy("acct", "http://example.com/push"),
    )
    store = _Store()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, re.compile(re.escape(eonet.RESTURL) + r"\?start=2024-01-01.*"),
                 json={"events": [RAW]})
        eonet.handle_call(store, settings, datetime(2024, 1, 1, tzinfo=timezone.utc))
    assert store.logged == 1
    assert len(store.events) == 1
    assert store.events[0].distance == pytest.approx(0.0)