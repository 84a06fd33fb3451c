from urllib.parse import unquote

import pytest
import responses

from hazwatch import earthquake
from hazwatch.earthquake import (
    Quake,
    build_url,
    handle_call,
    magnitude_color,
    parse_quakes,
    run_call,
    status_line,
)
from hazwatch.errors import DeserializationError
from hazwatch.settings import Alertzy, Color, Db, Env, Location, Nasa, WobbleSettings

PUSH_URL = "https://push.example.com/send"


def make_settings(path):
    return WobbleSettings(
        env=Env.DEVELOPMENT,
        db=Db(dburl="http://localhost:8086", dbname="quakes", dborg="org", dbapi="placeholder"),
        location=Location(longitude=10.0, latitude=45.0, radius=300, file=str(path)),
        color=Color(green="#00ff00", yellow="#ffff00", orange="#ff8800", red="#ff0000"),
        nasa=Nasa(mapkey="placeholder", coordbox="-10,30,20,60"),
        alertzy=Alertzy(account="placeholder", url=PUSH_URL),
    )


def feature(lon=10.0, lat=45.0, mag=4.5, time_ms=1000, **extra):
    props = {
        "mag": mag, "place": "somewhere", "time": time_ms, "updated": time_ms,
        "url": "https://quake.example.com/ev1", "alert": None, "tsunami": 0, "sig": 10,
        "code": "ev1", "nst": 5, "dmin": 0.1, "rms": 0.2, "gap": 40,
    }
    props.update(extra)
    return {"id": "ev1", "properties": props, "geometry": {"coordinates": [lon, lat, 8.0]}}


class FakeReply:
    def __init__(self, payload):
        self._payload = payload

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        return FakeReply(self.payload)


def test_parse_quakes_fields():
    [quake] = parse_quakes({"features": [feature(url=None)]}, 45.0, 10.0)
    assert quake.alert == "green"
    assert quake.url == ""
    assert quake.code == "ev1"
    assert quake.distance == pytest.approx(0.0, abs=1e-9)
    assert quake.time == 1_000_000_000
    assert (quake.longitude, quake.latitude, quake.depth) == (10.0, 45.0, 8.0)


def test_parse_quakes_magnitude_is_single_precision():
    [quake] = parse_quakes({"features": [feature(mag=4.1)]}, 45.0, 10.0)
    assert quake.magnitude == pytest.approx(4.1, abs=1e-6)
    assert f"{quake.magnitude:.1f}" == "4.1"


def test_parse_quakes_distance_grows_with_offset():
    near, far = parse_quakes(
        {"features": [feature(lon=10.1), feature(lon=11.0)]}, 45.0, 10.0
    )
    assert 0 < near.distance < far.distance


def test_parse_quakes_missing_required_field():
    bad = feature()
    del bad["properties"]["nst"]
    with pytest.raises(DeserializationError):
        parse_quakes({"features": [bad]}, 45.0, 10.0)


def test_parse_quakes_null_integer_field():
    with pytest.raises(DeserializationError):
        parse_quakes({"features": [feature(gap=None)]}, 45.0, 10.0)


def test_parse_quakes_bad_payload():
    with pytest.raises(DeserializationError):
        parse_quakes({"type": "FeatureCollection"}, 45.0, 10.0)


def test_build_url():
    url = build_url("A", "B", 10.0, 45.0, 300)
    assert url == earthquake.RESTURL + "&starttime=A&endtime=B&latitude=45&longitude=10&maxradiuskm=300"


@pytest.mark.parametrize(
    "magnitude, colour",
    [(3.9, "green"), (4.0, "yellow"), (4.99, "yellow"), (5.5, "orange"), (6.0, "red"), (7.2, "red")],
)
def test_magnitude_color(magnitude, colour):
    assert magnitude_color(magnitude) == colour


def test_status_line(tmp_path):
    quake = Quake("u", "green", "c", 4.5, 12.5, 10.0, 45.0, 8.0, 0)
    line = status_line(quake, make_settings(tmp_path / "i3").color)
    assert line == '<span background="#ffff00"> [ 1-Jan-1970 00:00] M.4.5 Dist.12.50 </span>'


def test_run_call_uses_session():
    session = FakeSession({"features": [feature()]})
    quakes = run_call("A", "B", 10.0, 45.0, 300, session)
    assert [q.code for q in quakes] == ["ev1"]
    assert session.calls == [(build_url("A", "B", 10.0, 45.0, 300), earthquake.TIMEOUT_SECONDS)]


def test_handle_call_pushes_and_writes(tmp_path):
    out = tmp_path / "i3.txt"
    settings = make_settings(out)
    session = FakeSession({"features": [feature(lon=10.5, lat=45.2, mag=6.3)]})
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, PUSH_URL, json={"response": "success"})
        quakes = handle_call("A", "B", 10.0, 45.0, 300, str(out), settings, session)
        sent = unquote(rsps.calls[0].request.url)
    assert len(quakes) == 1
    assert "title=1 Quakes" in sent
    assert "message=ALERT" in sent
    content = out.read_text(encoding="utf-8")
    assert content == status_line(quakes[0], settings.color)
    assert content.startswith('<span background="#ff0000">')


def test_handle_call_without_quakes(tmp_path):
    out = tmp_path / "i3.txt"
    with responses.RequestsMock():
        quakes = handle_call("A", "B", 10.0, 45.0, 300, str(out), make_settings(out), FakeSession({"features": []}))
    assert quakes == []
    assert not out.exists()