import math
import os
from datetime import datetime

import pytest

from hazwatch.common import EARTH_RADIUS_KM, distance_km, get_current_working_dir, logthis


def test_logthis_format(capsys):
    logthis("hello there", "INFO")
    out = capsys.readouterr().out
    day, clock, rest = out.split(" ", 2)
    assert rest == "[INFO] hello there\n"
    stamp = datetime.strptime(f"{day} {clock}", "%Y-%m-%d %H:%M:%S")
    assert stamp.strftime("%Y-%m-%d %H:%M:%S") == f"{day} {clock}"


def test_logthis_category_is_bracketed(capsys):
    logthis("event", "ALERT")
    out = capsys.readouterr().out
    assert out.rstrip("\n").endswith("[ALERT] event")


def test_get_current_working_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert get_current_working_dir() == os.getcwd()
    assert os.path.samefile(get_current_working_dir(), tmp_path)


def test_distance_same_point_is_zero():
    assert distance_km(45.5, 9.2, 45.5, 9.2) == pytest.approx(0.0)


def test_distance_is_symmetric():
    assert distance_km(10.0, 20.0, -30.0, 100.0) == pytest.approx(distance_km(-30.0, 100.0, 10.0, 20.0))


def test_distance_antipodal_is_half_circumference():
    assert distance_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(math.pi * EARTH_RADIUS_KM)


def test_distance_triangle_inequality():
    ab = distance_km(40.0, -3.0, 48.8, 2.3)
    bc = distance_km(48.8, 2.3, 52.5, 13.4)
    ac = distance_km(40.0, -3.0, 52.5, 13.4)
    assert ac <= ab + bc
    assert ab > 0 and bc > 0