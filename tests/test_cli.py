# tests/test_cli.py

import json

import pytest

from worldcal import cli


def run(capsys, *argv):
    rc = cli.main(list(argv))
    return rc, capsys.readouterr().out


def test_list(capsys):
    rc, out = run(capsys, "list")
    assert rc == 0
    assert "gregorian" in out and "harptos" in out
    assert "365/366" in out


def test_date(capsys):
    rc, out = run(capsys, "date", "946684800")
    assert rc == 0
    assert out.strip() == "Saturday, 1 January 2000 CE 00:00:00"


def test_date_with_offset_and_attributes(capsys):
    rc, out = run(capsys, "date", "100", "--offset", "100", "--calendar", "harptos", "--attr", "week")
    assert rc == 0
    lines = out.splitlines()
    assert lines[0] == "First-day, 1 Hammer 0 DR 00:00:00"
    assert "week_name: First Tenday" in out


def test_date_intercalary(capsys):
    rc, out = run(capsys, "date", str(30 * 86400 + 3600), "--calendar", "harptos")
    assert out.strip() == "Midwinter 0 DR 01:00:00"


def test_time(capsys):
    rc, out = run(capsys, "time", "2000-01-01")
    assert rc == 0
    assert out.strip() == "946684800"
    rc, out = run(capsys, "time", "2024-02-29", "--at", "12:30:15")
    assert out.strip() == "1709209815"
    rc, out = run(capsys, "time", "0-1-1", "--calendar", "harptos", "--intercalary", "Midwinter")
    assert out.strip() == str(30 * 86400)


def test_bad_date_argument(capsys):
    with pytest.raises(SystemExit):
        cli.main(["time", "yesterday"])


def test_calendar_file_and_variants(tmp_path, capsys):
    cal = tmp_path / "tiny.json"
    cal.write_text(json.dumps({
        "id": "tiny",
        "label": "Tiny",
        "year": {"epoch": 1, "currentYear": 1, "prefix": "Y", "suffix": "", "startDay": 0},
        "leapYear": {"rule": "none"},
        "months": [{"name": "Only", "days": 10}],
        "weekdays": [{"name": "Work"}, {"name": "Rest"}],
        "time": {"hoursInDay": 10, "minutesInHour": 10, "secondsInMinute": 10},
    }), encoding="utf-8")
    var = tmp_path / "tiny-variants.json"
    var.write_text(json.dumps({
        "id": "tiny-variants",
        "baseCalendar": "tiny",
        "variants": {"late": {"name": "Late", "config": {"yearOffset": 100}}},
    }), encoding="utf-8")

    rc, out = run(capsys, "date", "1000", "--file", str(cal), "--calendar", "tiny")
    assert out.strip() == "Rest, 2 Only Y1 00:00:00"
    rc, out = run(capsys, "date", "0", "--file", str(cal), "--variants-file", str(var), "--calendar", "tiny(late)")
    assert out.strip() == "Work, 1 Only Y101 00:00:00"


def test_unknown_calendar_is_an_error():
    with pytest.raises(KeyError):
        cli.main(["date", "0", "--calendar", "nowhere"])


def test_diag_year_table(capsys):
    rc, out = run(capsys, "diag", "year-table", "--from-year", "1996", "--to-year", "2004", "--rows", "3")
    assert rc == 0
    assert "leap years       : 3" in out
    assert "1996    366" in out


def test_diag_round_trip(capsys):
    rc, out = run(capsys, "diag", "round-trip", "--N", "200", "--from-year", "-50", "--to-year", "50")
    assert rc == 0
    assert "All round-trip tests passed." in out


def test_logging_options_reach_configure_logging(monkeypatch, tmp_path, capsys):
    calls = []
    monkeypatch.setattr(cli, "configure_logging", lambda verbosity, files: calls.append((verbosity, files)))
    log = str(tmp_path / "logs" / "worldcal.log")
    run(capsys, "date", "0", "-vv", "--log-file", log)
    assert calls == [(2, [log])]
