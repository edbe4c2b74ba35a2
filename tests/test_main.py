import json

import pytest

from handcal.main import EXIT_BAD_INPUT, EXIT_OK, EXIT_REJECTED, load_events, main, run


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("HANDCAL_CONFIG", raising=False)
    monkeypatch.delenv("HANDCAL_TIMEZONE", raising=False)


def _write_events(path, events):
    path.write_text(json.dumps(events), encoding="utf-8")
    return str(path)


def test_run_writes_calendar_to_output_file(tmp_path):
    events = _write_events(
        tmp_path / "events.json",
        [
            {"summary": "Standup", "dtstart": "2024-01-12 10:00:00", "uid": "s1"},
            {"summary": "Retro", "dtstart": "2024-01-12 15:00:00", "timezone": "UTC", "uid": "r1"},
        ],
    )
    out = tmp_path / "cal" / "team.ics"

    code = run(events, timezone="Europe/Berlin", output=str(out))

    assert code == EXIT_OK
    lines = out.read_text(encoding="utf-8").split("\n")
    assert lines[0] == "BEGIN:VCALENDAR"
    assert lines[-1] == "END:VCALENDAR"
    assert "DTSTART:20240112T090000Z" in lines
    assert "DTSTART:20240112T150000Z" in lines
    assert lines.count("BEGIN:VEVENT") == 2


def test_run_prints_to_stdout_and_skips_bad_events(tmp_path, capsys):
    events = _write_events(
        tmp_path / "events.json",
        [{"summary": "Good"}, {"summary": "Bad", "dtstart": "not-a-date"}],
    )

    code = run(events)

    out = capsys.readouterr().out
    assert code == EXIT_OK
    assert "SUMMARY:Good" in out
    assert "SUMMARY:Bad" not in out


def test_strict_mode_writes_nothing_when_an_event_is_rejected(tmp_path):
    events = _write_events(tmp_path / "events.json", [{"dtstart": "not-a-date"}])
    out = tmp_path / "out.ics"

    code = run(events, output=str(out), strict=True)

    assert code == EXIT_REJECTED
    assert not out.exists()


def test_config_file_and_env_timezone(tmp_path, monkeypatch, capsys):
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("timezone: America/New_York\n", encoding="utf-8")
    events = tmp_path / "events.yaml"
    events.write_text(
        "events:\n  - summary: Lunch\n    dtstart: 2024-01-12 12:00:00\n",
        encoding="utf-8",
    )

    assert run(str(events), config_path=str(cfg_path)) == EXIT_OK
    assert "DTSTART:20240112T170000Z" in capsys.readouterr().out

    monkeypatch.setenv("HANDCAL_TIMEZONE", "Europe/Berlin")
    assert run(str(events), config_path=str(cfg_path)) == EXIT_OK
    assert "DTSTART:20240112T110000Z" in capsys.readouterr().out


def test_missing_inputs_are_reported(tmp_path):
    assert run(str(tmp_path / "missing.json")) == EXIT_BAD_INPUT
    events = _write_events(tmp_path / "events.json", [])
    assert run(events, config_path=str(tmp_path / "missing.yaml")) == EXIT_BAD_INPUT


def test_load_events_rejects_non_mappings(tmp_path):
    path = _write_events(tmp_path / "events.json", ["just a string"])

    with pytest.raises(ValueError):
        load_events(path)


def test_main_exits_with_run_status(tmp_path, monkeypatch, capsys):
    events = _write_events(tmp_path / "events.json", [{"summary": "CLI"}])
    monkeypatch.setattr("sys.argv", ["handcal", events])

    with pytest.raises(SystemExit) as excinfo:
        main()

    assert excinfo.value.code == EXIT_OK
    assert "SUMMARY:CLI" in capsys.readouterr().out
