# tests/test_cli.py

import pytest

from kairos.cli import main


def test_easter(capsys):
    assert main(["easter", "2024"]) == 0
    assert capsys.readouterr().out.strip() == "2024-03-31"
    assert main(["easter", "2024", "--orthodox"]) == 0
    assert capsys.readouterr().out.strip() == "2024-05-05"


def test_holidays_federal(capsys):
    assert main(["holidays", "2024", "--set", "federal"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 11
    assert lines[0] == "2024-01-01  New Year's Day"


def test_holidays_other_locale(capsys):
    assert main(["holidays", "2024", "--locale", "de-DE"]) == 0
    assert "2024-10-03  Tag der Deutschen Einheit" in capsys.readouterr().out


def test_observed_marker(capsys):
    assert main(["check", "2026-07-03"]) == 0
    assert capsys.readouterr().out.strip() == "2026-07-03  Independence Day  (observed)"


def test_check(capsys):
    assert main(["check", "2024-07-04"]) == 0
    assert "Independence Day" in capsys.readouterr().out
    assert main(["check", "2024-07-05"]) == 1
    assert "not a holiday" in capsys.readouterr().out


def test_next_and_previous(capsys):
    assert main(["next", "2024-07-04"]) == 0
    assert capsys.readouterr().out.strip() == "2024-09-02  Labor Day"
    assert main(["previous", "2024-07-04"]) == 0
    assert capsys.readouterr().out.strip() == "2024-06-19  Juneteenth"


def test_unknown_locale(capsys):
    assert main(["holidays", "2024", "--locale", "xx-XX"]) == 2
    assert "Unknown locale 'xx-XX'" in capsys.readouterr().err


def test_unknown_set(capsys):
    assert main(["holidays", "2024", "--set", "nope"]) == 2
    assert "Available" in capsys.readouterr().err


def test_listings(capsys):
    assert main(["plugins"]) == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0].startswith("holiday-engine 1.0.0")
    assert "[needs: holiday-engine]" in out

    assert main(["locales"]) == 0
    assert "* en-US" in capsys.readouterr().out


def test_bad_date_is_a_usage_error(capsys):
    with pytest.raises(SystemExit) as ei:
        main(["check", "2024-13-01"])
    assert ei.value.code == 2
    assert "YYYY-MM-DD" in capsys.readouterr().err
