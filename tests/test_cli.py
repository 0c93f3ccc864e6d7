from __future__ import annotations

from datetime import date

from flight_reservation import cli


def run(capsys, db_url, *args):
    status = cli.main(["--db", db_url, "--seed-days", "1", *args])
    captured = capsys.readouterr()
    return status, captured.out, captured.err


def test_cli_book_list_and_cancel(tmp_path, capsys):
    db_url = f"sqlite+pysqlite:///{tmp_path / 'cli.db'}"
    today = date.today().isoformat()

    status, out, _ = run(capsys, db_url, "cities")
    assert status == 0
    assert out.splitlines()[0] == "Bangalore"

    status, out, _ = run(capsys, db_url, "search", today, "Mumbai", "Delhi")
    assert status == 0
    assert "SP1001" in out
    assert "Sky Express" in out

    status, out, _ = run(
        capsys,
        db_url,
        "book",
        today,
        "Mumbai",
        "Delhi",
        "SP1001",
        "3",
        "--name",
        "Asha Rao",
        "--email",
        "asha@example.com",
        "--phone",
        "+91 9876543210",
    )
    assert status == 0
    assert "Booking 1001 confirmed" in out
    assert "(First)" in out

    status, out, _ = run(capsys, db_url, "seats", today, "Mumbai", "Delhi", "SP1001", "--class", "First")
    assert status == 0
    assert out.strip() == "First: 1, 2, 4, 5, 6, 7, 8, 9, 10"

    status, out, _ = run(capsys, db_url, "bookings")
    assert "Asha Rao" in out

    status, out, _ = run(capsys, db_url, "cancel", "1001")
    assert status == 0
    status, _, err = run(capsys, db_url, "cancel", "1001")
    assert status == 1
    assert "not found" in err


def test_cli_reports_unknown_flight(tmp_path, capsys):
    db_url = f"sqlite+pysqlite:///{tmp_path / 'cli.db'}"
    status, _, err = run(capsys, db_url, "quote", date.today().isoformat(), "Mumbai", "Goa", "SP1001", "Economy")
    assert status == 1
    assert "SP1001" in err
