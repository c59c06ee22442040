from __future__ import annotations

from datetime import datetime, timedelta, timezone


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_local_times_are_rendered_in_salon_zone(db, make_salon, add_appointment) -> None:
    salon = make_salon(time_zone="Australia/Sydney")
    appointment = add_appointment(salon, utc(2025, 9, 14, 23), utc(2025, 9, 15, 0, 30))

    # Reload from the database so the stored values are used
    db.expire_all()

    assert appointment.starts_at_local.strftime("%Y-%m-%d %H:%M") == "2025-09-15 09:00"
    assert appointment.ends_at_local.strftime("%Y-%m-%d %H:%M") == "2025-09-15 10:30"
    assert appointment.starts_at_local.utcoffset() == timedelta(hours=10)
    assert appointment.starts_at_local == utc(2025, 9, 14, 23)


def test_local_times_cross_the_salon_date_line(db, make_salon, add_appointment) -> None:
    salon = make_salon(time_zone="America/New_York")
    appointment = add_appointment(salon, utc(2025, 9, 16, 3), utc(2025, 9, 16, 5))

    assert appointment.starts_at_local.date().isoformat() == "2025-09-15"
    assert appointment.ends_at_local.strftime("%H:%M") == "01:00"
