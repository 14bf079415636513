"""Building Appointment views from booking-store rows.

Rows come from the appointments table joined with the doctor's meeting
settings, e.g.::

    {
        "id": "a1",
        "mode": "video",
        "start_at": "2026-10-18T09:30:00+00:00",
        "doctors": {
            "name": "Dr. Rao",
            "zoom_meeting_link": "https://zoom.us/j/123456789",
            "zoom_password": "x7k2pq",
        },
    }

Newer rows use ``meeting_link``/``meeting_password`` on the doctor instead
of the zoom-specific columns; both are accepted.
"""

from datetime import datetime
from typing import Any, Mapping, Optional

from ..errors import InvalidAppointmentError
from .types import Appointment, AppointmentMode, JoinTarget


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp (or pass a datetime through).

    Naive timestamps are rejected: they cannot be compared with an instant.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        # fromisoformat() only accepts a trailing Z from Python 3.11 on
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidAppointmentError(f"Unparseable start_at: {value!r}")
    else:
        raise InvalidAppointmentError(f"Missing or invalid start_at: {value!r}")

    if parsed.tzinfo is None or parsed.utcoffset() is None:
        raise InvalidAppointmentError(f"start_at must be timezone-aware: {value!r}")
    return parsed


def _join_target(doctor: Optional[Mapping[str, Any]]) -> Optional[JoinTarget]:
    if not doctor:
        return None
    uri = doctor.get("zoom_meeting_link") or doctor.get("meeting_link")
    if not uri:
        return None
    if not isinstance(uri, str):
        raise InvalidAppointmentError(f"Meeting link must be text: {uri!r}")

    passcode = doctor.get("zoom_password") or doctor.get("meeting_password")
    # JSON rows often carry numeric passcodes
    if isinstance(passcode, (int, float)) and not isinstance(passcode, bool):
        passcode = str(passcode)
    elif passcode is not None and not isinstance(passcode, str):
        raise InvalidAppointmentError(f"Meeting password must be text: {passcode!r}")
    return JoinTarget(uri=uri, passcode=passcode or None)


def appointment_from_record(record: Mapping[str, Any]) -> Appointment:
    """Create an Appointment from a booking-store row."""
    if not isinstance(record, Mapping):
        raise InvalidAppointmentError(f"Expected a mapping, got {type(record).__name__}")

    doctor = record.get("doctors") or record.get("doctor")
    if doctor is not None and not isinstance(doctor, Mapping):
        raise InvalidAppointmentError(f"Unexpected doctor payload: {doctor!r}")

    appointment_id = record.get("id")
    return Appointment(
        mode=AppointmentMode.parse(record.get("mode")),
        start_at=parse_timestamp(record.get("start_at")),
        join_target=_join_target(doctor),
        id=str(appointment_id) if appointment_id is not None else None,
        doctor_name=(doctor or {}).get("name"),
    )
