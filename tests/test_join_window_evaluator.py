"""Tests for telejoin.join_window.evaluator."""

from datetime import datetime, timedelta, timezone

import pytest

from telejoin.join_window import (
    Appointment,
    AppointmentMode,
    JoinState,
    JoinTarget,
    MeetingPlatform,
    evaluate_join_window,
    is_within_join_window,
    minutes_until,
)

ZOOM = JoinTarget(uri="https://zoom.us/j/123456789", passcode="x7k2pq")


def video(start_at, target=ZOOM):
    return Appointment(mode=AppointmentMode.VIDEO, start_at=start_at, join_target=target)


class TestMinutesUntil:
    def test_future(self, now):
        assert minutes_until(now + timedelta(minutes=30), now) == 30

    def test_past_is_negative(self, now):
        assert minutes_until(now - timedelta(minutes=90), now) == -90

    def test_fractional(self, now):
        assert minutes_until(now + timedelta(seconds=90), now) == 1.5

    def test_offsets_are_compared_as_instants(self, now):
        ist = timezone(timedelta(hours=5, minutes=30))
        start = datetime(2026, 10, 18, 14, 40, tzinfo=ist)  # 09:10 UTC
        assert minutes_until(start, now) == 10


class TestIsWithinJoinWindow:
    def test_early_boundary_inclusive(self, now):
        assert is_within_join_window(now + timedelta(minutes=15), now) is True

    def test_just_before_early_boundary(self, now):
        assert is_within_join_window(now + timedelta(minutes=15, seconds=1), now) is False

    def test_late_boundary_inclusive(self, now):
        assert is_within_join_window(now - timedelta(minutes=60), now) is True

    def test_just_after_late_boundary(self, now):
        assert is_within_join_window(now - timedelta(minutes=60, seconds=1), now) is False

    def test_custom_bounds(self, now):
        start = now + timedelta(minutes=20)
        assert is_within_join_window(start, now, early_join_minutes=15) is False
        assert is_within_join_window(start, now, early_join_minutes=30) is True


class TestPhone:
    @pytest.mark.parametrize("offset", [-600, -61, 0, 15, 16, 60 * 24 * 7])
    def test_always_informational(self, now, offset):
        appointment = Appointment(
            mode=AppointmentMode.PHONE,
            start_at=now + timedelta(minutes=offset),
        )
        decision = evaluate_join_window(appointment, now)
        assert decision.state == JoinState.PHONE_INFORMATIONAL
        assert decision.actionable is False
        assert decision.label == "Doctor will call you"

    def test_join_target_ignored(self, now):
        appointment = Appointment(mode=AppointmentMode.PHONE, start_at=now, join_target=ZOOM)
        decision = evaluate_join_window(appointment, now)
        assert decision.state == JoinState.PHONE_INFORMATIONAL
        assert decision.join_uri is None
        assert decision.passcode is None


class TestNotApplicable:
    def test_video_without_target(self, now):
        decision = evaluate_join_window(video(now, target=None), now)
        assert decision.state == JoinState.NOT_APPLICABLE
        assert decision.visible is False
        assert decision.label is None

    def test_video_with_blank_uri(self, now):
        decision = evaluate_join_window(video(now, target=JoinTarget(uri="  ")), now)
        assert decision.state == JoinState.NOT_APPLICABLE

    def test_in_person(self, now):
        appointment = Appointment(mode=AppointmentMode.IN_PERSON, start_at=now, join_target=ZOOM)
        assert evaluate_join_window(appointment, now).state == JoinState.NOT_APPLICABLE

    def test_unknown_mode(self, now):
        appointment = Appointment(mode=None, start_at=now, join_target=ZOOM)
        assert evaluate_join_window(appointment, now).state == JoinState.NOT_APPLICABLE


class TestVideo:
    def test_actionable_at_early_boundary(self, now):
        decision = evaluate_join_window(video(now + timedelta(minutes=15)), now)
        assert decision.state == JoinState.VIDEO_ACTIONABLE
        assert decision.actionable is True
        assert decision.label == "Join Zoom Meeting"
        assert decision.join_uri == ZOOM.uri

    def test_pending_one_second_before_window(self, now):
        decision = evaluate_join_window(video(now + timedelta(minutes=15, seconds=1)), now)
        assert decision.state == JoinState.VIDEO_PENDING
        assert decision.actionable is False
        assert decision.label == "Link Available 15 Min Before"

    def test_actionable_at_late_boundary(self, now):
        decision = evaluate_join_window(video(now - timedelta(minutes=60)), now)
        assert decision.state == JoinState.VIDEO_ACTIONABLE

    def test_not_actionable_after_late_boundary(self, now):
        decision = evaluate_join_window(video(now - timedelta(minutes=60, seconds=1)), now)
        assert decision.actionable is False
        assert decision.state == JoinState.VIDEO_PENDING

    def test_passcode_exposed_when_pending(self, now):
        decision = evaluate_join_window(video(now + timedelta(days=1)), now)
        assert decision.state == JoinState.VIDEO_PENDING
        assert decision.passcode == "x7k2pq"
        assert decision.hint == "Password: x7k2pq"

    def test_passcode_exposed_when_actionable(self, now):
        decision = evaluate_join_window(video(now), now)
        assert decision.passcode == "x7k2pq"

    def test_no_passcode(self, now):
        target = JoinTarget(uri="https://meet.google.com/abc-defg-hij")
        decision = evaluate_join_window(video(now, target=target), now)
        assert decision.passcode is None
        assert decision.hint is None
        assert decision.platform == MeetingPlatform.GOOGLE_MEET
        assert decision.label == "Join Google Meet Meeting"

    def test_minutes_until_start_reported(self, now):
        decision = evaluate_join_window(video(now + timedelta(minutes=45)), now)
        assert decision.minutes_until_start == 45

    def test_explicit_bounds_override_config(self, now):
        appointment = video(now + timedelta(minutes=25))
        assert evaluate_join_window(appointment, now).actionable is False
        decision = evaluate_join_window(appointment, now, early_join_minutes=30)
        assert decision.actionable is True
        assert decision.label == "Join Zoom Meeting"

    def test_pending_label_follows_early_bound(self, now):
        decision = evaluate_join_window(video(now + timedelta(hours=2)), now, early_join_minutes=10)
        assert decision.label == "Link Available 10 Min Before"

    def test_configured_defaults_used(self, now, monkeypatch):
        import telejoin.config as cfg
        monkeypatch.setattr(cfg, "EARLY_JOIN_MINUTES", 30.0)
        monkeypatch.setattr(cfg, "LATE_JOIN_MINUTES", 5.0)

        assert evaluate_join_window(video(now + timedelta(minutes=25)), now).actionable is True
        assert evaluate_join_window(video(now - timedelta(minutes=6)), now).actionable is False

    def test_decision_is_recomputable(self, now):
        appointment = video(now + timedelta(minutes=16))
        assert evaluate_join_window(appointment, now).actionable is False
        later = now + timedelta(minutes=1)
        assert evaluate_join_window(appointment, later).actionable is True
        # Same inputs, same answer
        assert evaluate_join_window(appointment, now) == evaluate_join_window(appointment, now)

    def test_non_text_uri_is_not_applicable(self, now):
        decision = evaluate_join_window(video(now, target=JoinTarget(uri=123456)), now)
        assert decision.state == JoinState.NOT_APPLICABLE
