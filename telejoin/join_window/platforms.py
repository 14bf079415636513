"""Meeting platform detection from join URIs."""

from enum import Enum
from urllib.parse import urlparse


class MeetingPlatform(Enum):
    """Video platform hosting a doctor's meeting room."""
    ZOOM = "zoom"
    GOOGLE_MEET = "google_meet"
    MICROSOFT_TEAMS = "microsoft_teams"
    DAILY = "daily"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    MeetingPlatform.ZOOM: "Zoom",
    MeetingPlatform.GOOGLE_MEET: "Google Meet",
    MeetingPlatform.MICROSOFT_TEAMS: "Microsoft Teams",
    MeetingPlatform.DAILY: "Daily",
    MeetingPlatform.OTHER: "Video",
}

# Host suffix -> platform
_HOSTS = (
    ("zoom.us", MeetingPlatform.ZOOM),
    ("zoom.com", MeetingPlatform.ZOOM),
    ("meet.google.com", MeetingPlatform.GOOGLE_MEET),
    ("teams.microsoft.com", MeetingPlatform.MICROSOFT_TEAMS),
    ("teams.live.com", MeetingPlatform.MICROSOFT_TEAMS),
    ("daily.co", MeetingPlatform.DAILY),
)


def detect_platform(uri: str) -> MeetingPlatform:
    """Guess the meeting platform from a join URI's host."""
    if not uri:
        return MeetingPlatform.OTHER

    host = (urlparse(uri.strip()).hostname or "").lower()
    for suffix, platform in _HOSTS:
        if host == suffix or host.endswith("." + suffix):
            return platform
    return MeetingPlatform.OTHER
