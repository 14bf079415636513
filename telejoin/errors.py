"""Exceptions raised by telejoin."""


class TelejoinError(Exception):
    """Base class for all telejoin errors."""


class JoinNotAvailableError(TelejoinError):
    """Raised when a join target is opened outside its join window."""

    def __init__(self, state):
        self.state = state
        super().__init__(
            f"Join target can only be opened when actionable (state: {state.value})"
        )


class InvalidAppointmentError(TelejoinError, ValueError):
    """Raised when an appointment record cannot be turned into an Appointment."""


class ConfigError(TelejoinError, ValueError):
    """Raised when a configuration value cannot be parsed or is out of range."""
