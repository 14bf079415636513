"""Opening a join target in a new browser window."""

import logging
import webbrowser
from typing import Protocol

from ..errors import JoinNotAvailableError
from .types import JoinDecision

logger = logging.getLogger("telejoin")


class JoinTargetOpener(Protocol):
    """Platform collaborator that opens a URI in a new viewport."""

    def open(self, uri: str) -> object:
        ...


class BrowserOpener:
    """Opens join targets with the system web browser."""

    def open(self, uri: str) -> bool:
        return webbrowser.open_new(uri)


def open_join_target(decision: JoinDecision, opener: JoinTargetOpener) -> None:
    """Open the decision's join URI. Fire-and-forget.

    Raises:
        JoinNotAvailableError: if the decision is not VIDEO_ACTIONABLE.
    """
    if not decision.actionable:
        raise JoinNotAvailableError(decision.state)

    logger.info(f"Opening join target: {decision.join_uri}")
    opener.open(decision.join_uri)
