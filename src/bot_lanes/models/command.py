"""Command models for bot_lanes.

Commands are side-effect instructions extracted from model output.
They have no identity beyond their occurrence in one response and are
consumed once by the side-effect dispatcher.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

__all__ = [
    "Command",
    "ReactionCommand",
    "SendMediaCommand",
]


class ReactionCommand(BaseModel, frozen=True):
    """Set a reaction on the originating message.

    Attributes:
        symbol: Reaction emoji as emitted by the model
    """

    kind: Literal["reaction"] = "reaction"
    symbol: str = Field(min_length=1)


class SendMediaCommand(BaseModel, frozen=True):
    """Send one random item from the media cache."""

    kind: Literal["send_media"] = "send_media"


Command = Annotated[ReactionCommand | SendMediaCommand, Field(discriminator="kind")]
