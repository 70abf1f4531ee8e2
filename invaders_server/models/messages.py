# invaders_server/models/messages.py
"""Validation models for inbound client messages."""

from typing import Any, Optional, Union

from pydantic import BaseModel, StrictBool, StrictInt, confloat

from .entities import PlayerInput

FiniteNumber = Union[StrictInt, confloat(strict=True, allow_inf_nan=False)]


class ClientMessage(BaseModel):
    """Envelope shared by every inbound message."""

    type: str
    data: Any = None


class InputData(BaseModel):
    """Payload of an ``input`` message."""

    left: StrictBool
    right: StrictBool
    up: StrictBool
    down: StrictBool
    shoot: StrictBool

    def to_player_input(self) -> PlayerInput:
        return PlayerInput(
            left=self.left,
            right=self.right,
            up=self.up,
            down=self.down,
            shoot=self.shoot,
        )


class ResumeData(BaseModel):
    """Payload of a ``resume`` message. Booleans are not numbers here."""

    score: FiniteNumber
    wave: Optional[FiniteNumber] = None
    intensity: Optional[FiniteNumber] = None
