"""Color channel decoding.

The ``color`` field is overloaded: it carries either a paint color or a
discrete command token behind the ``CMD:`` marker. This module is the
only place that interprets the marker.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from pysmarthome._constants import COMMAND_PREFIX


class ColorKind(StrEnum):
    COLOR = "color"
    COMMAND = "command"


class DecodedColor(BaseModel):
    """Exactly one of a color value or a command token."""

    model_config = ConfigDict(frozen=True)

    kind: ColorKind
    value: str

    @property
    def is_command(self) -> bool:
        return self.kind == ColorKind.COMMAND


def decode_color(color: str) -> DecodedColor:
    """Split a color channel value into a color or a command token.

    A marker with an empty payload decodes to a command with an empty
    token; subscribers decide whether that is meaningful.
    """
    if color.startswith(COMMAND_PREFIX):
        return DecodedColor(kind=ColorKind.COMMAND, value=color[len(COMMAND_PREFIX) :])
    return DecodedColor(kind=ColorKind.COLOR, value=color)


def encode_command(token: str) -> str:
    """Build the color channel form of a command token."""
    return f"{COMMAND_PREFIX}{token.strip().upper()}"
