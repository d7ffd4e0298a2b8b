"""Authentication token model."""

from __future__ import annotations

from pydantic import AliasChoices, Field

from pysmarthome.models._base import SmartHomeBaseModel


class AuthToken(SmartHomeBaseModel):
    """Bearer token returned by ``POST /api/login``."""

    token: str = Field(validation_alias=AliasChoices("token", "accessToken"))
    token_type: str = Field(default="JWT", validation_alias=AliasChoices("tokenType", "token_type"))
    username: str = ""
    role: str = ""
