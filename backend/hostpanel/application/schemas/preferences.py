"""Pydantic DTOs for panel preferences."""

from typing import Any

from pydantic import BaseModel


class PreferencesResponse(BaseModel):
    system: dict[str, Any]
    user: dict[str, Any]
    display: dict[str, Any]
