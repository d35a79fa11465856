from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BaseSettings(BaseModel):
    """
    Root of every service settings schema.

    Settings are read-only once loaded, and validation errors never echo
    the offending input since it may hold credentials.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, hide_input_in_errors=True)
