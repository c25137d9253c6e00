"""
Settings record schemas.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class SettingsRecord(BaseModel):
    """
    One row of the users table.

    Columns not listed here (row id, timestamps) are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    user_id: str
    api: Optional[str] = None
    discord_id: Optional[str] = None
