"""Domain model for stored generated photos."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(slots=True)
class GalleryImage:
    id: str
    account_id: str
    user_name: str
    image_data: str
    settings_summary: str
    charged: bool
    created_at: datetime
    session_key: Optional[str] = None
    source_digest: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass(slots=True)
class GalleryFilter:
    """Admin gallery filter: a calendar day (UTC) and/or a user-name substring."""

    day: Optional[date] = None
    user_query: Optional[str] = None
