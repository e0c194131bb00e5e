"""Repository protocol for the photo gallery."""

from __future__ import annotations

from typing import Protocol, Sequence

from .models import GalleryFilter, GalleryImage


class GalleryRepository(Protocol):
    async def add(
        self,
        *,
        account_id: str,
        user_name: str,
        image_data: str,
        settings_summary: str,
        session_key: str | None,
        source_digest: str | None,
        charged: bool,
        width: int | None,
        height: int | None,
    ) -> GalleryImage:
        ...

    async def get(self, image_id: str) -> GalleryImage | None:
        ...

    async def session_charged(self, account_id: str, session_key: str, source_digest: str) -> bool:
        ...

    async def list_for_account(self, account_id: str, limit: int, offset: int) -> Sequence[GalleryImage]:
        ...

    async def search(self, filters: GalleryFilter, limit: int, offset: int) -> Sequence[GalleryImage]:
        ...

    async def count(self) -> int:
        ...

    async def count_for_account(self, account_id: str) -> int:
        ...

    async def count_matching(self, filters: GalleryFilter) -> int:
        ...

    async def evict_oldest(self, keep: int) -> int:
        """Delete all but the newest *keep* images; return how many were removed."""
        ...
