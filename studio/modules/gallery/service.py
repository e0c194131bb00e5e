"""Gallery service: stores generated photos and enforces the capacity cap."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from studio.core.config import GallerySettings, get_settings
from studio.infrastructure.database.repositories.gallery_repository import SqlGalleryRepository

from .exceptions import GalleryImageNotFoundError
from .models import GalleryFilter, GalleryImage
from .repository import GalleryRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GalleryService:
    repository: GalleryRepository
    settings: GallerySettings = field(default_factory=lambda: get_settings().gallery)

    @classmethod
    def with_session(cls, session: AsyncSession) -> "GalleryService":
        return cls(SqlGalleryRepository(session))

    async def save(
        self,
        *,
        account_id: str,
        user_name: str,
        image_data: str,
        settings_summary: str,
        session_key: str | None = None,
        source_digest: str | None = None,
        charged: bool = False,
        width: int | None = None,
        height: int | None = None,
    ) -> GalleryImage:
        image = await self.repository.add(
            account_id=account_id,
            user_name=user_name,
            image_data=image_data,
            settings_summary=settings_summary,
            session_key=session_key,
            source_digest=source_digest,
            charged=charged,
            width=width,
            height=height,
        )
        if await self.repository.count() > self.settings.max_images:
            removed = await self.repository.evict_oldest(self.settings.max_images)
            logger.info("Gallery over capacity, evicted %d oldest image(s)", removed)
        return image

    async def session_charged(
        self, account_id: str, session_key: str | None, source_digest: str | None
    ) -> bool:
        """True when this account already paid for *session_key* on the same source photo."""
        if not session_key or not source_digest:
            return False
        return await self.repository.session_charged(account_id, session_key, source_digest)

    async def list_for_account(self, account_id: str, limit: int = 50, offset: int = 0) -> list[GalleryImage]:
        return list(await self.repository.list_for_account(account_id, limit, offset))

    async def get_for_account(self, account_id: str, image_id: str) -> GalleryImage:
        image = await self.repository.get(image_id)
        if image is None or image.account_id != account_id:
            raise GalleryImageNotFoundError(image_id)
        return image

    async def search(
        self, filters: GalleryFilter | None = None, limit: int = 100, offset: int = 0
    ) -> list[GalleryImage]:
        return list(await self.repository.search(filters or GalleryFilter(), limit, offset))

    async def count_for_account(self, account_id: str) -> int:
        return await self.repository.count_for_account(account_id)

    async def count_matching(self, filters: GalleryFilter | None = None) -> int:
        return await self.repository.count_matching(filters or GalleryFilter())
