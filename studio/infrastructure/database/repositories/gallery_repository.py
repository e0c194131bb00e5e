"""SQLAlchemy implementation for the photo gallery"""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone
from typing import Sequence

from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from studio.db.models import GeneratedImage
from studio.modules.gallery.models import GalleryFilter, GalleryImage


class SqlGalleryRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

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
        model = GeneratedImage(
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
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self._to_domain(model)

    async def get(self, image_id: str) -> GalleryImage | None:
        model = await self.session.get(GeneratedImage, image_id)
        return self._to_domain(model) if model else None

    async def session_charged(self, account_id: str, session_key: str, source_digest: str) -> bool:
        stmt = (
            select(GeneratedImage.id)
            .where(GeneratedImage.account_id == account_id)
            .where(GeneratedImage.session_key == session_key)
            .where(GeneratedImage.source_digest == source_digest)
            .where(GeneratedImage.charged.is_(True))
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def list_for_account(self, account_id: str, limit: int, offset: int) -> Sequence[GalleryImage]:
        stmt = (
            select(GeneratedImage)
            .where(GeneratedImage.account_id == account_id)
            .order_by(desc(GeneratedImage.created_at))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(row) for row in result.scalars().all()]

    async def search(self, filters: GalleryFilter, limit: int, offset: int) -> Sequence[GalleryImage]:
        stmt = self._filtered(select(GeneratedImage), filters)
        stmt = stmt.order_by(desc(GeneratedImage.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return [self._to_domain(row) for row in result.scalars().all()]

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(GeneratedImage))
        return int(result.scalar_one())

    async def count_for_account(self, account_id: str) -> int:
        stmt = select(func.count()).select_from(GeneratedImage).where(GeneratedImage.account_id == account_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def count_matching(self, filters: GalleryFilter) -> int:
        stmt = self._filtered(select(func.count()).select_from(GeneratedImage), filters)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def evict_oldest(self, keep: int) -> int:
        newest = (
            select(GeneratedImage.id)
            .order_by(desc(GeneratedImage.created_at))
            .limit(keep)
            .scalar_subquery()
        )
        stmt = (
            delete(GeneratedImage)
            .where(GeneratedImage.id.not_in(newest))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return int(result.rowcount or 0)

    @staticmethod
    def _filtered(stmt, filters: GalleryFilter):
        if filters.day is not None:
            start = datetime.combine(filters.day, time.min, tzinfo=timezone.utc)
            stmt = stmt.where(GeneratedImage.created_at >= start).where(
                GeneratedImage.created_at < start + timedelta(days=1)
            )
        if filters.user_query:
            pattern = f"%{filters.user_query.strip().lower()}%"
            stmt = stmt.where(func.lower(GeneratedImage.user_name).like(pattern))
        return stmt

    @staticmethod
    def _to_domain(model: GeneratedImage) -> GalleryImage:
        return GalleryImage(
            id=model.id,
            account_id=model.account_id,
            user_name=model.user_name,
            image_data=model.image_data,
            settings_summary=model.settings_summary,
            charged=bool(model.charged),
            created_at=model.created_at,
            session_key=model.session_key,
            source_digest=model.source_digest,
            width=model.width,
            height=model.height,
        )
