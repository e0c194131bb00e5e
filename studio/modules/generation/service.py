"""Paid photo generation for one account."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from studio.core.config import BillingSettings, GenerationSettings, get_settings
from studio.modules.accounts.exceptions import AccountNotFoundError
from studio.modules.accounts.models import Account
from studio.modules.gallery.models import GalleryImage
from studio.modules.gallery.service import GalleryService
from studio.modules.wallets.exceptions import InsufficientBalanceError
from studio.modules.wallets.service import WalletService

from .client import FaceAnalysis, GenerationClient
from .imaging import (
    ViewportTransform,
    center_crop_resize,
    encode_jpeg,
    open_image,
    render_viewport,
    split_data_url,
    to_data_url,
)
from .options import PhotoOptions, settings_summary, size_dimensions

logger = logging.getLogger(__name__)

GENERATION_DESCRIPTION = "Passport Photo Generation"


@dataclass(slots=True)
class GenerationResult:
    image: GalleryImage
    charged: bool
    balance: int

    @property
    def data_url(self) -> str:
        return self.image.image_data


@dataclass(slots=True)
class GenerationService:
    client: GenerationClient
    wallet: WalletService
    gallery: GalleryService
    billing: BillingSettings = field(default_factory=lambda: get_settings().billing)
    settings: GenerationSettings = field(default_factory=lambda: get_settings().generation)

    @classmethod
    def with_session(cls, session: AsyncSession, client: GenerationClient) -> "GenerationService":
        return cls(client, WalletService.with_session(session), GalleryService.with_session(session))

    async def analyze(self, image_data: str) -> FaceAnalysis:
        mime_type, raw = split_data_url(image_data)
        return await self.client.analyze_face(raw, mime_type)

    async def generate_for_account(
        self,
        account: Account,
        image_data: str,
        options: PhotoOptions,
        *,
        transform: Optional[ViewportTransform] = None,
        session_key: Optional[str] = None,
    ) -> GenerationResult:
        """Generate, resize, charge and store one photo.

        A session whose earlier generation was already charged regenerates for
        free, but only for the same uploaded photo: the session is tied to a
        digest of the decoded source bytes. Otherwise the balance is checked
        before the model is called; the debit itself is still guarded by the
        ledger. Nothing is committed here; the caller commits or rolls back.
        """
        mime_type, raw = split_data_url(image_data)
        source_digest = hashlib.sha256(raw).hexdigest()

        cost = self.billing.generation_cost
        free = await self.gallery.session_charged(account.id, session_key, source_digest)
        if not free and account.balance < cost:
            raise InsufficientBalanceError(account.id, account.balance, cost)

        if transform is not None:
            framed = render_viewport(open_image(raw), transform, self.settings.crop_width)
            raw, mime_type = encode_jpeg(framed, self.settings.jpeg_quality), "image/jpeg"

        generated = await self.client.generate_photo(raw, mime_type, options)

        width, height = size_dimensions(options.size)
        final = center_crop_resize(open_image(generated), width, height)
        data_url = to_data_url(encode_jpeg(final, self.settings.jpeg_quality))

        charged = not free and cost > 0
        balance = account.balance
        if charged:
            updated = await self.wallet.adjust_balance(account.id, -cost, GENERATION_DESCRIPTION)
            if updated is None:
                raise AccountNotFoundError(account.id)
            balance = updated.balance

        image = await self.gallery.save(
            account_id=account.id,
            user_name=account.name,
            image_data=data_url,
            settings_summary=settings_summary(options),
            session_key=session_key,
            source_digest=source_digest,
            charged=charged,
            width=width,
            height=height,
        )
        logger.info(
            "Generated image %s for %s (%s)", image.id, account.id, "charged" if charged else "free"
        )
        return GenerationResult(image=image, charged=charged, balance=balance)
