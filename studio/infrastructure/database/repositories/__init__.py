"""SQLAlchemy-backed repository implementations."""

from .account_repository import SqlAccountRepository
from .backup_repository import SqlBackupRepository
from .chat_repository import SqlChatRepository
from .gallery_repository import SqlGalleryRepository
from .recharge_repository import SqlRechargeRepository
from .wallet_repository import SqlWalletRepository

__all__ = [
    "SqlAccountRepository",
    "SqlBackupRepository",
    "SqlChatRepository",
    "SqlGalleryRepository",
    "SqlRechargeRepository",
    "SqlWalletRepository",
]
