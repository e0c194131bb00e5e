"""Backup exports"""

from .exceptions import BackupError, InvalidBackupError
from .models import CURRENT_VERSION, BackupDocument

__all__ = ["BackupError", "InvalidBackupError", "CURRENT_VERSION", "BackupDocument"]
