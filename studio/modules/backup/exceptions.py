"""Backup errors."""


class BackupError(Exception):
    """Base class for backup/restore errors."""


class InvalidBackupError(BackupError):
    """The payload is not a backup this service can restore. Nothing was written."""
