"""Admin backup export and restore."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from studio.core.crypto import hash_password, looks_hashed
from studio.infrastructure.database.repositories.backup_repository import SqlBackupRepository

from .exceptions import InvalidBackupError
from .models import SUPPORTED_VERSIONS, BackupDocument

logger = logging.getLogger(__name__)

LIST_COLLECTIONS = ("users", "requests", "transactions", "generatedImages")


@dataclass(slots=True)
class BackupService:
    repository: SqlBackupRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "BackupService":
        return cls(SqlBackupRepository(session))

    async def export_database(self) -> dict[str, Any]:
        document = await self.repository.dump()
        return document.model_dump(mode="json", by_alias=True)

    async def restore_database(self, payload: str | bytes | dict[str, Any]) -> dict[str, int]:
        """Replace the collections present in *payload*; return per-collection counts.

        Everything is validated before the first write. The caller commits.
        """
        document = parse_backup(payload)
        hashes = _password_hashes(document)
        await self.repository.replace(document, hashes)

        counts = {
            "users": len(document.users or []),
            "requests": len(document.requests or []),
            "transactions": len(document.transactions or []),
            "generatedImages": len(document.generated_images or []),
            "chatMessages": sum(len(v) for v in (document.chat_messages or {}).values()),
        }
        logger.warning("Database restored from %s backup: %s", document.version, counts)
        return counts


def parse_backup(payload: str | bytes | dict[str, Any]) -> BackupDocument:
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as exc:
            raise InvalidBackupError("backup is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise InvalidBackupError("backup must be a JSON object")

    version = str(payload.get("version", ""))
    if version not in SUPPORTED_VERSIONS:
        raise InvalidBackupError(f"unsupported backup version: {version or 'missing'}")
    for key in LIST_COLLECTIONS:
        if key in payload and not isinstance(payload[key], list):
            raise InvalidBackupError(f"'{key}' must be a list")
    if "chatMessages" in payload and not isinstance(payload["chatMessages"], dict):
        raise InvalidBackupError("'chatMessages' must be an object")

    try:
        document = BackupDocument.model_validate(payload)
    except ValidationError as exc:
        raise InvalidBackupError(f"backup records are invalid: {exc.error_count()} error(s)") from exc

    if document.users is not None:
        ids = [u.id for u in document.users]
        names = [u.username.strip().lower() for u in document.users]
        if len(set(ids)) != len(ids) or len(set(names)) != len(names):
            raise InvalidBackupError("backup contains duplicate users")
    return document


def _password_hashes(document: BackupDocument) -> dict[str, str]:
    hashes: dict[str, str] = {}
    for user in document.users or []:
        if user.password_hash:
            hashes[user.id] = user.password_hash
        elif user.password is not None and looks_hashed(user.password):
            hashes[user.id] = user.password
        elif user.password is not None:
            hashes[user.id] = hash_password(user.password)
        else:
            raise InvalidBackupError(f"user {user.username} has no password")
    return hashes
