"""Admin endpoints: accounts, balances, recharge review, gallery, support chat and backups."""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from studio.core.security import get_current_admin
from studio.interfaces.http.deps import get_account_service, get_db_session
from studio.interfaces.ws.manager import (
    EVENT_BALANCE_CHANGED,
    EVENT_CHAT_MESSAGE,
    EVENT_RECHARGE_RESOLVED,
    manager,
)
from studio.modules.accounts import Account as AccountDomain
from studio.modules.accounts import AccountAlreadyExistsError, AccountCreateInput
from studio.modules.accounts.service import AccountService
from studio.modules.backup import InvalidBackupError
from studio.modules.backup.service import BackupService
from studio.modules.chat import Attachment, ChatError, Conversation
from studio.modules.chat.service import ChatService
from studio.modules.gallery import GalleryFilter
from studio.modules.gallery.service import GalleryService
from studio.modules.recharges import (
    RechargeAccountMissingError,
    RechargeAlreadyProcessedError,
    RechargeNotFoundError,
)
from studio.modules.recharges.service import RechargeService
from studio.modules.wallets import InsufficientBalanceError
from studio.modules.wallets.service import WalletService
from studio.schemas import (
    AccountLedgerResponse,
    AccountListResponse,
    AccountResponse,
    AdminAccountCreate,
    BalanceAdjustRequest,
    ChatMessageCreate,
    ChatMessageListResponse,
    ChatMessageResponse,
    ConversationListResponse,
    ConversationSummary,
    GalleryImageResponse,
    GalleryListResponse,
    LedgerCheckResponse,
    NotificationCountsResponse,
    RechargeListResponse,
    RechargeResponse,
    RechargeReviewRequest,
    RestoreResponse,
    WalletTransactionResponse,
)

from .errors import chat_error_status

router = APIRouter()


async def _get_account_or_404(service: AccountService, account_id: str) -> AccountDomain:
    account = await service.get_by_id(account_id)
    if account is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    return account


@router.get("/users", response_model=AccountListResponse, summary="All accounts")
async def list_accounts(
    _: AccountDomain = Depends(get_current_admin),
    account_service: AccountService = Depends(get_account_service),
) -> AccountListResponse:
    accounts = await account_service.list_accounts()
    return AccountListResponse(
        total=len(accounts),
        accounts=[AccountResponse.model_validate(a) for a in accounts],
    )


@router.post(
    "/users",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account with an optional opening balance",
)
async def create_account(
    payload: AdminAccountCreate,
    _: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    try:
        account = await account_service.register(
            AccountCreateInput(
                username=payload.username,
                password=payload.password,
                name=payload.name,
                role=payload.role,
                opening_balance=payload.balance,
                is_active=payload.is_active,
            )
        )
    except AccountAlreadyExistsError as exc:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists") from exc
    except ValueError as exc:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    await db.commit()
    return AccountResponse.model_validate(account)


@router.post("/users/{account_id}/balance", response_model=AccountResponse, summary="Manually add or deduct balance")
async def adjust_balance(
    payload: BalanceAdjustRequest,
    account_id: str = Path(..., description="Account id"),
    _: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
) -> AccountResponse:
    wallet_service = WalletService.with_session(db)
    try:
        account = await wallet_service.admin_adjust(account_id, payload.amount, payload.action)
    except InsufficientBalanceError as exc:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot deduct {exc.required}: balance is {exc.balance}",
        ) from exc
    if account is None:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    await db.commit()

    await manager.notify_account(account.id, EVENT_BALANCE_CHANGED, {"balance": account.balance})
    return AccountResponse.model_validate(account)


@router.get("/users/{account_id}/transactions", response_model=AccountLedgerResponse, summary="Account ledger")
async def account_ledger(
    account_id: str = Path(..., description="Account id"),
    _: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    account_service: AccountService = Depends(get_account_service),
) -> AccountLedgerResponse:
    account = await _get_account_or_404(account_service, account_id)
    wallet_service = WalletService.with_session(db)
    records = await wallet_service.list_transactions(account.id)
    check = await wallet_service.verify_ledger(account)
    return AccountLedgerResponse(
        account=AccountResponse.model_validate(account),
        ledger=LedgerCheckResponse.model_validate(check),
        transactions=[WalletTransactionResponse.model_validate(r) for r in records],
    )


@router.get("/recharges", response_model=RechargeListResponse, summary="Recharge requests, newest first")
async def list_recharges(
    status_filter: Optional[str] = Query(None, alias="status", pattern="^(all|pending|approved|rejected)$"),
    limit: int = 100,
    offset: int = 0,
    _: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
) -> RechargeListResponse:
    service = RechargeService.with_session(db)
    requests = await service.list_all(status=status_filter, limit=limit, offset=offset)
    return RechargeListResponse(
        total=await service.count_all(status_filter),
        requests=[RechargeResponse.model_validate(r) for r in requests],
    )


@router.post("/recharges/{request_id}/review", response_model=RechargeResponse, summary="Approve or reject a recharge")
async def review_recharge(
    payload: RechargeReviewRequest,
    request_id: str = Path(..., description="Recharge request id"),
    _: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
) -> RechargeResponse:
    service = RechargeService.with_session(db)
    try:
        request = await service.resolve(request_id, payload.decision)
    except RechargeNotFoundError as exc:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recharge request not found") from exc
    except RechargeAlreadyProcessedError as exc:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Recharge request already processed") from exc
    except RechargeAccountMissingError as exc:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Requesting account no longer exists") from exc
    await db.commit()

    response = RechargeResponse.model_validate(request)
    await manager.notify_account(request.account_id, EVENT_RECHARGE_RESOLVED, response.model_dump(mode="json"))
    return response


@router.get("/gallery", response_model=GalleryListResponse, summary="All generated photos with filters")
async def list_gallery(
    day: Optional[date] = Query(None, alias="date", description="YYYY-MM-DD (UTC)"),
    user: Optional[str] = Query(None, description="Case-insensitive name substring"),
    limit: int = 100,
    offset: int = 0,
    _: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
) -> GalleryListResponse:
    service = GalleryService.with_session(db)
    filters = GalleryFilter(day=day, user_query=user)
    images = await service.search(filters, limit=limit, offset=offset)
    return GalleryListResponse(
        total=await service.count_matching(filters),
        images=[GalleryImageResponse.model_validate(image) for image in images],
    )


def _summarize(conversation: Conversation, names: dict[str, str]) -> ConversationSummary:
    last = conversation.last_message
    fallback = next(
        (m.sender_name for m in reversed(conversation.messages) if not m.is_from_admin),
        conversation.key,
    )
    return ConversationSummary(
        conversation_key=conversation.key,
        user_name=names.get(conversation.key, fallback),
        last_message=ChatMessageResponse.model_validate(last),
        unread=conversation.unread_for(admin=True),
        awaiting_reply=conversation.awaiting_admin,
    )


@router.get("/chats", response_model=ConversationListResponse, summary="Support conversations, latest first")
async def list_conversations(
    _: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    account_service: AccountService = Depends(get_account_service),
) -> ConversationListResponse:
    service = ChatService.with_session(db)
    await service.mark_delivered(None, by_admin=True)
    conversations = await service.list_conversations()
    await db.commit()

    names = {a.id: a.name for a in await account_service.list_accounts()}
    return ConversationListResponse(
        total=len(conversations),
        conversations=[_summarize(c, names) for c in conversations],
    )


@router.get("/chats/{conversation_key}", response_model=ChatMessageListResponse, summary="Open a conversation")
async def open_conversation(
    conversation_key: str = Path(..., description="Customer account id"),
    _: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
) -> ChatMessageListResponse:
    service = ChatService.with_session(db)
    await service.mark_seen(conversation_key, by_admin=True)
    messages = await service.list_conversation(conversation_key)
    await db.commit()
    return ChatMessageListResponse(messages=[ChatMessageResponse.model_validate(m) for m in messages])


@router.post(
    "/chats/{conversation_key}/messages",
    response_model=ChatMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Reply to a customer",
)
async def reply_to_conversation(
    payload: ChatMessageCreate,
    conversation_key: str = Path(..., description="Customer account id"),
    admin: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    account_service: AccountService = Depends(get_account_service),
) -> ChatMessageResponse:
    await _get_account_or_404(account_service, conversation_key)
    service = ChatService.with_session(db)
    attachment = Attachment(type=payload.attachment.type, data=payload.attachment.data) if payload.attachment else None
    try:
        message = await service.post_message(
            conversation_key,
            admin.name,
            payload.text,
            is_from_admin=True,
            attachment=attachment,
        )
    except ChatError as exc:
        await db.rollback()
        raise HTTPException(status_code=chat_error_status(exc), detail=str(exc)) from exc
    await db.commit()

    response = ChatMessageResponse.model_validate(message)
    await manager.notify_account(conversation_key, EVENT_CHAT_MESSAGE, response.model_dump(mode="json"))
    return response


@router.get("/notifications", response_model=NotificationCountsResponse, summary="Pending work for the admin badge")
async def notification_counts(
    _: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
) -> NotificationCountsResponse:
    pending_recharges = await RechargeService.with_session(db).count_pending()
    pending_chats = await ChatService.with_session(db).count_pending()
    return NotificationCountsResponse(pending_recharges=pending_recharges, pending_chats=pending_chats)


@router.get("/backup", summary="Download a full database backup")
async def export_backup(
    _: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    data = await BackupService.with_session(db).export_database()
    filename = f"studio-backup-{datetime.now(timezone.utc):%Y-%m-%d}.json"
    return JSONResponse(content=data, headers={"Content-Disposition": f'attachment; filename="{filename}"'})


@router.post("/backup/restore", response_model=RestoreResponse, summary="Replace data from a backup")
async def restore_backup(
    payload: dict[str, Any] = Body(...),
    _: AccountDomain = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
) -> RestoreResponse:
    try:
        counts = await BackupService.with_session(db).restore_database(payload)
    except InvalidBackupError as exc:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    await db.commit()
    return RestoreResponse(restored=counts)
