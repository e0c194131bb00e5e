"""Customer-facing endpoints: wallet, recharges, photo generation and support chat."""
from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Path, status
from google.genai import errors as genai_errors
from sqlalchemy.ext.asyncio import AsyncSession

from studio.core.config import get_settings
from studio.core.security import get_current_account
from studio.interfaces.http.deps import get_db_session, get_generation_client, get_support_assistant
from studio.interfaces.ws.manager import (
    EVENT_CHAT_MESSAGE,
    EVENT_RECHARGE_SUBMITTED,
    manager,
)
from studio.modules.accounts import Account as AccountDomain
from studio.modules.chat import Attachment, ChatError
from studio.modules.chat.service import ChatService
from studio.modules.gallery import GalleryImageNotFoundError
from studio.modules.gallery.service import GalleryService
from studio.modules.generation import (
    GenerationEmpty,
    GenerationRefused,
    InvalidImageError,
)
from studio.modules.generation.assistant import ChatTurn, SupportAssistant
from studio.modules.generation.client import GenerationClient
from studio.modules.generation.service import GenerationService
from studio.modules.recharges import RechargeAmountTooLowError
from studio.modules.recharges.service import RechargeService
from studio.modules.wallets import InsufficientBalanceError
from studio.modules.wallets.service import WalletService
from studio.schemas import (
    AccountResponse,
    AnalyzeRequest,
    AssistantRequest,
    AssistantResponse,
    ChatMessageCreate,
    ChatMessageListResponse,
    ChatMessageResponse,
    FaceAnalysisResponse,
    GalleryImageResponse,
    GalleryListResponse,
    GenerateRequest,
    GenerateResponse,
    PaymentInfoResponse,
    RechargeCreateRequest,
    RechargeListResponse,
    RechargeResponse,
    WalletTransactionListResponse,
    WalletTransactionResponse,
)

from .errors import chat_error_status

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_current_customer(account: AccountDomain = Depends(get_current_account)) -> AccountDomain:
    """Admins use the admin panel; these endpoints are for customers only."""
    if account.is_admin():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Customer account required")
    return account


@router.get("/me", response_model=AccountResponse, summary="Current customer profile and balance")
async def customer_profile(account: AccountDomain = Depends(get_current_customer)) -> AccountResponse:
    return AccountResponse.model_validate(account)


@router.get("/payment-info", response_model=PaymentInfoResponse, summary="Recharge instructions and pricing")
async def payment_info(_: AccountDomain = Depends(get_current_customer)) -> PaymentInfoResponse:
    billing = get_settings().billing
    return PaymentInfoResponse(**billing.model_dump(include=set(PaymentInfoResponse.model_fields)))


@router.get("/wallet/transactions", response_model=WalletTransactionListResponse, summary="Wallet history, newest first")
async def list_wallet_transactions(
    limit: int = 50,
    offset: int = 0,
    account: AccountDomain = Depends(get_current_customer),
    db: AsyncSession = Depends(get_db_session),
) -> WalletTransactionListResponse:
    wallet_service = WalletService.with_session(db)
    records = await wallet_service.list_transactions(account.id, limit=limit, offset=offset)
    return WalletTransactionListResponse(
        balance=account.balance,
        transactions=[WalletTransactionResponse.model_validate(r) for r in records],
    )


@router.get("/recharges", response_model=RechargeListResponse, summary="Own recharge requests")
async def list_recharges(
    limit: int = 50,
    offset: int = 0,
    account: AccountDomain = Depends(get_current_customer),
    db: AsyncSession = Depends(get_db_session),
) -> RechargeListResponse:
    service = RechargeService.with_session(db)
    requests = await service.list_for_account(account.id, limit=limit, offset=offset)
    return RechargeListResponse(
        total=await service.count_for_account(account.id),
        requests=[RechargeResponse.model_validate(r) for r in requests],
    )


@router.post(
    "/recharges",
    response_model=RechargeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a manual recharge for admin review",
)
async def submit_recharge(
    payload: RechargeCreateRequest,
    account: AccountDomain = Depends(get_current_customer),
    db: AsyncSession = Depends(get_db_session),
) -> RechargeResponse:
    service = RechargeService.with_session(db)
    try:
        request = await service.submit(
            account,
            amount=payload.amount,
            sender_number=payload.sender_number,
            trx_id=payload.trx_id,
            method=payload.method,
        )
    except RechargeAmountTooLowError as exc:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Minimum recharge is {exc.minimum}",
        ) from exc
    except ValueError as exc:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    await db.commit()

    response = RechargeResponse.model_validate(request)
    await manager.notify_admins(EVENT_RECHARGE_SUBMITTED, response.model_dump(mode="json"))
    return response


@router.post("/photos/analyze", response_model=FaceAnalysisResponse, summary="Detect face box and head tilt")
async def analyze_photo(
    payload: AnalyzeRequest,
    _: AccountDomain = Depends(get_current_customer),
    client: GenerationClient = Depends(get_generation_client),
    db: AsyncSession = Depends(get_db_session),
) -> FaceAnalysisResponse:
    service = GenerationService.with_session(db, client)
    try:
        analysis = await service.analyze(payload.image)
    except InvalidImageError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return FaceAnalysisResponse.model_validate(analysis)


@router.post("/photos/generate", response_model=GenerateResponse, summary="Generate a passport photo")
async def generate_photo(
    payload: GenerateRequest,
    account: AccountDomain = Depends(get_current_customer),
    client: GenerationClient = Depends(get_generation_client),
    db: AsyncSession = Depends(get_db_session),
) -> GenerateResponse:
    service = GenerationService.with_session(db, client)
    try:
        options = payload.options.to_domain()
        transform = payload.viewport.to_domain() if payload.viewport else None
        result = await service.generate_for_account(
            account,
            payload.image,
            options,
            transform=transform,
            session_key=payload.session_key,
        )
    except InsufficientBalanceError as exc:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail=f"Insufficient balance: {exc.balance} available, {exc.required} required",
        ) from exc
    except InvalidImageError as exc:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except GenerationRefused as exc:
        await db.rollback()
        raise HTTPException(status_code=422, detail=exc.excerpt) from exc
    except GenerationEmpty as exc:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except (genai_errors.APIError, httpx.HTTPError) as exc:
        await db.rollback()
        logger.error("Image model call failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Image service error") from exc
    except ValueError as exc:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    await db.commit()

    return GenerateResponse(
        image_id=result.image.id,
        image=result.data_url,
        width=result.image.width,
        height=result.image.height,
        charged=result.charged,
        balance=result.balance,
    )


@router.get("/photos", response_model=GalleryListResponse, summary="Own generated photos, newest first")
async def list_photos(
    limit: int = 50,
    offset: int = 0,
    account: AccountDomain = Depends(get_current_customer),
    db: AsyncSession = Depends(get_db_session),
) -> GalleryListResponse:
    service = GalleryService.with_session(db)
    images = await service.list_for_account(account.id, limit=limit, offset=offset)
    return GalleryListResponse(
        total=await service.count_for_account(account.id),
        images=[GalleryImageResponse.model_validate(image) for image in images],
    )


@router.get("/photos/{image_id}", response_model=GalleryImageResponse, summary="One generated photo")
async def get_photo(
    image_id: str = Path(..., description="Image id"),
    account: AccountDomain = Depends(get_current_customer),
    db: AsyncSession = Depends(get_db_session),
) -> GalleryImageResponse:
    service = GalleryService.with_session(db)
    try:
        image = await service.get_for_account(account.id, image_id)
    except GalleryImageNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found") from exc
    return GalleryImageResponse.model_validate(image)


@router.get("/chat/messages", response_model=ChatMessageListResponse, summary="Own support conversation")
async def list_chat_messages(
    account: AccountDomain = Depends(get_current_customer),
    db: AsyncSession = Depends(get_db_session),
) -> ChatMessageListResponse:
    service = ChatService.with_session(db)
    # opening the conversation means the admin's replies have been seen
    await service.mark_seen(account.id, by_admin=False)
    messages = await service.list_conversation(account.id)
    await db.commit()
    return ChatMessageListResponse(messages=[ChatMessageResponse.model_validate(m) for m in messages])


@router.post(
    "/chat/messages",
    response_model=ChatMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message to support",
)
async def post_chat_message(
    payload: ChatMessageCreate,
    account: AccountDomain = Depends(get_current_customer),
    db: AsyncSession = Depends(get_db_session),
) -> ChatMessageResponse:
    service = ChatService.with_session(db)
    attachment = Attachment(type=payload.attachment.type, data=payload.attachment.data) if payload.attachment else None
    try:
        message = await service.post_message(
            account.id,
            account.name,
            payload.text,
            is_from_admin=False,
            attachment=attachment,
        )
    except ChatError as exc:
        await db.rollback()
        raise HTTPException(status_code=chat_error_status(exc), detail=str(exc)) from exc
    await db.commit()

    response = ChatMessageResponse.model_validate(message)
    await manager.notify_admins(EVENT_CHAT_MESSAGE, response.model_dump(mode="json"))
    return response


@router.post("/assistant", response_model=AssistantResponse, summary="Ask the automated support assistant")
async def ask_assistant(
    payload: AssistantRequest,
    _: AccountDomain = Depends(get_current_customer),
    assistant: SupportAssistant = Depends(get_support_assistant),
) -> AssistantResponse:
    history = [ChatTurn(role=turn.role, text=turn.text) for turn in payload.history]
    reply = await assistant.reply(history, payload.message)
    return AssistantResponse(reply=reply)
