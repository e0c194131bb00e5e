"""Authentication endpoints for the web clients."""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from studio.core.security import create_access_token, get_current_account
from studio.interfaces.http.deps import get_account_service, get_db_session
from studio.modules.accounts import Account as AccountDomain
from studio.modules.accounts import AccountAlreadyExistsError, AccountCreateInput
from studio.modules.accounts.service import AccountService
from studio.schemas import (
    AccountLoginResponse,
    AccountResponse,
    LoginRequest,
    RegisterRequest,
    SuccessResponse,
)

router = APIRouter()


def _ws_url(request: Request, token: str) -> str:
    host_header = request.headers.get("host", "localhost:8000")
    scheme = "ws"
    if request.url.scheme == "https" or request.headers.get("x-forwarded-proto") == "https":
        scheme = "wss"
    return f"{scheme}://{host_header}/ws?token={token}"


def _login_response(request: Request, account: AccountDomain) -> AccountLoginResponse:
    access_token = create_access_token(account.id, account.username, account.role)
    return AccountLoginResponse(
        access_token=access_token,
        account=AccountResponse.model_validate(account),
        ws_url=_ws_url(request, access_token),
    )


@router.post("/register", response_model=AccountLoginResponse, status_code=status.HTTP_201_CREATED, summary="Create a customer account")
async def register(
    payload: RegisterRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    account_service: AccountService = Depends(get_account_service),
) -> AccountLoginResponse:
    try:
        account = await account_service.register(
            AccountCreateInput(username=payload.username, password=payload.password, name=payload.name)
        )
    except AccountAlreadyExistsError as exc:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists") from exc
    except ValueError as exc:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    await db.commit()
    return _login_response(request, account)


@router.post("/login", response_model=AccountLoginResponse, summary="Log in with username and password")
async def login(
    payload: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    account_service: AccountService = Depends(get_account_service),
) -> AccountLoginResponse:
    account = await account_service.authenticate(payload.username, payload.password)
    if not account:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")

    await account_service.set_last_login(account.id)
    await db.commit()
    return _login_response(request, account)


@router.get("/me", response_model=AccountResponse, summary="Current account, re-read from the store")
async def me(account: AccountDomain = Depends(get_current_account)) -> AccountResponse:
    return AccountResponse.model_validate(account)


@router.post("/logout", response_model=SuccessResponse, summary="Log out (the client drops its token)")
async def logout(_: AccountDomain = Depends(get_current_account)) -> SuccessResponse:
    return SuccessResponse(message="Logged out")
