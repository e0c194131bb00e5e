"""Pydantic schemas used across the project."""
from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from studio.modules.generation import options as photo_options
from studio.modules.generation.imaging import ViewportTransform
from studio.modules.generation.options import MAX_DIMENSION, BackgroundColor, Garment


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)


class RegisterRequest(LoginRequest):
    name: str = Field(..., min_length=1, max_length=100)


class TokenData(BaseModel):
    account_id: str
    username: str
    role: str


class AccountResponse(BaseModel):
    id: str
    username: str
    name: str
    role: str
    avatar: Optional[str] = None
    balance: int
    is_active: bool
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AccountLoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account: AccountResponse
    ws_url: str


class AdminAccountCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    role: Literal["user", "admin"] = "user"
    balance: int = Field(default=0, ge=0)
    is_active: bool = True


class AccountListResponse(BaseModel):
    total: int
    accounts: list[AccountResponse]


class SuccessResponse(BaseModel):
    success: bool = True
    message: str = "OK"


# --- wallet ---


class BalanceAdjustRequest(BaseModel):
    amount: int = Field(..., gt=0)
    action: Literal["add", "deduct"]


class WalletTransactionResponse(BaseModel):
    id: str
    amount: int
    type: str
    description: str
    reference_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WalletTransactionListResponse(BaseModel):
    balance: int
    transactions: list[WalletTransactionResponse]


class LedgerCheckResponse(BaseModel):
    balance: int
    ledger_total: int
    consistent: bool

    model_config = ConfigDict(from_attributes=True)


class AccountLedgerResponse(BaseModel):
    account: AccountResponse
    ledger: LedgerCheckResponse
    transactions: list[WalletTransactionResponse]


class PaymentInfoResponse(BaseModel):
    currency: str
    payment_number: str
    payment_channel: str
    min_recharge: int
    generation_cost: int
    welcome_bonus: int


# --- recharges ---


class RechargeCreateRequest(BaseModel):
    amount: int = Field(..., gt=0)
    sender_number: str = Field(..., min_length=1, max_length=30)
    trx_id: str = Field(..., min_length=1, max_length=64)
    method: Literal["bkash", "nagad"] = "bkash"


class RechargeResponse(BaseModel):
    id: str
    account_id: str
    user_name: str
    amount: int
    method: str
    sender_number: str
    trx_id: str
    status: str
    created_at: datetime
    resolved_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RechargeListResponse(BaseModel):
    total: int
    requests: list[RechargeResponse]


class RechargeReviewRequest(BaseModel):
    decision: Literal["approved", "rejected"]


# --- photo generation ---


class OriginalClothingSchema(BaseModel):
    kind: Literal["original"] = "original"


class PresetClothingSchema(BaseModel):
    kind: Literal["preset"] = "preset"
    garment: Garment


class CustomClothingSchema(BaseModel):
    kind: Literal["custom"] = "custom"
    description: str = Field(..., min_length=1, max_length=300)


ClothingSchema = Annotated[
    Union[OriginalClothingSchema, PresetClothingSchema, CustomClothingSchema],
    Field(discriminator="kind"),
]


class PassportSizeSchema(BaseModel):
    kind: Literal["passport"] = "passport"


class SquareSizeSchema(BaseModel):
    kind: Literal["square"] = "square"


class CustomSizeSchema(BaseModel):
    kind: Literal["custom"] = "custom"
    width: int = Field(..., ge=1, le=MAX_DIMENSION)
    height: int = Field(..., ge=1, le=MAX_DIMENSION)


SizeSchema = Annotated[
    Union[PassportSizeSchema, SquareSizeSchema, CustomSizeSchema],
    Field(discriminator="kind"),
]


class RetouchSchema(BaseModel):
    enabled: bool = False
    intensity: int = Field(default=50, ge=0, le=100)


class PhotoOptionsSchema(BaseModel):
    background: BackgroundColor = BackgroundColor.WHITE
    clothing: ClothingSchema = Field(default_factory=OriginalClothingSchema)
    skin_smoothing: RetouchSchema = Field(default_factory=RetouchSchema)
    lighting: RetouchSchema = Field(default_factory=RetouchSchema)
    brightening: RetouchSchema = Field(default_factory=RetouchSchema)
    size: SizeSchema = Field(default_factory=PassportSizeSchema)

    def to_domain(self) -> photo_options.PhotoOptions:
        if isinstance(self.clothing, PresetClothingSchema):
            clothing = photo_options.PresetClothing(self.clothing.garment)
        elif isinstance(self.clothing, CustomClothingSchema):
            clothing = photo_options.CustomClothing(self.clothing.description)
        else:
            clothing = photo_options.OriginalClothing()

        if isinstance(self.size, CustomSizeSchema):
            size = photo_options.CustomSize(self.size.width, self.size.height)
        elif isinstance(self.size, SquareSizeSchema):
            size = photo_options.SquareSize()
        else:
            size = photo_options.PassportSize()

        return photo_options.PhotoOptions(
            background=self.background,
            clothing=clothing,
            skin_smoothing=photo_options.Retouch(**self.skin_smoothing.model_dump()),
            lighting=photo_options.Retouch(**self.lighting.model_dump()),
            brightening=photo_options.Retouch(**self.brightening.model_dump()),
            size=size,
        )


class ViewportSchema(BaseModel):
    container_width: float = Field(..., gt=0)
    container_height: float = Field(..., gt=0)
    translate_x: float = 0.0
    translate_y: float = 0.0
    scale: float = Field(default=1.0, gt=0)
    rotation: float = 0.0

    def to_domain(self) -> ViewportTransform:
        return ViewportTransform(**self.model_dump())


class GenerateRequest(BaseModel):
    image: str = Field(..., min_length=1, description="Source photo as a data URL or bare base64")
    options: PhotoOptionsSchema = Field(default_factory=PhotoOptionsSchema)
    viewport: Optional[ViewportSchema] = None
    session_key: Optional[str] = Field(default=None, max_length=64)


class GenerateResponse(BaseModel):
    image_id: str
    image: str
    width: int
    height: int
    charged: bool
    balance: int


class AnalyzeRequest(BaseModel):
    image: str = Field(..., min_length=1)


class FaceBoxResponse(BaseModel):
    ymin: float
    xmin: float
    ymax: float
    xmax: float

    model_config = ConfigDict(from_attributes=True)


class FaceAnalysisResponse(BaseModel):
    roll_angle: float
    face_box: Optional[FaceBoxResponse] = None

    model_config = ConfigDict(from_attributes=True)


class GalleryImageResponse(BaseModel):
    id: str
    account_id: str
    user_name: str
    image_data: str
    settings_summary: str
    charged: bool
    width: Optional[int] = None
    height: Optional[int] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GalleryListResponse(BaseModel):
    total: int
    images: list[GalleryImageResponse]


# --- chat ---


class AttachmentSchema(BaseModel):
    type: Literal["image", "audio"]
    data: str = Field(..., min_length=1)

    model_config = ConfigDict(from_attributes=True)


class ChatMessageCreate(BaseModel):
    text: str = Field(default="", max_length=4000)
    attachment: Optional[AttachmentSchema] = None


class ChatMessageResponse(BaseModel):
    id: str
    conversation_key: str
    sender_name: str
    text: str
    is_from_admin: bool
    status: str
    created_at: datetime
    attachment: Optional[AttachmentSchema] = None

    model_config = ConfigDict(from_attributes=True)


class ChatMessageListResponse(BaseModel):
    messages: list[ChatMessageResponse]


class ConversationSummary(BaseModel):
    conversation_key: str
    user_name: str
    last_message: ChatMessageResponse
    unread: int
    awaiting_reply: bool


class ConversationListResponse(BaseModel):
    total: int
    conversations: list[ConversationSummary]


class AssistantTurn(BaseModel):
    role: Literal["user", "model"]
    text: str


class AssistantRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)
    history: list[AssistantTurn] = Field(default_factory=list)


class AssistantResponse(BaseModel):
    reply: str


# --- admin ---


class NotificationCountsResponse(BaseModel):
    pending_recharges: int
    pending_chats: int


class RestoreResponse(BaseModel):
    success: bool = True
    restored: dict[str, int]
