"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./studio.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None
    # sqlite only: how long a writer waits for the file lock
    busy_timeout_ms: int = 5000


class SecuritySettings(BaseModel):
    secret_key: str = Field(default="change-me", min_length=8)
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7


class BillingSettings(BaseModel):
    currency: str = "BDT"
    welcome_bonus: int = Field(default=10, ge=0)
    generation_cost: int = Field(default=3, ge=0)
    min_recharge: int = Field(default=50, ge=1)
    payment_number: str = "01540-013418"
    payment_channel: str = "bKash Personal"


class GenerationSettings(BaseModel):
    api_key: Optional[str] = None
    image_model: str = "gemini-2.5-flash-image"
    analysis_model: str = "gemini-3-flash-preview"
    assistant_model: str = "gemini-3-flash-preview"
    crop_width: int = Field(default=800, ge=64)
    jpeg_quality: int = Field(default=95, ge=1, le=100)


class GallerySettings(BaseModel):
    max_images: int = Field(default=500, ge=1)


class ChatSettings(BaseModel):
    max_attachment_bytes: int = 2 * 1024 * 1024


class WebSocketSettings(BaseModel):
    heartbeat_interval: int = 30
    timeout: int = 300


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "Passport Photo Studio"
    api_prefix: str = "/api"

    database: DatabaseSettings = DatabaseSettings()
    security: SecuritySettings = SecuritySettings()
    billing: BillingSettings = BillingSettings()
    generation: GenerationSettings = GenerationSettings()
    gallery: GallerySettings = GallerySettings()
    chat: ChatSettings = ChatSettings()
    websocket: WebSocketSettings = WebSocketSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def secret_key(self) -> str:
        return self.security.secret_key

    @property
    def algorithm(self) -> str:
        return self.security.algorithm

    @property
    def access_token_expire_minutes(self) -> int:
        return self.security.access_token_expire_minutes

    @property
    def ws_heartbeat_interval(self) -> int:
        return self.websocket.heartbeat_interval

    @property
    def ws_timeout(self) -> int:
        return self.websocket.timeout


@lru_cache()
def get_settings() -> Settings:
    return Settings()
