# app/client/config.py
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Connection settings of the client service layer (``CLIENT_*`` env vars)."""

    model_config = SettingsConfigDict(env_prefix="CLIENT_", env_ignore_empty=True, extra="ignore")

    API_URL: str = Field(default="http://localhost:5000/api")
    SOCKET_URL: str = Field(default="ws://localhost:5000/ws")
    REQUEST_TIMEOUT: float = Field(default=10.0)
    RECONNECT_ATTEMPTS: int = Field(default=3)
    RECONNECT_DELAY: float = Field(default=1.0)
    TYPING_TIMEOUT: float = Field(default=1.0)
