# toolbox/config.py
try:
    from dotenv import load_dotenv

    load_dotenv()  # loads .env for uvicorn/dev runs
except Exception:
    pass
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application settings loaded from env/.env via pydantic-settings."""

    # Storage
    data_dir: str = Field(default="data")
    storage_file: str = Field(default="local_storage.json")
    layout_key: str = Field(default="toolbox-layout")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)

    # Desktop grid
    viewport_width: int = Field(default=1920)
    viewport_height: int = Field(default=1080)
    grid_unit: int = Field(default=20)
    item_size: int = Field(default=100)
    spacing: int = Field(default=120)
    min_icon_size: int = Field(default=60)
    max_icon_size: int = Field(default=150)
    header_band: int = Field(default=80)
    bottom_margin: int = Field(default=20)

    # Notifications
    toast_history: int = Field(default=50)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("port")
    @classmethod
    def _port_positive(cls, v: int) -> int:
        if v <= 0 or v > 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("grid_unit", "spacing", "item_size")
    @classmethod
    def _grid_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Grid values must be positive")
        return v

    @model_validator(mode="after")
    def _size_range(self) -> "Settings":
        if self.min_icon_size > self.max_icon_size:
            raise ValueError("min_icon_size must not exceed max_icon_size")
        return self

    @property
    def storage_path(self) -> Path:
        return Path(self.data_dir) / self.storage_file


settings = Settings()
