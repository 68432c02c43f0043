"""Persisted user settings."""

from pydantic import BaseModel, Field


class AppSettings(BaseModel):
    """The single settings record behind the persistence port."""

    openai_api_key: str | None = Field(
        default=None, description="Credential for AI diagnosis; None means unavailable"
    )

    @property
    def has_api_key(self) -> bool:
        return bool(self.openai_api_key)
