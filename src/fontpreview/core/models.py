"""Pydantic models for type-safe data structures."""

from typing import ClassVar

from pydantic import BaseModel, Field, field_validator

from .config import MAX_PIXEL_SIZE, MIN_PIXEL_SIZE
from .exceptions import EmptyTextError, InvalidPixelSizeError, TextTooLongError


class RenderRequest(BaseModel):
    """Request to render literal text with a registered font face."""

    render_family: str = Field(..., min_length=1, description="Registered render family")
    weight: int = Field(400, ge=100, le=900, description="Requested font weight")
    style: str = Field("normal", description="Requested font style")
    pixel_size: int = Field(48, description="Font size in pixels")
    text: str = Field(..., description="Text to render")

    MAX_TEXT_LENGTH: ClassVar[int] = 1000

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        if not v or not v.strip():
            raise EmptyTextError()
        if len(v) > cls.MAX_TEXT_LENGTH:
            raise TextTooLongError(cls.MAX_TEXT_LENGTH)
        return v

    @field_validator("pixel_size")
    @classmethod
    def validate_pixel_size(cls, v: int) -> int:
        if not MIN_PIXEL_SIZE <= v <= MAX_PIXEL_SIZE:
            raise InvalidPixelSizeError(v, MIN_PIXEL_SIZE, MAX_PIXEL_SIZE)
        return v

    @field_validator("style")
    @classmethod
    def validate_style(cls, v: str) -> str:
        style = v.lower()
        if style not in {"normal", "italic", "oblique"}:
            raise ValueError(f"Unsupported font style: {v}")
        return style

    @property
    def lines(self) -> list[str]:
        return self.text.strip("\n").split("\n")
