"""
Runtime Settings (FastAPI Official Pattern)

Environment driven configuration, varies per deployment.
Reference: https://fastapi.tiangolo.com/advanced/settings/
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from domains.gallery.core.constants import MAX_UPLOAD_SIZE, UPLOADS_DIR_NAME


class Settings(BaseSettings):
    """Runtime configuration for the Gallery service."""

    app_name: str = "Gallery API"

    host: str = Field(
        "0.0.0.0",
        validation_alias=AliasChoices("GALLERY_HOST", "HOST"),
    )
    port: int = Field(
        3000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("GALLERY_PORT", "PORT"),
    )
    static_root: Path = Field(
        Path("public"),
        description="Directory served for GET/HEAD requests; uploads live beneath it.",
        validation_alias=AliasChoices("GALLERY_STATIC_ROOT"),
    )
    max_upload_size: int = Field(
        MAX_UPLOAD_SIZE,
        ge=1,
        validation_alias=AliasChoices("GALLERY_MAX_UPLOAD_SIZE"),
    )

    # Object storage (remote backend is used only when a bucket is configured)
    s3_bucket: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("GALLERY_S3_BUCKET", "S3_BUCKET"),
    )
    aws_region: str = Field(
        "us-east-1",
        validation_alias=AliasChoices("GALLERY_AWS_REGION", "AWS_REGION"),
    )
    public_base_url: Optional[str] = Field(
        None,
        description="Base URL used to build object locations, e.g. a CDN domain.",
        validation_alias=AliasChoices("GALLERY_PUBLIC_BASE_URL", "PUBLIC_BASE_URL"),
    )
    s3_object_acl: Optional[str] = Field(
        None,
        description="Canned ACL applied to stored objects, e.g. 'public-read'.",
        validation_alias=AliasChoices("GALLERY_S3_OBJECT_ACL", "S3_OBJECT_ACL"),
    )

    cors_allow_origins: tuple[str, ...] = Field(
        ("*",),
        validation_alias=AliasChoices("GALLERY_CORS_ALLOW_ORIGINS"),
    )

    model_config = SettingsConfigDict(
        env_prefix="GALLERY_",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
        populate_by_name=True,
    )

    @field_validator("s3_bucket", "public_base_url", "s3_object_acl")
    @classmethod
    def _blank_as_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        trimmed = value.strip()
        return trimmed or None

    @property
    def upload_dir(self) -> Path:
        return self.static_root / UPLOADS_DIR_NAME


@lru_cache
def get_settings() -> Settings:
    """Return cached Settings instance (FastAPI pattern)."""
    return Settings()
