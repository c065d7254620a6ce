"""
Application Configuration
Uses Pydantic Settings for environment-based configuration
"""

from enum import Enum

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "Figure Catalog API"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")
    DEBUG: bool = Field(default=False)
    API_V1_STR: str = "/api/v1"

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # CORS
    # Allow str because it can be a comma-separated string in .env
    CORS_ORIGINS: str | list[str] = Field(default=["http://localhost:3000"])

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_ECHO: bool = False

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Reviews
    MAX_REVIEW_IMAGES: int = 5

    # Notifications
    MAX_NOTIFICATIONS: int = 100

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v


# Create global settings instance

load_dotenv()
settings = Settings()  # type: ignore[call-arg]


class UserRole(str, Enum):
    """User roles. Anonymous visitors have no role (no user row)."""

    USER = "USER"
    ADMIN = "ADMIN"
    SUPERADMIN = "SUPERADMIN"


ADMIN_ROLES: frozenset[UserRole] = frozenset({UserRole.ADMIN, UserRole.SUPERADMIN})


class ModerationStatus(str, Enum):
    """
    Moderation states shared by figures, brands, lines, series and characters.

    Rejection reverts to PENDING or deletes the row; there is no REJECTED state.
    """

    PENDING = "PENDING"
    APPROVED = "APPROVED"


class VisibilityScope(str, Enum):
    """Requested listing scope. ALL only takes effect for admins."""

    DEFAULT = "default"
    ALL = "all"


class EntityKind(str, Enum):
    """The five independently moderated content kinds"""

    FIGURE = "figure"
    BRAND = "brand"
    LINE = "line"
    SERIES = "series"
    CHARACTER = "character"


class CollectionStatus(str, Enum):
    """Collection entry states (mutually exclusive)"""

    WISHLIST = "WISHLIST"
    PREORDER = "PREORDER"
    OWNED = "OWNED"


class Currency(str, Enum):
    """Currencies a figure price can originally be quoted in"""

    MXN = "MXN"
    USD = "USD"
    YEN = "YEN"


class NotificationType(str, Enum):
    """Notification type constants"""

    FIGURE_RELEASED = "FIGURE_RELEASED"


class ConfigKey(str, Enum):
    """Known system configuration keys"""

    SHOW_PENDING_FIGURES = "SHOW_PENDING_FIGURES"


# Keys whose values must be JSON booleans
BOOLEAN_CONFIG_KEYS: frozenset[ConfigKey] = frozenset({ConfigKey.SHOW_PENDING_FIGURES})

# Calendar bucket for preorders with neither a preorder month nor a release date
TBA_MONTH = "TBA"
