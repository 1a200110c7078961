"""Configuration management with environment variable support."""

import os
import secrets
from dataclasses import dataclass, field


def _env_flag(name: str, default: str = "false") -> bool:
    """Read a boolean environment variable."""
    return os.getenv(name, default).lower() == "true"


COLOR_SCHEMES = ("light", "dark")


def _normalise_color_scheme(value: str) -> str:
    """Lower-case a color scheme name, falling back to light for unknown ones."""
    scheme = value.strip().lower()
    return scheme if scheme in COLOR_SCHEMES else "light"


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = field(default_factory=lambda: _env_flag("RATE_LIMIT_ENABLED", "true"))
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "60"))
    )


@dataclass(frozen=True)
class SecurityConfig:
    """Security configuration."""

    secret_key: str = field(
        default_factory=lambda: os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
    )


@dataclass(frozen=True)
class GameConfig:
    """Table presentation options. The rules themselves are fixed."""

    # Hide the dealer's second card until the player stands
    hide_hole_card: bool = field(default_factory=lambda: _env_flag("HIDE_HOLE_CARD"))
    # Seconds between dealer cards during a staged reveal
    reveal_delay: float = field(
        default_factory=lambda: float(os.getenv("REVEAL_DELAY", "1.0"))
    )
    default_color_scheme: str = field(
        default_factory=lambda: os.getenv("COLOR_SCHEME", "light")
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "default_color_scheme", _normalise_color_scheme(self.default_color_scheme)
        )


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: _env_flag("DEBUG"))
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    session_ttl: int = 3600  # Session timeout in seconds
    session_cleanup_interval: float = field(
        default_factory=lambda: float(os.getenv("SESSION_CLEANUP_INTERVAL", "300"))
    )

    game: GameConfig = field(default_factory=GameConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)


# Global configuration instance
config = AppConfig()
