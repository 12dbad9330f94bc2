"""Configuration management using pydantic-settings."""

import fcntl
import os
import secrets
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import dotenv_values, set_key
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from favicon_api.core.exceptions import ConfigurationError

# Hash keys shipped in sample configurations; never safe to keep.
INSECURE_HASH_KEYS = frozenset({"idev", "iowen"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Debugging
    debug_mode: bool = Field(default=False)
    debug_log_file: Path = Field(default=Path("favicon-debug.log"))

    # Cache
    cache_dir: Path = Field(default=Path("/tmp/cache"))
    hash_key: SecretStr = Field(default=SecretStr("idev"))
    expire_seconds: int = Field(
        default=2592000,
        ge=0,
        description="Cache lifetime in seconds. 0 disables caching.",
    )

    # Resolution
    default_icon_path: Path | None = Field(default=None)
    file_map: dict[str, Path] = Field(
        default_factory=dict,
        description="Ordered regex -> local file mapping checked before any fetch.",
    )
    url_api_template: str = Field(
        default=(
            "https://t0.gstatic.com/faviconV2?client=SOCIAL&type=FAVICON"
            "&fallback_opts=TYPE,SIZE,URL&url={url}"
        )
    )
    host_api_template: str = Field(default="https://toolb.cn/favicon/{host}")

    # Outbound HTTP
    connect_timeout: float = Field(default=2.0, gt=0, le=60)
    total_timeout: float = Field(default=5.0, gt=0, le=120)
    max_redirects: int = Field(default=5, ge=0, le=20)
    max_fetch_bytes: int = Field(default=512000, ge=1024)
    manual_redirects: bool = Field(default=True)
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; favicon-api/0.1; +https://github.com/)"
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["json", "text"] = Field(default="json")

    # Where rotate_hash_key() persists a regenerated key
    env_file: Path = Field(default=Path(".env"))

    def get_hash_key(self) -> str:
        """Get hash key value."""
        return self.hash_key.get_secret_value()

    def has_insecure_hash_key(self) -> bool:
        """Check whether the hash key is one of the published defaults."""
        return self.get_hash_key() in INSECURE_HASH_KEYS


def generate_hash_key() -> str:
    """Generate a random 16 character hex key."""
    return secrets.token_hex(8)


def hash_key_from_environment() -> bool:
    """Check whether ``HASH_KEY`` is set in the process environment."""
    return any(name.upper() == "HASH_KEY" for name in os.environ)


def rotate_hash_key(settings: Settings) -> Settings:
    """
    Replace an insecure default hash key with a random one.

    The new key is written to ``settings.env_file`` as ``HASH_KEY`` so later
    processes load it. Concurrent callers serialize on a lock file next to the
    env file; a caller that finds a custom key already written adopts it
    instead of generating another, so every worker ends up with the same key.
    Settings with a custom key are returned unchanged.

    Args:
        settings: Current settings

    Returns:
        Settings carrying the key that should be used from now on.

    Raises:
        ConfigurationError: If the insecure key comes from the process
            environment, which would shadow the persisted key, or if the
            env file cannot be written.
    """
    if not settings.has_insecure_hash_key():
        return settings

    env_file = settings.env_file
    if hash_key_from_environment():
        raise ConfigurationError(
            "HASH_KEY is set to a published default in the environment; "
            "set a random value there instead",
            details={"env_file": str(env_file)},
        )

    lock_path = env_file.with_name(f"{env_file.name}.lock")
    try:
        env_file.parent.mkdir(parents=True, exist_ok=True)
        with open(lock_path, "a") as lock:
            fcntl.flock(lock, fcntl.LOCK_EX)
            try:
                env_file.touch(exist_ok=True)
                stored = dotenv_values(env_file).get("HASH_KEY")
                if stored and stored not in INSECURE_HASH_KEYS:
                    new_key = stored
                else:
                    new_key = generate_hash_key()
                    set_key(str(env_file), "HASH_KEY", new_key, quote_mode="never")
            finally:
                fcntl.flock(lock, fcntl.LOCK_UN)
    except OSError as e:
        raise ConfigurationError(
            f"Failed to persist rotated hash key: {e}",
            details={"env_file": str(env_file)},
        ) from e

    return settings.model_copy(update={"hash_key": SecretStr(new_key)})


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Values are read from ``ENV_FILE`` (default ``.env``), the same file
    ``rotate_hash_key`` writes to.
    """
    bootstrap = Settings()
    return Settings(_env_file=bootstrap.env_file)
