"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from web3 import Web3


class Settings(BaseSettings):
    """Indexer settings loaded from environment variables."""

    # Blockchain node
    rpc_url: str = Field(..., min_length=1, description="Node HTTP RPC endpoint")
    factory_address: str = Field(
        ..., description="GoalFactory contract emitting GoalCreated events"
    )
    start_block: int = Field(
        default=0, ge=0, description="First block to scan when no checkpoint exists"
    )

    # Polling
    poll_interval_ms: int = Field(
        default=12000, ge=100, description="Interval between indexing cycles (ms)"
    )
    rpc_timeout: float = Field(
        default=30.0, gt=0, description="Timeout for a single node call (seconds)"
    )
    rpc_max_concurrent: int = Field(
        default=8, ge=1, description="Maximum concurrent node calls"
    )
    log_chunk_size: int = Field(
        default=2000, ge=1, description="Maximum blocks per eth_getLogs request"
    )

    # Storage
    max_events: int = Field(
        default=1000, ge=1, description="Activity feed retention cap"
    )
    state_path: str = "state.json"

    # HTTP API
    host: str = "0.0.0.0"
    port: int = Field(default=8081, ge=1, le=65535)
    cors_origin: str = "*"

    # Logging
    log_level: str = "INFO"
    log_file: str = "logs/indexer.log"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("factory_address")
    @classmethod
    def validate_factory_address(cls, v: str) -> str:
        """Validate factory address and return its checksummed form."""
        v = v.strip()
        if not v.startswith("0x") or len(v) != 42:
            raise ValueError(
                f"Invalid factory address: {v}. "
                "Must start with 0x and be 42 characters long."
            )
        try:
            int(v[2:], 16)
        except ValueError as exc:
            raise ValueError(f"Invalid factory address format: {v}") from exc
        return Web3.to_checksum_address(v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level name."""
        return v.upper()

    @property
    def poll_interval_seconds(self) -> float:
        """Polling interval in seconds."""
        return self.poll_interval_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """
    Build settings from the environment once per process.

    Raises:
        pydantic.ValidationError: If RPC_URL or FACTORY_ADDRESS is missing
            or invalid
    """
    return Settings()
