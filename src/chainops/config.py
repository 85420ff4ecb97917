"""Application configuration using pydantic-settings.

The unnamed default signer is read from PRIVATE_KEY; stored wallets never
depend on it.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Database
    # ======================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/chainops.db",
        description="Wallet store database URL",
    )

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=True, description="Enable debug mode")

    # ======================
    # Default signer
    # ======================
    private_key: Optional[SecretStr] = Field(
        default=None, description="Hex private key for the unnamed default signer"
    )

    # ======================
    # Networks
    # ======================
    default_network: str = Field(default="ethereum", description="Network used when none is given")
    swap_network: str = Field(default="bsc-testnet", description="Default network for router swaps")
    swap_deadline_seconds: int = Field(
        default=1200, description="Seconds a submitted swap stays valid (20 minutes)"
    )

    # ======================
    # Chain RPC Endpoints (empty = built-in default)
    # ======================
    ethereum_rpc_url: str = Field(default="", description="Ethereum RPC URL")
    sepolia_rpc_url: str = Field(default="", description="Sepolia RPC URL")
    bsc_rpc_url: str = Field(default="", description="BSC RPC URL")
    bsc_testnet_rpc_url: str = Field(default="", description="BSC testnet RPC URL")
    polygon_rpc_url: str = Field(default="", description="Polygon RPC URL")
    arbitrum_rpc_url: str = Field(default="", description="Arbitrum One RPC URL")
    base_rpc_url: str = Field(default="", description="Base RPC URL")
    optimism_rpc_url: str = Field(default="", description="Optimism RPC URL")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def has_default_signer(self) -> bool:
        """Check if a default signer credential is configured."""
        return bool(self.private_key and self.private_key.get_secret_value())

    def get_rpc_url(self, network: str) -> str:
        """Get the RPC override for a canonical network key."""
        rpc_map = {
            "ethereum": self.ethereum_rpc_url,
            "sepolia": self.sepolia_rpc_url,
            "bsc": self.bsc_rpc_url,
            "bsc-testnet": self.bsc_testnet_rpc_url,
            "polygon": self.polygon_rpc_url,
            "arbitrum": self.arbitrum_rpc_url,
            "base": self.base_rpc_url,
            "optimism": self.optimism_rpc_url,
        }
        return rpc_map.get(network.lower(), "")

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "api_host": self.api_host,
            "api_port": self.api_port,
            "database_url": self._redact_url(self.database_url),
            "private_key": "***" if self.has_default_signer else "(not set)",
            "default_network": self.default_network,
            "swap": {
                "network": self.swap_network,
                "deadline_seconds": self.swap_deadline_seconds,
            },
        }

    @staticmethod
    def _redact_url(url: str) -> str:
        """Redact sensitive parts of database URL."""
        if "://" in url and "@" in url:
            proto, rest = url.split("://", 1)
            if "@" in rest:
                creds, host = rest.rsplit("@", 1)
                if ":" in creds:
                    user, _ = creds.split(":", 1)
                    return f"{proto}://{user}:***@{host}"
        return url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
