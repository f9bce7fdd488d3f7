# /nftdex/core/config.py
from pydantic_settings import BaseSettings
from pydantic import SecretStr


class Settings(BaseSettings):
    # Signing identity. The whole service acts as this one account.
    EXECUTOR_PRIVATE_KEY: SecretStr | None = None

    # Node
    RPC_URL: str = "http://localhost:8545"
    CHAIN_ID: int = 31337
    RPC_TIMEOUT_SECONDS: float = 10.0

    # HTTP server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    API_PREFIX: str = "/api/v1"
    CORS_ORIGIN: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: SecretStr | None = None
    AUDIT_LOG_PATH: str | None = None
    LOG_SIGNING_KEY: SecretStr | None = None

    # Build output of the contracts project
    ARTIFACTS_DIR: str = "../out"

    # Known deployments; anything left empty is discovered at deploy time
    NFT_CONTRACT_ADDRESS: str | None = None
    PAIR_CONTRACT_ADDRESS: str | None = None
    PAIR_FACTORY_ADDRESS: str | None = None

    # Transaction submission
    NONCE_LOCK_REDIS_URL: str | None = None
    NONCE_LOCK_TIMEOUT_SECONDS: int = 30
    TX_CONFIRMATIONS: int = 1
    TX_TIMEOUT_SECONDS: float = 120.0
    TX_POLL_INTERVAL_SECONDS: float = 1.0
    COERCE_DECIMAL_STRINGS: bool = False
    MAX_TRACKED_TRANSACTIONS: int = 1000

    @property
    def executor_key(self) -> str | None:
        if self.EXECUTOR_PRIVATE_KEY is None:
            return None
        return self.EXECUTOR_PRIVATE_KEY.get_secret_value()

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

try:
    settings = Settings()
except Exception as e:
    # Late import to avoid circular dependency only for logging the failure
    from nftdex.core.logger import get_logger
    get_logger("NFTDEX.Config").critical("FAILED_TO_LOAD_SETTINGS", error=str(e))
    raise SystemExit(1)
