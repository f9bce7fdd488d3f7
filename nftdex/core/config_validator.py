# /nftdex/core/config_validator.py
# Run at startup to validate configuration before any traffic is accepted.
import re

from nftdex.core.config import Settings, settings as default_settings
from nftdex.core.logger import log

PRIVATE_KEY_RE = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")
ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def validate(settings: Settings | None = None):
    settings = settings or default_settings
    log.info("--- CONFIG VALIDATION START ---")
    errors = []

    key = settings.executor_key
    if not key:
        errors.append("Missing required configuration: EXECUTOR_PRIVATE_KEY")
    elif not PRIVATE_KEY_RE.match(key):
        errors.append("EXECUTOR_PRIVATE_KEY is not a 32-byte hex string")

    if not settings.RPC_URL:
        errors.append("Missing required configuration: RPC_URL")
    elif not settings.RPC_URL.startswith(("http://", "https://")):
        errors.append(f"RPC_URL must be an http(s) endpoint, got {settings.RPC_URL!r}")

    for var in ("NFT_CONTRACT_ADDRESS", "PAIR_CONTRACT_ADDRESS", "PAIR_FACTORY_ADDRESS"):
        value = getattr(settings, var)
        if value and not ADDRESS_RE.match(value):
            errors.append(f"{var} is not a valid address: {value!r}")

    if settings.TX_CONFIRMATIONS < 1:
        errors.append("TX_CONFIRMATIONS must be at least 1")

    if errors:
        for error in errors:
            log.critical(error)
        raise ValueError("System configuration is incomplete. Halting.")

    log.info("--- CONFIG VALIDATION PASSED ---")


if __name__ == "__main__":
    validate()
