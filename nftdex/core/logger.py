# /nftdex/core/logger.py
import logging
import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars
import sentry_sdk
from prometheus_client import Counter
import json
import hmac
import hashlib
import os

# --- Prometheus Metrics ---
TX_SUBMITTED = Counter("nftdex_transactions_submitted_total", "Transactions broadcast to the node", ["label"])
TX_REJECTED = Counter("nftdex_transactions_rejected_total", "Transactions the node refused to accept", ["label"])
TX_REVERTED = Counter("nftdex_transactions_reverted_total", "Transactions mined with a failed status")
TX_CONFIRMATION_TIMEOUTS = Counter("nftdex_confirmation_timeouts_total", "Transactions not confirmed within the wait bound")
NONCE_RESETS = Counter("nftdex_nonce_resets_total", "Operator-triggered nonce resets")
ERRORS_LOGGED = Counter("nftdex_errors_logged_total", "Total number of errors logged", ["level"])


class AuditTrail:
    """Structlog processor that signs each event and appends it to an audit file.

    Each line is ``<json payload>|<hmac-sha256 hex>``. The payload is serialized
    with sorted keys so the signature can be recomputed by a verifier.
    """

    def __init__(self, path: str, signing_key: bytes):
        self.path = path
        self.signing_key = signing_key

    def sign(self, payload: str) -> str:
        return hmac.new(self.signing_key, payload.encode(), hashlib.sha256).hexdigest()

    def __call__(self, logger, method_name: str, event_dict: dict) -> dict:
        payload = json.dumps(event_dict, sort_keys=True, default=str)
        sig = self.sign(payload)
        try:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(payload + "|" + sig + "\n")
        except FileNotFoundError:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(payload + "|" + sig + "\n")
        event_dict["signature"] = sig
        return event_dict


def count_errors(logger, method_name: str, event_dict: dict) -> dict:
    if method_name in ("error", "critical", "exception"):
        ERRORS_LOGGED.labels(method_name).inc()
    return event_dict


def configure_logging(
    level: str = "INFO",
    audit_path: str | None = None,
    signing_key: str | None = None,
    sentry_dsn: str | None = None,
):
    if sentry_dsn:
        sentry_sdk.init(dsn=sentry_dsn, traces_sample_rate=1.0)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        count_errors,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if audit_path:
        key = signing_key.encode() if signing_key else b"insecure"
        processors.append(AuditTrail(audit_path, key))
    processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def configure_from_settings(settings):
    configure_logging(
        level=settings.LOG_LEVEL,
        audit_path=settings.AUDIT_LOG_PATH,
        signing_key=settings.LOG_SIGNING_KEY.get_secret_value() if settings.LOG_SIGNING_KEY else None,
        sentry_dsn=settings.SENTRY_DSN.get_secret_value() if settings.SENTRY_DSN else None,
    )


def get_logger(name: str):
    return structlog.get_logger(name)


def bind_request(request_id: str, method: str, path: str):
    clear_contextvars()
    bind_contextvars(request_id=request_id, method=method, path=path)


configure_logging()
log = get_logger("NFTDEX.System")
