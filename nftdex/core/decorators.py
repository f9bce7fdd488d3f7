# /nftdex/core/decorators.py
# Retry policy for the node connectivity check run at startup.
import logging

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from nftdex.core.errors import ChainIdMismatchError, ConnectivityError
from nftdex.core.logger import get_logger

log = get_logger(__name__)

# A node that is down may come up; one serving the wrong chain will not.
retry_node_check = retry(
    retry=retry_if_exception_type(ConnectivityError) & retry_if_not_exception_type(ChainIdMismatchError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=5),
    before_sleep=before_sleep_log(log, logging.WARNING),
    reraise=True,
)
