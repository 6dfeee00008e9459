# app/utils/retry.py
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError
from tenacity import Retrying, stop_after_attempt, wait_fixed, retry_if_exception_type

from app.utils.logging import get_logger

logger = get_logger(__name__)


def _log_retry(state):
    logger.warning(
        f"Nie udalo sie pobrac polaczenia z puli (proba {state.attempt_number}): "
        f"{state.outcome.exception()}"
    )


def db_retry(attempts: int, delay: float) -> Retrying:
    #stala przerwa miedzy probami, ograniczona liczba prob
    return Retrying(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_fixed(delay),
        retry=retry_if_exception_type((OperationalError, PoolTimeoutError)),
        before_sleep=_log_retry,
    )
