import logging
import os
import random
import time
from typing import Callable, TypeVar

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from utils.errors import ServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSACTION_MAX_RETRIES = int(os.getenv("TRANSACTION_MAX_RETRIES", "3"))
TRANSACTION_RETRY_BASE_DELAY = float(os.getenv("TRANSACTION_RETRY_BASE_DELAY", "0.1"))


def run_in_transaction(
    db: Session,
    work: Callable[[Session], T],
    max_retries: int = TRANSACTION_MAX_RETRIES,
    base_delay: float = TRANSACTION_RETRY_BASE_DELAY,
) -> T:
    """Run `work(db)` and commit it as one transaction.

    Store conflicts (OperationalError: serialization failures, deadlocks, lock
    timeouts) roll back and re-run `work` with exponential backoff. Service
    errors and anything unexpected roll back and propagate immediately. When
    the retries are exhausted the caller sees TRANSACTION_CONFLICT.
    """
    for attempt in range(max_retries + 1):
        try:
            result = work(db)
            db.commit()
            return result
        except OperationalError as e:
            db.rollback()
            if attempt == max_retries:
                logger.error(f"Transaction failed after {max_retries + 1} attempts: {e}")
                raise ServiceError("TRANSACTION_CONFLICT") from e
            sleep_time = base_delay * (2 ** attempt) + random.uniform(0, base_delay)
            logger.warning(f"Transaction attempt {attempt + 1} failed, retrying in {sleep_time:.3f}s: {e}")
            time.sleep(sleep_time)
        except Exception:
            db.rollback()
            raise
    raise ServiceError("TRANSACTION_CONFLICT")
