"""
Completion wait for a single indexing write.

An index call is acknowledged before the record is searchable: the write
only shows up in search after the next refresh. The waiter polls a
non-realtime GET, which reads from the same refreshed view that search
uses, until it returns the written sequence number or newer.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional
from opensearchpy import OpenSearch
from opensearchpy.exceptions import NotFoundError, TransportError

from record_indexer.core.errors import ServiceError, TaskTimeoutError
from record_indexer.core.settings import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskHandle:
    """Tracking handle for one submitted record."""
    index_name: str
    object_id: str
    seq_no: int
    primary_term: int = 1
    version: int = 1
    result: str = "created"

    @property
    def task_id(self) -> str:
        return f"{self.object_id}:{self.primary_term}:{self.seq_no}"

    def __str__(self):
        return self.task_id


def _not_visible_yet(exc: NotFoundError) -> bool:
    # A missing document answers {"found": false}; a missing index answers with an error object
    return isinstance(exc.info, dict) and exc.info.get("found") is False


def backoff_delay(attempt: int, interval: float, max_interval: float) -> float:
    """Linear backoff capped at max_interval."""
    return min(interval * attempt, max_interval)


def wait_for_task(
    client: OpenSearch,
    handle: TaskHandle,
    max_retries: Optional[int] = None,
    timeout: Optional[float] = None,
    interval: Optional[float] = None,
    max_interval: Optional[float] = None
) -> Dict[str, Any]:
    """
    Block until the write behind `handle` is visible to search.

    Args:
        client: OpenSearch client
        handle: Handle returned by submit_record
        max_retries: Max number of polls. None uses WAIT_MAX_RETRIES;
            0 gives up immediately without contacting the service.
        timeout: Optional deadline in seconds from now. A deadline of 0 or
            less is already expired.
        interval: Base sleep between polls (grows linearly per attempt)
        max_interval: Ceiling for the sleep between polls

    Returns:
        The GET response that confirmed the write

    Raises:
        TaskTimeoutError: Budget or deadline exhausted before confirmation
        ServiceError: The service reported a failure (missing index, auth, 5xx)
        ValueError: Negative max_retries, interval or max_interval
    """
    if max_retries is None:
        max_retries = settings.WAIT_MAX_RETRIES
    if max_retries < 0:
        raise ValueError(f"max_retries must be >= 0, got {max_retries}")
    interval = settings.WAIT_INTERVAL if interval is None else interval
    max_interval = settings.WAIT_MAX_INTERVAL if max_interval is None else max_interval
    if interval < 0 or max_interval < 0:
        raise ValueError(f"interval and max_interval must be >= 0, got {interval} and {max_interval}")
    deadline = time.monotonic() + timeout if timeout is not None else None

    attempts = 0
    while attempts < max_retries:
        if deadline is not None and time.monotonic() >= deadline:
            break

        attempts += 1
        try:
            doc = client.get(index=handle.index_name, id=handle.object_id, realtime=False)
        except NotFoundError as e:
            if not _not_visible_yet(e):
                raise ServiceError.from_transport_error(e, f"wait for task {handle.task_id}") from e
            logger.debug("Task %s: not visible yet (attempt %d/%d)", handle.task_id, attempts, max_retries)
        except TransportError as e:
            raise ServiceError.from_transport_error(e, f"wait for task {handle.task_id}") from e
        else:
            seen = doc.get("_seq_no", -1)
            if seen >= handle.seq_no:
                logger.info("Task %s finished after %d attempt(s)", handle.task_id, attempts)
                return doc
            logger.debug("Task %s: visible seq_no %s < %s (attempt %d/%d)",
                         handle.task_id, seen, handle.seq_no, attempts, max_retries)

        if attempts >= max_retries:
            break
        delay = backoff_delay(attempts, interval, max_interval)
        if deadline is not None:
            delay = min(delay, max(deadline - time.monotonic(), 0.0))
        time.sleep(delay)

    raise TaskTimeoutError(
        f"Task {handle.task_id} on {handle.index_name} not finished after {attempts} attempt(s)",
        attempts=attempts,
        handle=handle,
    )
