import logging
from typing import Any, Dict, Mapping, Optional
from opensearchpy import OpenSearch
from opensearchpy.exceptions import TransportError

from record_indexer.core.errors import InvalidRecordError, ServiceError
from record_indexer.search.create_index import ID_FIELD
from .waiter import TaskHandle, wait_for_task

logger = logging.getLogger(__name__)


def record_id(record: Mapping[str, Any]) -> str:
    """
    Extract the identifier used to address a record.

    Raises:
        InvalidRecordError: If the record is not a mapping or has no usable objectID
    """
    if not isinstance(record, Mapping):
        raise InvalidRecordError(f"Record must be a mapping, got {type(record).__name__}")
    if ID_FIELD not in record:
        raise InvalidRecordError(f"Record is missing the '{ID_FIELD}' field")
    value = record[ID_FIELD]
    # bool is an int subclass but never a sensible id
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise InvalidRecordError(f"'{ID_FIELD}' must be a string or int, got {type(value).__name__}")
    value = str(value)
    if not value.strip():
        raise InvalidRecordError(f"'{ID_FIELD}' must not be empty")
    return value


def submit_record(client: OpenSearch, index_name: str, record: Mapping[str, Any]) -> TaskHandle:
    """
    Add or overwrite one record in an index.

    The record is validated before anything is sent. Writing an existing
    objectID replaces the stored record.

    Args:
        client: OpenSearch client
        index_name: Target index
        record: Field -> value mapping with an objectID

    Returns:
        TaskHandle to pass to wait_for_task

    Raises:
        InvalidRecordError: Record rejected locally, nothing was sent
        ServiceError: The service rejected or failed the write
    """
    object_id = record_id(record)
    body: Dict[str, Any] = dict(record)
    body[ID_FIELD] = object_id

    try:
        resp = client.index(index=index_name, id=object_id, body=body)
    except TransportError as e:
        raise ServiceError.from_transport_error(e, f"index {object_id}") from e

    if "_seq_no" not in resp:
        raise ServiceError(f"index {object_id}: response has no sequence number", error_type="bad_response")

    handle = TaskHandle(
        index_name=index_name,
        object_id=object_id,
        seq_no=resp["_seq_no"],
        primary_term=resp.get("_primary_term", 1),
        version=resp.get("_version", 1),
        result=resp.get("result", "created"),
    )
    logger.info("Submitted %s to %s (%s, task %s)", object_id, index_name, handle.result, handle.task_id)
    return handle


def index_record(
    client: OpenSearch,
    index_name: str,
    record: Mapping[str, Any],
    max_retries: Optional[int] = None
) -> TaskHandle:
    """Submit a record and block until it is searchable (budget defaults to WAIT_MAX_RETRIES)."""
    handle = submit_record(client, index_name, record)
    wait_for_task(client, handle, max_retries=max_retries)
    return handle


def run_demo():
    from record_indexer.search.create_index import create_index
    from record_indexer.search.opensearch_client import get_os_client, INDEX_NAME
    from record_indexer.search.query import search_records

    client = get_os_client()
    try:
        create_index(client, INDEX_NAME, ["name"])
        index_record(client, INDEX_NAME, {ID_FIELD: "object-1", "name": "test record"})
        hits = search_records(client, INDEX_NAME, "test")
    except ServiceError as e:
        logger.error("Demo failed: %s", e.to_dict())
        raise

    for hit in hits:
        logger.info("Hit: %s", hit)


if __name__ == "__main__":
    from record_indexer.core.logging_setup import configure_logging

    configure_logging()
    run_demo()
