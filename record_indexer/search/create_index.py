import logging
from typing import List
from opensearchpy import OpenSearch
from opensearchpy.exceptions import TransportError

from record_indexer.core.errors import ServiceError
from .opensearch_client import get_os_client, INDEX_NAME

logger = logging.getLogger(__name__)

ID_FIELD = "objectID"


def build_index_body(searchable_attributes: List[str]) -> dict:
    """
    Index body for a record collection.

    The identifier is an exact-match keyword; every searchable attribute is
    full-text. Anything else in a record is mapped dynamically.
    """
    properties = {ID_FIELD: {"type": "keyword"}}
    for attr in searchable_attributes:
        properties[attr] = {"type": "text"}
    return {
        "settings": {
            "index": {
                "number_of_shards": 1,
                "number_of_replicas": 0,
            }
        },
        "mappings": {"properties": properties},
    }


def create_index(client: OpenSearch, index_name: str, searchable_attributes: List[str], recreate: bool = False):
    """
    Make sure an index exists with the given searchable attributes.

    Args:
        client: OpenSearch client
        index_name: Index to create
        searchable_attributes: Fields to map as full-text
        recreate: Drop an existing index first (dev only, loses data)

    Returns:
        True if the index was created, False if it already existed

    Raises:
        ServiceError: If the service rejects any of the calls
    """
    try:
        if client.indices.exists(index=index_name):
            if not recreate:
                logger.info("Index %s already exists", index_name)
                return False
            logger.info("Deleting existing index %s", index_name)
            client.indices.delete(index=index_name)

        client.indices.create(index=index_name, body=build_index_body(searchable_attributes))
    except TransportError as e:
        raise ServiceError.from_transport_error(e, f"create index {index_name}") from e

    logger.info("Created index %s (searchable: %s)", index_name, ", ".join(searchable_attributes))
    return True


def delete_index(client: OpenSearch, index_name: str):
    """
    Delete an index; a missing index is not an error.

    Returns:
        True if the index was deleted, False if it did not exist
    """
    try:
        resp = client.indices.delete(index=index_name, ignore=[404])
    except TransportError as e:
        raise ServiceError.from_transport_error(e, f"delete index {index_name}") from e

    # an ignored 404 comes back as the error body instead of {"acknowledged": true}
    if not resp or resp.get("status") == 404:
        logger.info("Index %s does not exist, nothing to delete", index_name)
        return False
    logger.info("Deleted index %s", index_name)
    return True


if __name__ == "__main__":
    from record_indexer.core.logging_setup import configure_logging

    configure_logging()
    create_index(get_os_client(), INDEX_NAME, ["name"])
