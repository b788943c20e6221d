import logging
from typing import Any, Dict, List, Optional
from opensearchpy import OpenSearch
from opensearchpy.exceptions import TransportError

from record_indexer.core.errors import ServiceError

logger = logging.getLogger(__name__)


def build_query(query: str, fields: Optional[List[str]] = None, size: int = 10) -> Dict[str, Any]:
    """
    Full-text query body. Without fields the index's default fields are searched.
    """
    multi_match: Dict[str, Any] = {
        "query": query,
        "type": "best_fields",
        "operator": "or"
    }
    if fields:
        multi_match["fields"] = fields
    return {
        "size": size,
        "query": {"multi_match": multi_match}
    }


def search_records(
    client: OpenSearch,
    index_name: str,
    query: str,
    fields: Optional[List[str]] = None,
    size: int = 10
) -> List[Dict[str, Any]]:
    """
    Search one index and return the matching records in score order.

    Args:
        client: OpenSearch client
        index_name: Index to search
        query: Query text
        fields: Fields to match against (all searchable fields when None)
        size: Max number of hits

    Returns:
        The stored records (hit _source) for each hit

    Raises:
        ServiceError: If the search request fails
    """
    try:
        res = client.search(index=index_name, body=build_query(query, fields, size))
    except TransportError as e:
        raise ServiceError.from_transport_error(e, f"search {index_name}") from e

    hits = res["hits"]["hits"]
    logger.info("Search %r on %s: %d hit(s)", query, index_name, len(hits))
    return [h["_source"] for h in hits]
