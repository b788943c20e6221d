from opensearchpy import OpenSearch, RequestsHttpConnection
from record_indexer.core.settings import settings, ClientConfig

def get_os_client(config: ClientConfig = None) -> OpenSearch:
    config = config or ClientConfig.from_settings()
    return OpenSearch(
        hosts=[config.host],
        http_auth=config.http_auth,
        verify_certs=config.verify_certs,
        connection_class=RequestsHttpConnection,
        timeout=config.timeout,
        max_retries=config.max_retries,
        retry_on_timeout=True,
    )

INDEX_NAME = settings.SEARCH_INDEX
