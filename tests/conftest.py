import os
from contextlib import ExitStack
from pathlib import Path

import pytest
import vcr

from record_indexer.core.settings import ClientConfig
from record_indexer.search.opensearch_client import get_os_client

CASSETTES = Path(__file__).parent / "cassettes"

# RECORD_FIXTURES=1 re-records cassettes against the cluster configured in SEARCH_HOST
RECORD = os.environ.get("RECORD_FIXTURES") == "1"

# Cassettes are replayed against a placeholder host; only method, path, query and body matter
REPLAY_HOST = "http://localhost:9200"

recorder = vcr.VCR(
    cassette_library_dir=str(CASSETTES),
    record_mode="all" if RECORD else "none",
    match_on=["method", "path", "query", "body"],
    filter_headers=["authorization"],
    decode_compressed_response=True,
)


class Traffic:
    """Requests seen by a cassette: played back when replaying, captured when recording."""

    def __init__(self, cassette):
        self.cassette = cassette

    def _seen(self):
        for i, (request, _) in enumerate(self.cassette.data):
            times = 1 if RECORD else self.cassette.play_counts[i]
            for _ in range(times):
                yield request

    @property
    def requests(self):
        return [(r.method, r.path) for r in self._seen()]

    def count(self, method: str, path: str) -> int:
        return sum(1 for r in self._seen() if r.method == method and r.path == path)


@pytest.fixture
def search_service():
    """Factory: activate cassettes/<name>.yaml and return its traffic."""
    with ExitStack() as stack:
        def start(name: str) -> Traffic:
            if RECORD:
                from record_indexer.core.logging_setup import configure_logging

                configure_logging("DEBUG")
                # "all" keeps previously loaded interactions, start from a clean file
                (CASSETTES / f"{name}.yaml").unlink(missing_ok=True)
            cassette = stack.enter_context(recorder.use_cassette(f"{name}.yaml"))
            return Traffic(cassette)

        yield start


@pytest.fixture
def client():
    """Client for the cassette: the real cluster when recording, a placeholder host otherwise."""
    if RECORD:
        config = ClientConfig.from_settings()
        return get_os_client(config.model_copy(update={"max_retries": 0}))
    return get_os_client(ClientConfig(host=REPLAY_HOST, max_retries=0, timeout=5))
