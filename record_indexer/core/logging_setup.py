import logging
from record_indexer.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = None):
    level = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # urllib3 is chatty at DEBUG; keep it at WARNING unless asked for
    if level != "DEBUG":
        logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("opensearch").setLevel(level)
