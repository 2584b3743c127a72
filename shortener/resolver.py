import logging

from shortener.errors import NotFound

logger = logging.getLogger(__name__)


class LinkResolver:
    def __init__(self, store):
        self.store = store

    def resolve(self, short_code: str) -> str:
        """Засчитывает переход по коду и возвращает оригинальный URL."""
        original_url = self.store.increment_and_fetch(short_code)
        if original_url is None:
            logger.debug("No link found for short code %s", short_code)
            raise NotFound()
        logger.debug("Resolved %s -> %s", short_code, original_url)
        return original_url
