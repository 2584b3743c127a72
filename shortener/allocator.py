import logging
import random
import re
import string
from typing import Annotated, Optional

from pydantic import AnyUrl, TypeAdapter, UrlConstraints, ValidationError

from shortener.errors import AllocationExhausted, InvalidInput, ShortCodeConflict, SlugTaken

logger = logging.getLogger(__name__)

ALPHABET = string.ascii_letters + string.digits
SLUG_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

absolute_url = TypeAdapter(Annotated[AnyUrl, UrlConstraints(host_required=True)])


def generate_short_code(length: int = 6, rng=random):
    """Генерирует случайный короткий код из латинских букв и цифр."""
    return "".join(rng.choice(ALPHABET) for _ in range(length))


def is_absolute_url(url: str) -> bool:
    if not url or any(ch.isspace() for ch in url):
        return False
    try:
        absolute_url.validate_python(url)
    except ValidationError:
        return False
    return True


class LinkAllocator:
    """Выдает короткие коды и сохраняет новые ссылки.

    Пользовательский slug либо принимается как есть, либо отклоняется.
    Случайный код перебирается не более `max_attempts` раз; конфликт
    при вставке считается такой же коллизией, как и найденный код.
    Если задан `oauth_provider_id`, внешний аккаунт владельца ищется
    уже после проверки входных данных.
    """

    def __init__(self, store, code_length: int = 6, max_attempts: int = 10,
                 min_slug_length: int = 3, rng: Optional[random.Random] = None,
                 oauth_provider_id: Optional[str] = None):
        self.store = store
        self.code_length = code_length
        self.max_attempts = max_attempts
        self.min_slug_length = min_slug_length
        self.oauth_provider_id = oauth_provider_id
        self._rng = rng or random.Random()

    def create(self, owner_user_id: str, original_url: str,
               custom_slug: Optional[str] = None,
               external_account_id: Optional[str] = None):
        self.validate_url(original_url)
        if custom_slug:
            self.validate_slug(custom_slug)

        if external_account_id is None and self.oauth_provider_id:
            external_account_id = self.store.external_account_id(
                owner_user_id, self.oauth_provider_id
            )

        if custom_slug:
            link = self._create_custom(owner_user_id, original_url, custom_slug, external_account_id)
        else:
            link = self._create_random(owner_user_id, original_url, external_account_id)

        logger.info("Created link %s for user %s", link.short_code, owner_user_id)
        return link

    def validate_url(self, original_url: str):
        if not original_url:
            raise InvalidInput("URL is required")
        if not is_absolute_url(original_url):
            raise InvalidInput("Invalid URL")

    def validate_slug(self, custom_slug: str):
        if len(custom_slug) < self.min_slug_length:
            raise InvalidInput(
                f"Custom slug must be at least {self.min_slug_length} characters"
            )
        if not SLUG_PATTERN.match(custom_slug):
            raise InvalidInput(
                "Custom slug can only contain letters, numbers, hyphens, and underscores"
            )

    def _create_custom(self, owner_user_id, original_url, custom_slug, external_account_id):
        if self.store.exists(custom_slug):
            raise SlugTaken()
        try:
            return self.store.insert(owner_user_id, custom_slug, original_url, external_account_id)
        except ShortCodeConflict:
            logger.warning("Custom slug %s was taken concurrently", custom_slug)
            raise SlugTaken() from None

    def _create_random(self, owner_user_id, original_url, external_account_id):
        for attempt in range(1, self.max_attempts + 1):
            short_code = generate_short_code(self.code_length, self._rng)
            if self.store.exists(short_code):
                logger.debug("Short code %s exists (attempt %d)", short_code, attempt)
                continue
            try:
                return self.store.insert(owner_user_id, short_code, original_url, external_account_id)
            except ShortCodeConflict:
                logger.warning("Short code %s collided on insert (attempt %d)", short_code, attempt)

        logger.warning("Gave up allocating a short code after %d attempts", self.max_attempts)
        raise AllocationExhausted()
