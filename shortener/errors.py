from fastapi import status


class ShortenerError(Exception):
    """Базовая ошибка сервиса; сообщение отдается клиенту как есть."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(ShortenerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class Unauthorized(ShortenerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class NotFound(ShortenerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Link not found"


class SlugTaken(ShortenerError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "This custom slug is already taken"


class AllocationExhausted(ShortenerError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to generate unique short code"


class ShortCodeConflict(Exception):
    """Вставка отклонена ограничением уникальности short_code."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"short code already exists: {short_code}")
