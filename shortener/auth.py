from typing import Optional, Protocol

from fastapi import Request

from shortener.errors import Unauthorized


class IdentityProvider(Protocol):
    """Определяет id текущего пользователя по запросу либо возвращает None."""

    def user_id(self, request: Request) -> Optional[str]:
        ...


class TrustedHeaderIdentity:
    """Берет id пользователя из заголовка, выставленного проксирующим сервером аутентификации."""

    def __init__(self, header: str = "X-User-Id"):
        self.header = header

    def user_id(self, request: Request) -> Optional[str]:
        value = request.headers.get(self.header, "").strip()
        return value or None


def require_user(request: Request) -> str:
    user_id = request.app.state.identity.user_id(request)
    if not user_id:
        raise Unauthorized()
    return user_id
