import logging
from typing import Optional

from fastapi import FastAPI, Depends, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

from shortener.allocator import LinkAllocator
from shortener.auth import IdentityProvider, TrustedHeaderIdentity, require_user
from shortener.config import Settings
from shortener.database import Base, create_db_engine, create_session_factory
from shortener.errors import NotFound, ShortenerError
from shortener.resolver import LinkResolver
from shortener.schemas import (
    DeleteResponse, ErrorResponse, LinkCreate, LinkList, LinkResponse, LinkSummary,
)
from shortener.store import LinkStore

logger = logging.getLogger(__name__)

NOT_FOUND_PAGE = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>Not found</title></head>
<body><h1>404</h1><p>Link not found.</p></body>
</html>"""

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


def get_store(request: Request) -> LinkStore:
    return request.app.state.store


def get_allocator(request: Request) -> LinkAllocator:
    return request.app.state.allocator


def get_resolver(request: Request) -> LinkResolver:
    return request.app.state.resolver


def create_app(settings: Optional[Settings] = None, *,
               store: Optional[LinkStore] = None,
               identity: Optional[IdentityProvider] = None) -> FastAPI:
    """Собирает приложение; хранилище и провайдер идентичности можно подменить."""
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level.upper())

    if store is None:
        engine = create_db_engine(settings.database_url)
        Base.metadata.create_all(bind=engine)
        store = LinkStore(create_session_factory(engine))

    app = FastAPI(
        title="URL Shortener",
        description="Short links with click counting",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url=None,
        openapi_url="/api/openapi.json",
    )
    app.state.settings = settings
    app.state.store = store
    app.state.identity = identity or TrustedHeaderIdentity(settings.user_header)
    app.state.allocator = LinkAllocator(
        store,
        code_length=settings.code_length,
        max_attempts=settings.max_attempts,
        min_slug_length=settings.min_slug_length,
        oauth_provider_id=settings.oauth_provider_id,
    )
    app.state.resolver = LinkResolver(store)

    @app.exception_handler(ShortenerError)
    async def shortener_error_handler(request: Request, exc: ShortenerError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Storage failure on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    @app.get("/api/health")
    def health():
        return {"status": "ok"}

    @app.get("/api/links", response_model=LinkList, responses=ERROR_RESPONSES)
    def list_links(user_id: str = Depends(require_user),
                   store: LinkStore = Depends(get_store)):
        """
        Возвращает ссылки текущего пользователя, новые первыми.
        """
        links = store.list_by_owner(user_id)
        return LinkList(links=[LinkSummary.model_validate(link) for link in links])

    @app.post("/api/links", response_model=LinkResponse,
              status_code=status.HTTP_201_CREATED, responses=ERROR_RESPONSES)
    def create_link(link_data: LinkCreate,
                    user_id: str = Depends(require_user),
                    allocator: LinkAllocator = Depends(get_allocator)):
        """
        Создает короткую ссылку.
        Если передан `customSlug`, используется он.
        Если нет, генерируется случайный код.
        """
        return allocator.create(user_id, link_data.url, custom_slug=link_data.custom_slug)

    @app.delete("/api/links/{link_id}", response_model=DeleteResponse, responses=ERROR_RESPONSES)
    def delete_link(link_id: int,
                    user_id: str = Depends(require_user),
                    store: LinkStore = Depends(get_store)):
        """
        Удаляет ссылку. Чужая и несуществующая ссылка дают одинаковый ответ.
        """
        if not store.delete(link_id, user_id):
            raise NotFound("Link not found or unauthorized")
        logger.info("User %s deleted link %s", user_id, link_id)
        return DeleteResponse()

    @app.get("/{short_code}", response_class=RedirectResponse)
    def redirect_to_original_url(short_code: str,
                                 resolver: LinkResolver = Depends(get_resolver)):
        """
        Перенаправляет пользователя на оригинальный URL.
        """
        try:
            original_url = resolver.resolve(short_code)
        except NotFound:
            return HTMLResponse(NOT_FOUND_PAGE, status_code=status.HTTP_404_NOT_FOUND)
        return RedirectResponse(url=original_url)

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("shortener.main:create_app", factory=True, host="0.0.0.0", port=8000)
