import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError

from shortener.errors import ShortCodeConflict
from shortener.models import Account, Link

logger = logging.getLogger(__name__)

# largest value a signed 64-bit INTEGER column can hold
MAX_ROW_ID = 2 ** 63 - 1


class LinkStore:
    """Хранилище ссылок поверх фабрики сессий SQLAlchemy.

    Каждая операция выполняется в собственной сессии и транзакции.
    Уникальность short_code обеспечивает ограничение в таблице, а не
    проверка в приложении.
    """

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def exists(self, short_code: str) -> bool:
        with self._session_factory() as db:
            found = db.scalar(select(Link.id).where(Link.short_code == short_code).limit(1))
        return found is not None

    def insert(
        self,
        owner_user_id: str,
        short_code: str,
        original_url: str,
        external_account_id: Optional[str] = None,
    ) -> Link:
        db_link = Link(
            short_code=short_code,
            original_url=original_url,
            owner_user_id=owner_user_id,
            external_account_id=external_account_id,
            clicks=0,
            created_at=datetime.now(timezone.utc),
        )
        with self._session_factory() as db:
            db.add(db_link)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                if "short_code" not in str(exc.orig):
                    raise
                raise ShortCodeConflict(short_code) from None
            db.refresh(db_link)
        return db_link

    def increment_and_fetch(self, short_code: str) -> Optional[str]:
        """Атомарно увеличивает счетчик и возвращает оригинальный URL."""
        stmt = (
            update(Link)
            .where(Link.short_code == short_code)
            .values(clicks=Link.clicks + 1, last_clicked_at=datetime.now(timezone.utc))
            .returning(Link.original_url)
            .execution_options(synchronize_session=False)
        )
        with self._session_factory() as db:
            original_url = db.execute(stmt).scalar_one_or_none()
            db.commit()
        return original_url

    def list_by_owner(self, owner_user_id: str) -> List[Link]:
        stmt = (
            select(Link)
            .where(Link.owner_user_id == owner_user_id)
            .order_by(Link.created_at.desc(), Link.id.desc())
        )
        with self._session_factory() as db:
            return list(db.scalars(stmt).all())

    def delete(self, link_id: int, owner_user_id: str) -> bool:
        """Удаляет ссылку, только если она принадлежит пользователю."""
        if not 0 < link_id <= MAX_ROW_ID:
            return False
        stmt = delete(Link).where(Link.id == link_id, Link.owner_user_id == owner_user_id)
        with self._session_factory() as db:
            result = db.execute(stmt.execution_options(synchronize_session=False))
            db.commit()
        return result.rowcount > 0

    def external_account_id(self, user_id: str, provider_id: str) -> Optional[str]:
        stmt = (
            select(Account.account_id)
            .where(Account.user_id == user_id, Account.provider_id == provider_id)
            .limit(1)
        )
        with self._session_factory() as db:
            return db.scalar(stmt)
