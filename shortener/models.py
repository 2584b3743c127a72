from sqlalchemy import Column, Integer, String, DateTime
from shortener.database import Base


class Link(Base):
    __tablename__ = "links"

    id = Column(Integer, primary_key=True, autoincrement=True)
    short_code = Column(String(64), unique=True, index=True, nullable=False)
    original_url = Column(String(2048), nullable=False)
    owner_user_id = Column(String(255), index=True, nullable=False)
    external_account_id = Column(String(255), nullable=True)
    clicks = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False)
    last_clicked_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Link {self.short_code} -> {self.original_url[:50]}>"


class Account(Base):
    """Внешний OAuth-аккаунт пользователя (заполняется провайдером аутентификации)."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), index=True, nullable=False)
    provider_id = Column(String(255), nullable=False)
    account_id = Column(String(255), nullable=False)
