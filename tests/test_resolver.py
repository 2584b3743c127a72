from concurrent.futures import ThreadPoolExecutor

import pytest

from shortener.database import Base, create_db_engine, create_session_factory
from shortener.errors import NotFound
from shortener.models import Link
from shortener.resolver import LinkResolver
from shortener.store import LinkStore


def clicks_by_code(session_factory):
    with session_factory() as db:
        return {link.short_code: link.clicks for link in db.query(Link).all()}


def test_resolve_counts_click(store, resolver, session_factory):
    store.insert("user-1", "demo", "https://example.com/a")

    assert resolver.resolve("demo") == "https://example.com/a"

    with session_factory() as db:
        link = db.query(Link).filter_by(short_code="demo").one()
    assert link.clicks == 1
    assert link.last_clicked_at is not None


def test_unknown_code_changes_nothing(store, resolver, session_factory):
    store.insert("user-1", "demo", "https://example.com/a")
    store.insert("user-1", "other", "https://example.com/b")
    resolver.resolve("other")
    before = clicks_by_code(session_factory)

    with pytest.raises(NotFound):
        resolver.resolve("missing")
    with pytest.raises(NotFound):
        resolver.resolve("DEMO")

    assert clicks_by_code(session_factory) == before


def test_concurrent_resolution_loses_no_clicks(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path}/links.db")
    Base.metadata.create_all(bind=engine)
    session_factory = create_session_factory(engine)
    store = LinkStore(session_factory)
    resolver = LinkResolver(store)
    store.insert("user-1", "hot", "https://example.com/hot")
    hits = 40

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: resolver.resolve("hot"), range(hits)))

    assert results == ["https://example.com/hot"] * hits
    assert clicks_by_code(session_factory) == {"hot": hits}
    engine.dispose()
