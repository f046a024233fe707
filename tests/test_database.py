"""Tests for engine construction."""

from pathlib import Path

import pytest
from sqlalchemy import text
from sqlalchemy.pool import StaticPool

from lingocards.database import build_engine


@pytest.mark.parametrize("url_suffix", ["", "/{path}"])
def test_sqlite_engines_share_one_connection(tmp_path: Path, url_suffix: str) -> None:
    url = "sqlite://" + url_suffix.format(path=tmp_path / "cards.db")
    engine = build_engine(url)
    try:
        assert isinstance(engine.pool, StaticPool)
        with engine.connect() as connection:
            assert connection.execute(text("PRAGMA foreign_keys")).scalar() == 1
    finally:
        engine.dispose()
