from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from retinue import db, models
from retinue.data import cards as card_data


@pytest.fixture
def memory_db(monkeypatch):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    session_factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    monkeypatch.setattr(db, "engine", engine)
    monkeypatch.setattr(db, "SessionLocal", session_factory)
    monkeypatch.setattr(db, "SEED_CATALOG", True)
    monkeypatch.setattr(db, "DATA_BANK_PATH", card_data.DEFAULT_DATA_BANK_PATH)
    return session_factory


def _counts(session_factory) -> tuple[int, int]:
    with session_factory() as session:
        units = session.execute(select(func.count(models.UnitCardRow.id))).scalar_one()
        upgrades = session.execute(select(func.count(models.UpgradeCardRow.id))).scalar_one()
    return units, upgrades


def test_init_db_seeds_catalog_idempotently(memory_db) -> None:
    bank = card_data.load_data_bank()

    db.init_db()
    db.init_db()

    assert _counts(memory_db) == (len(bank["units"]), len(bank["upgrades"]))


def test_init_db_skips_seeding_when_disabled(memory_db, monkeypatch) -> None:
    monkeypatch.setattr(db, "SEED_CATALOG", False)

    db.init_db()

    assert _counts(memory_db) == (0, 0)


def test_init_db_warns_about_missing_data_bank(memory_db, monkeypatch, tmp_path, caplog) -> None:
    monkeypatch.setattr(db, "DATA_BANK_PATH", tmp_path / "absent.json")

    with caplog.at_level(logging.WARNING, logger="retinue.db"):
        db.init_db()

    assert _counts(memory_db) == (0, 0)
    assert any("not found" in message for message in caplog.messages)


def test_init_db_raises_for_malformed_data_bank(memory_db, monkeypatch, tmp_path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text('{"units": [{"name": "Nameless Points"}]}', encoding="utf-8")
    monkeypatch.setattr(db, "DATA_BANK_PATH", broken)

    with pytest.raises(card_data.DataBankError):
        db.init_db()


def test_get_db_closes_session(monkeypatch) -> None:
    closed: list[bool] = []

    class _Session:
        def close(self) -> None:
            closed.append(True)

    monkeypatch.setattr(db, "SessionLocal", _Session)

    generator = db.get_db()
    session = next(generator)
    assert isinstance(session, _Session)
    with pytest.raises(StopIteration):
        next(generator)

    assert closed == [True]
