import logging
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from .config import DATA_BANK_PATH, DB_URL, SEED_CATALOG

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if DB_URL.startswith("sqlite") else {}
engine = create_engine(DB_URL, connect_args=connect_args, future=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


class Base(DeclarativeBase):
    pass


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    from . import models  # noqa: F401 - registers tables on Base.metadata
    from .data.cards import DataBankError, load_data_bank
    from .services import card_registry

    Base.metadata.create_all(bind=engine)

    if not SEED_CATALOG:
        logger.info("Catalog seeding disabled")
        return

    try:
        bank = load_data_bank(DATA_BANK_PATH)
    except DataBankError:
        if DATA_BANK_PATH.exists():
            raise
        logger.warning("Data bank %s not found, catalog left unchanged", DATA_BANK_PATH)
        return

    with SessionLocal() as session:
        units, upgrades = card_registry.sync_cards(session, bank)
        session.commit()

    logger.info(
        "Catalog seeded from %s with %d unit(s) and %d upgrade(s)",
        DATA_BANK_PATH,
        units,
        upgrades,
    )
