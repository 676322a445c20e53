from __future__ import annotations

from typing import Any, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from .. import models
from ..data import cards as card_data


def _unit_key(name: str | None, title: str | None) -> tuple[str, str]:
    return card_data.normalize_name(name), card_data.normalize_name(title)


def sync_cards(session: Session, bank: dict[str, Any]) -> tuple[int, int]:
    """Upsert the cards of a data bank into the catalog tables.

    Units are keyed by (name, title) and upgrades by name, both compared
    through ``normalize_name``. Rows missing from the bank are kept. The
    ``position`` column follows data bank order. Returns the number of unit
    and upgrade cards written.
    """

    unit_cards, upgrade_cards = card_data.parse_data_bank(bank)

    existing_units: dict[tuple[str, str], models.UnitCardRow] = {}
    unit_rows: Iterable[models.UnitCardRow] = (
        session.execute(select(models.UnitCardRow)).scalars().all()
    )
    for row in unit_rows:
        existing_units.setdefault(_unit_key(row.name, row.title), row)

    for position, card in enumerate(unit_cards):
        key = _unit_key(card.name, card.title)
        row = existing_units.get(key)
        if row is None:
            row = models.UnitCardRow()
            session.add(row)
            existing_units[key] = row
        row.apply_card(card)
        row.position = position

    existing_upgrades: dict[str, models.UpgradeCardRow] = {}
    upgrade_rows: Iterable[models.UpgradeCardRow] = (
        session.execute(select(models.UpgradeCardRow)).scalars().all()
    )
    for row in upgrade_rows:
        existing_upgrades.setdefault(card_data.normalize_name(row.name), row)

    for position, card in enumerate(upgrade_cards):
        key = card_data.normalize_name(card.name)
        row = existing_upgrades.get(key)
        if row is None:
            row = models.UpgradeCardRow()
            session.add(row)
            existing_upgrades[key] = row
        row.apply_card(card)
        row.position = position

    session.flush()
    return len(unit_cards), len(upgrade_cards)
