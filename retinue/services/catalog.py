"""Card catalogs the roster resolver looks names up in."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Protocol, Sequence, runtime_checkable

from sqlalchemy import select
from sqlalchemy.orm import Session

from .. import models
from ..data.cards import (
    UnitCard,
    UpgradeCard,
    normalize_name,
    parse_data_bank,
)

logger = logging.getLogger(__name__)

NameKey = Callable[[str | None], str]


@runtime_checkable
class Catalog(Protocol):
    def lookup_unit(
        self,
        name: str,
        *,
        title: str | None = None,
        faction: str | None = None,
    ) -> UnitCard | None:
        ...

    def lookup_upgrade(self, name: str) -> UpgradeCard | None:
        ...


def exact_name(text: str | None) -> str:
    return text or ""


def name_key(normalize: bool) -> NameKey:
    return normalize_name if normalize else exact_name


def select_unit(
    candidates: Iterable[UnitCard],
    name: str,
    title: str | None = None,
    faction: str | None = None,
    key: NameKey = exact_name,
) -> UnitCard | None:
    """Pick the first card matching ``name`` and the given disambiguators.

    A title narrows to cards carrying that title. A faction narrows to cards
    of that faction or without one. Candidates keep catalog order. Names are
    compared through ``key``, exactly by default.
    """

    wanted_name = key(name)
    if not wanted_name:
        return None
    wanted_title = key(title) if title else None
    for card in candidates:
        if key(card.name) != wanted_name:
            continue
        if wanted_title is not None and key(card.title) != wanted_title:
            continue
        if not _faction_matches(card, faction, key):
            continue
        return card
    return None


def _faction_matches(card: UnitCard, faction: str | None, key: NameKey = exact_name) -> bool:
    if not faction:
        return True
    return not card.faction or key(card.faction) == key(faction)


class MemoryCatalog:
    """Immutable catalog over cards held in memory.

    Lookups match names exactly unless built with ``normalize=True``, which
    ignores case, accents and spacing.
    """

    def __init__(
        self,
        units: Sequence[UnitCard],
        upgrades: Sequence[UpgradeCard],
        normalize: bool = False,
    ) -> None:
        self._units = tuple(units)
        self._upgrades = tuple(upgrades)
        self._key = name_key(normalize)
        units_by_name: dict[str, list[UnitCard]] = {}
        for card in self._units:
            units_by_name.setdefault(self._key(card.name), []).append(card)
        self._units_by_name = {key: tuple(value) for key, value in units_by_name.items()}
        upgrades_by_name: dict[str, UpgradeCard] = {}
        for card in self._upgrades:
            upgrades_by_name.setdefault(self._key(card.name), card)
        self._upgrades_by_name = upgrades_by_name

    @property
    def units(self) -> tuple[UnitCard, ...]:
        return self._units

    @property
    def upgrades(self) -> tuple[UpgradeCard, ...]:
        return self._upgrades

    def lookup_unit(
        self,
        name: str,
        *,
        title: str | None = None,
        faction: str | None = None,
    ) -> UnitCard | None:
        candidates = self._units_by_name.get(self._key(name), ())
        return select_unit(candidates, name, title=title, faction=faction, key=self._key)

    def lookup_upgrade(self, name: str) -> UpgradeCard | None:
        wanted = self._key(name)
        if not wanted:
            return None
        return self._upgrades_by_name.get(wanted)

    def units_for_faction(self, faction: str | None) -> list[UnitCard]:
        return [card for card in self._units if _faction_matches(card, faction, self._key)]


class CatalogBuilder:
    def __init__(self) -> None:
        self._units: list[UnitCard] = []
        self._upgrades: list[UpgradeCard] = []

    def add_data(self, bank: dict[str, Any]) -> "CatalogBuilder":
        units, upgrades = parse_data_bank(bank)
        self._units.extend(units)
        self._upgrades.extend(upgrades)
        return self

    def add_unit(self, card: UnitCard) -> "CatalogBuilder":
        self._units.append(card)
        return self

    def add_upgrade(self, card: UpgradeCard) -> "CatalogBuilder":
        self._upgrades.append(card)
        return self

    def build(self, normalize: bool = False) -> MemoryCatalog:
        return MemoryCatalog(self._units, self._upgrades, normalize=normalize)


_UNIT_CACHE_KEY = "_catalog_unit_cards"
_UPGRADE_CACHE_KEY = "_catalog_upgrade_cards"


def _session_info(session: Session) -> dict:
    info = getattr(session, "info", None)
    if info is None:
        info = {}
        setattr(session, "info", info)
    return info


def clear_session_cache(session: Session) -> None:
    info = _session_info(session)
    info.pop(_UNIT_CACHE_KEY, None)
    info.pop(_UPGRADE_CACHE_KEY, None)


class SqlCatalog:
    """Catalog backed by the ``unit_cards`` and ``upgrade_cards`` tables.

    Rows are read once per session and cached in ``session.info``; call
    :func:`clear_session_cache` after changing card rows in the same session.
    Names match exactly unless ``normalize=True``.
    """

    def __init__(self, session: Session, normalize: bool = False) -> None:
        self.session = session
        self._key = name_key(normalize)

    def _unit_cards(self) -> tuple[UnitCard, ...]:
        info = _session_info(self.session)
        cached = info.get(_UNIT_CACHE_KEY)
        if cached is None:
            rows = (
                self.session.execute(
                    select(models.UnitCardRow).order_by(
                        models.UnitCardRow.position, models.UnitCardRow.id
                    )
                )
                .scalars()
                .all()
            )
            cached = tuple(row.to_card() for row in rows)
            info[_UNIT_CACHE_KEY] = cached
        return cached

    def _upgrade_cards(self) -> tuple[UpgradeCard, ...]:
        info = _session_info(self.session)
        cached = info.get(_UPGRADE_CACHE_KEY)
        if cached is None:
            rows = (
                self.session.execute(
                    select(models.UpgradeCardRow).order_by(
                        models.UpgradeCardRow.position, models.UpgradeCardRow.id
                    )
                )
                .scalars()
                .all()
            )
            cached = tuple(row.to_card() for row in rows)
            info[_UPGRADE_CACHE_KEY] = cached
        return cached

    def lookup_unit(
        self,
        name: str,
        *,
        title: str | None = None,
        faction: str | None = None,
    ) -> UnitCard | None:
        card = select_unit(
            self._unit_cards(), name, title=title, faction=faction, key=self._key
        )
        if card is None:
            logger.debug("No unit card for name=%r title=%r faction=%r", name, title, faction)
        return card

    def lookup_upgrade(self, name: str) -> UpgradeCard | None:
        wanted = self._key(name)
        if not wanted:
            return None
        for card in self._upgrade_cards():
            if self._key(card.name) == wanted:
                return card
        logger.debug("No upgrade card for name=%r", name)
        return None

    def list_units(self, faction: str | None = None) -> list[UnitCard]:
        return [
            card for card in self._unit_cards() if _faction_matches(card, faction, self._key)
        ]

    def list_upgrades(self, slot: str | None = None) -> list[UpgradeCard]:
        if not slot:
            return list(self._upgrade_cards())
        # Slots compare case-insensitively.
        wanted = normalize_name(slot)
        return [card for card in self._upgrade_cards() if normalize_name(card.slot) == wanted]
