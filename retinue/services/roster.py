"""Resolution of roster records against a card catalog."""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from ..data.cards import UnitCard, UpgradeCard
from ..schemas import RosterRecord, UnitRecord
from .catalog import Catalog

logger = logging.getLogger(__name__)

UNRESOLVED_UNIT = "unit"
UNRESOLVED_UPGRADE = "upgrade"
UNRESOLVED_LOADOUT = "loadout"


@dataclass(frozen=True)
class Unit:
    """A resolved unit record: a unit card and its upgrade cards."""

    card: UnitCard
    upgrades: tuple[UpgradeCard, ...] = ()
    loadout: tuple[UpgradeCard, ...] | None = None

    @property
    def points(self) -> int:
        # Loadout is an alternative configuration and is not priced here.
        return self.card.points + sum(upgrade.points for upgrade in self.upgrades)

    def to_record(self) -> UnitRecord:
        return UnitRecord(
            name=self.card.name,
            title=self.card.title,
            upgrades=tuple(upgrade.name for upgrade in self.upgrades),
            loadout=(
                tuple(upgrade.name for upgrade in self.loadout)
                if self.loadout is not None
                else None
            ),
        )


@dataclass(frozen=True)
class Roster:
    """A resolved roster record."""

    name: str
    faction: str | None
    units: tuple[Unit, ...]
    points: int

    @classmethod
    def resolve(cls, record: RosterRecord, catalog: Catalog) -> "Roster":
        return resolve(record, catalog)

    def to_record(self) -> RosterRecord:
        return RosterRecord(
            name=self.name,
            faction=self.faction,
            units=tuple(unit.to_record() for unit in self.units),
        )


@dataclass(frozen=True)
class UnresolvedName:
    kind: str
    name: str
    unit: str | None = None


@dataclass(frozen=True)
class Resolution:
    roster: Roster
    unresolved: tuple[UnresolvedName, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.unresolved


def roster_points(units: Iterable[Unit]) -> int:
    return sum(unit.points for unit in units)


def _resolve_upgrades(
    catalog: Catalog,
    names: Sequence[str] | None,
    kind: str,
    unit_name: str,
    unresolved: list[UnresolvedName],
) -> tuple[UpgradeCard, ...]:
    if not names:
        return ()
    cards: list[UpgradeCard] = []
    for name in names:
        card = catalog.lookup_upgrade(name)
        if card is None:
            logger.debug("Dropping unresolved %s %r of unit %r", kind, name, unit_name)
            unresolved.append(UnresolvedName(kind=kind, name=name, unit=unit_name))
            continue
        cards.append(card)
    return tuple(cards)


def resolve_with_diagnostics(record: RosterRecord, catalog: Catalog) -> Resolution:
    """Resolve ``record`` and report every name that could not be resolved.

    Unresolved unit names skip the whole unit; unresolved upgrade and loadout
    names are dropped from their unit. Nothing is raised for either case.
    """

    units: list[Unit] = []
    unresolved: list[UnresolvedName] = []

    for unit_record in record.units:
        card = catalog.lookup_unit(
            unit_record.name,
            title=unit_record.title,
            faction=record.faction,
        )
        if card is None:
            logger.debug(
                "Skipping unresolved unit %r (title=%r, faction=%r)",
                unit_record.name,
                unit_record.title,
                record.faction,
            )
            unresolved.append(UnresolvedName(kind=UNRESOLVED_UNIT, name=unit_record.name))
            continue
        upgrades = _resolve_upgrades(
            catalog, unit_record.upgrades, UNRESOLVED_UPGRADE, card.name, unresolved
        )
        loadout = _resolve_upgrades(
            catalog, unit_record.loadout, UNRESOLVED_LOADOUT, card.name, unresolved
        )
        units.append(Unit(card=card, upgrades=upgrades, loadout=loadout))

    roster = Roster(
        name=record.name,
        faction=record.faction,
        units=tuple(units),
        points=roster_points(units),
    )
    return Resolution(roster=roster, unresolved=tuple(unresolved))


def resolve(record: RosterRecord, catalog: Catalog) -> Roster:
    return resolve_with_diagnostics(record, catalog).roster


@functools.singledispatch
def to_record(resolved):
    raise TypeError(f"Cannot project {type(resolved).__name__} to a record")


@to_record.register
def _(resolved: Roster) -> RosterRecord:
    return resolved.to_record()


@to_record.register
def _(resolved: Unit) -> UnitRecord:
    return resolved.to_record()
