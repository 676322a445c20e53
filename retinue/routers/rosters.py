from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from .. import schemas
from ..services import roster as roster_service
from ..services.catalog import Catalog
from .catalog import get_catalog, unit_card_view, upgrade_card_view

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rosters", tags=["rosters"])


def _unit_view(unit: roster_service.Unit) -> schemas.UnitView:
    return schemas.UnitView(
        card=unit_card_view(unit.card),
        upgrades=[upgrade_card_view(card) for card in unit.upgrades],
        loadout=(
            [upgrade_card_view(card) for card in unit.loadout]
            if unit.loadout is not None
            else None
        ),
        points=unit.points,
    )


def _roster_view(resolution: roster_service.Resolution) -> schemas.RosterView:
    roster = resolution.roster
    return schemas.RosterView(
        name=roster.name,
        faction=roster.faction,
        points=roster.points,
        units=[_unit_view(unit) for unit in roster.units],
        unresolved=[
            schemas.UnresolvedNameView(kind=entry.kind, name=entry.name, unit=entry.unit)
            for entry in resolution.unresolved
        ],
    )


@router.post("/resolve", response_model=schemas.RosterView)
def resolve_roster(
    record: schemas.RosterRecord,
    catalog: Catalog = Depends(get_catalog),
):
    resolution = roster_service.resolve_with_diagnostics(record, catalog)
    if resolution.unresolved:
        logger.info(
            "Roster %r resolved with %d unresolved name(s)",
            record.name,
            len(resolution.unresolved),
        )
    return _roster_view(resolution)


@router.post("/normalize")
def normalize_roster(
    record: schemas.RosterRecord,
    catalog: Catalog = Depends(get_catalog),
):
    resolved = roster_service.resolve(record, catalog)
    normalized = roster_service.to_record(resolved)
    return JSONResponse(normalized.model_dump(mode="json", exclude_none=True))
