from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import schemas
from ..data import cards as card_data
from ..db import get_db
from ..services.catalog import SqlCatalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["catalog"])


def get_catalog(db: Session = Depends(get_db)) -> SqlCatalog:
    return SqlCatalog(db)


def unit_card_view(card: card_data.UnitCard) -> schemas.UnitCardView:
    return schemas.UnitCardView(**card_data.unit_to_dict(card))


def upgrade_card_view(card: card_data.UpgradeCard) -> schemas.UpgradeCardView:
    return schemas.UpgradeCardView(**card_data.upgrade_to_dict(card))


@router.get("/units", response_model=list[schemas.UnitCardView])
def list_units(
    faction: str | None = None,
    catalog: SqlCatalog = Depends(get_catalog),
):
    return [unit_card_view(card) for card in catalog.list_units(faction)]


@router.get("/units/{name}", response_model=schemas.UnitCardView)
def get_unit(
    name: str,
    title: str | None = None,
    faction: str | None = None,
    catalog: SqlCatalog = Depends(get_catalog),
):
    card = catalog.lookup_unit(name, title=title, faction=faction)
    if card is None:
        logger.info("Unit card not found: name=%r title=%r faction=%r", name, title, faction)
        raise HTTPException(status_code=404, detail=f"Unknown unit: {name}")
    return unit_card_view(card)


@router.get("/upgrades", response_model=list[schemas.UpgradeCardView])
def list_upgrades(
    slot: str | None = None,
    catalog: SqlCatalog = Depends(get_catalog),
):
    return [upgrade_card_view(card) for card in catalog.list_upgrades(slot)]


@router.get("/upgrades/{name}", response_model=schemas.UpgradeCardView)
def get_upgrade(name: str, catalog: SqlCatalog = Depends(get_catalog)):
    card = catalog.lookup_upgrade(name)
    if card is None:
        logger.info("Upgrade card not found: %r", name)
        raise HTTPException(status_code=404, detail=f"Unknown upgrade: {name}")
    return upgrade_card_view(card)
