from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Text, UniqueConstraint, event
from sqlalchemy.orm import Mapped, mapped_column

from .data.cards import UnitCard, UpgradeCard
from .db import Base


KEYWORD_SEPARATOR = ","


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)


def touch_timestamps(mapper, connection, target) -> None:  # pragma: no cover - SQLAlchemy hook
    now = datetime.utcnow()
    if getattr(target, "created_at", None) is None:
        target.created_at = now
    target.updated_at = now


def join_keywords(keywords) -> Optional[str]:
    items = [str(item).strip() for item in keywords or () if str(item).strip()]
    return KEYWORD_SEPARATOR.join(items) if items else None


def split_keywords(text: str | None) -> tuple[str, ...]:
    if not text:
        return ()
    return tuple(item.strip() for item in text.split(KEYWORD_SEPARATOR) if item.strip())


class UnitCardRow(TimestampMixin, Base):
    __tablename__ = "unit_cards"
    __table_args__ = (UniqueConstraint("name", "title", name="uq_unit_cards_name_title"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    title: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rank: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    faction: Mapped[Optional[str]] = mapped_column(String(80), nullable=True, index=True)
    keywords: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    minis: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def to_card(self) -> UnitCard:
        return UnitCard(
            name=self.name,
            points=int(self.points or 0),
            title=self.title,
            rank=self.rank,
            faction=self.faction,
            keywords=split_keywords(self.keywords),
            text=self.text,
            minis=max(int(self.minis or 1), 1),
        )

    def apply_card(self, card: UnitCard) -> None:
        self.name = card.name
        self.title = card.title
        self.points = card.points
        self.rank = card.rank
        self.faction = card.faction
        self.keywords = join_keywords(card.keywords)
        self.text = card.text
        self.minis = card.minis


class UpgradeCardRow(TimestampMixin, Base):
    __tablename__ = "upgrade_cards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    slot: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, index=True)
    keywords: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_unique: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def to_card(self) -> UpgradeCard:
        return UpgradeCard(
            name=self.name,
            points=int(self.points or 0),
            slot=self.slot,
            keywords=split_keywords(self.keywords),
            text=self.text,
            unique=bool(self.is_unique),
        )

    def apply_card(self, card: UpgradeCard) -> None:
        self.name = card.name
        self.points = card.points
        self.slot = card.slot
        self.keywords = join_keywords(card.keywords)
        self.text = card.text
        self.is_unique = card.unique


for cls in [UnitCardRow, UpgradeCardRow]:
    event.listen(cls, "before_insert", touch_timestamps)
    event.listen(cls, "before_update", touch_timestamps)
