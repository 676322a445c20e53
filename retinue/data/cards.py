from __future__ import annotations

import json
import re
import unicodedata
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence


RANKS: tuple[str, ...] = (
    "Commander",
    "Operative",
    "Corps",
    "Special Forces",
    "Support",
    "Heavy",
)

DEFAULT_DATA_BANK_PATH = Path(__file__).resolve().parent / "databank.json"


class DataBankError(Exception):
    """Raised when a data bank document cannot be turned into cards."""


@dataclass(frozen=True)
class UnitCard:
    name: str
    points: int
    title: str | None = None
    rank: str | None = None
    faction: str | None = None
    keywords: tuple[str, ...] = field(default_factory=tuple)
    text: str | None = None
    minis: int = 1

    def display_name(self) -> str:
        if self.title:
            return f"{self.name}: {self.title}"
        return self.name

    def has_keyword(self, keyword: str) -> bool:
        wanted = normalize_name(keyword)
        return any(normalize_name(entry) == wanted for entry in self.keywords)


@dataclass(frozen=True)
class UpgradeCard:
    name: str
    points: int
    slot: str | None = None
    keywords: tuple[str, ...] = field(default_factory=tuple)
    text: str | None = None
    unique: bool = False


def normalize_name(text: str | None) -> str:
    """Comparable form of a card name: no diacritics, casefolded, single spaces."""

    if not text:
        return ""
    value = unicodedata.normalize("NFKD", str(text))
    value = "".join(char for char in value if not unicodedata.combining(char))
    value = value.replace("_", " ")
    value = re.sub(r"\s+", " ", value.strip())
    return value.casefold()


def _optional_text(entry: Mapping[str, Any], key: str) -> str | None:
    raw = entry.get(key)
    if raw is None:
        return None
    value = str(raw).strip()
    return value or None


def _required_name(entry: Mapping[str, Any], kind: str, index: int) -> str:
    name = _optional_text(entry, "name")
    if not name:
        raise DataBankError(f"{kind} entry #{index} has no name")
    return name


def _points(entry: Mapping[str, Any], kind: str, index: int) -> int:
    raw = entry.get("points")
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise DataBankError(f"{kind} entry #{index} has invalid points: {raw!r}")
    if isinstance(raw, float) and not raw.is_integer():
        raise DataBankError(f"{kind} entry #{index} has fractional points: {raw!r}")
    return int(raw)


def _keywords(entry: Mapping[str, Any]) -> tuple[str, ...]:
    raw = entry.get("keywords")
    if raw is None:
        return ()
    if isinstance(raw, str):
        items: Iterable[Any] = raw.split(",")
    elif isinstance(raw, Sequence):
        items = raw
    else:
        return ()
    keywords: list[str] = []
    for item in items:
        text = str(item).strip()
        if text:
            keywords.append(text)
    return tuple(keywords)


def unit_card_from_dict(entry: Mapping[str, Any], index: int = 0) -> UnitCard:
    if not isinstance(entry, Mapping):
        raise DataBankError(f"unit entry #{index} is not an object")
    rank = _optional_text(entry, "rank")
    if rank is not None and rank not in RANKS:
        raise DataBankError(f"unit entry #{index} has unknown rank: {rank!r}")
    minis_raw = entry.get("minis", 1)
    try:
        minis = max(int(minis_raw), 1)
    except (TypeError, ValueError):
        minis = 1
    return UnitCard(
        name=_required_name(entry, "unit", index),
        points=_points(entry, "unit", index),
        title=_optional_text(entry, "title"),
        rank=rank,
        faction=_optional_text(entry, "faction"),
        keywords=_keywords(entry),
        text=_optional_text(entry, "text"),
        minis=minis,
    )


def upgrade_card_from_dict(entry: Mapping[str, Any], index: int = 0) -> UpgradeCard:
    if not isinstance(entry, Mapping):
        raise DataBankError(f"upgrade entry #{index} is not an object")
    return UpgradeCard(
        name=_required_name(entry, "upgrade", index),
        points=_points(entry, "upgrade", index),
        slot=_optional_text(entry, "slot"),
        keywords=_keywords(entry),
        text=_optional_text(entry, "text"),
        unique=bool(entry.get("unique", False)),
    )


def parse_data_bank(payload: Any) -> tuple[list[UnitCard], list[UpgradeCard]]:
    if not isinstance(payload, Mapping):
        raise DataBankError("data bank must be a JSON object")
    units_raw = payload.get("units") or []
    upgrades_raw = payload.get("upgrades") or []
    if not isinstance(units_raw, list) or not isinstance(upgrades_raw, list):
        raise DataBankError("data bank 'units' and 'upgrades' must be lists")
    units = [unit_card_from_dict(entry, index) for index, entry in enumerate(units_raw)]
    upgrades = [
        upgrade_card_from_dict(entry, index) for index, entry in enumerate(upgrades_raw)
    ]
    return units, upgrades


def load_data_bank(path: Path | str | None = None) -> dict[str, Any]:
    source = Path(path) if path is not None else DEFAULT_DATA_BANK_PATH
    try:
        with source.open("r", encoding="utf-8") as fp:
            data = json.load(fp)
    except json.JSONDecodeError as exc:
        raise DataBankError(f"data bank {source} is not valid JSON") from exc
    except OSError as exc:
        raise DataBankError(f"data bank {source} cannot be read") from exc
    if not isinstance(data, dict):
        raise DataBankError(f"data bank {source} must contain a JSON object")
    return data


def unit_to_dict(card: UnitCard) -> dict:
    return {
        "name": card.name,
        "title": card.title,
        "display_name": card.display_name(),
        "points": card.points,
        "rank": card.rank,
        "faction": card.faction,
        "keywords": list(card.keywords),
        "text": card.text,
        "minis": card.minis,
    }


def upgrade_to_dict(card: UpgradeCard) -> dict:
    return {
        "name": card.name,
        "points": card.points,
        "slot": card.slot,
        "keywords": list(card.keywords),
        "text": card.text,
        "unique": card.unique,
    }
