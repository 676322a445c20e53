from pydantic import BaseModel, ConfigDict, Field


class UnitRecord(BaseModel):
    """A recorded, unresolved unit: names only, paired with a catalog to resolve."""

    model_config = ConfigDict(frozen=True)

    name: str
    title: str | None = None
    upgrades: tuple[str, ...] | None = None
    loadout: tuple[str, ...] | None = None


class RosterRecord(BaseModel):
    """A recorded army list.

    Omitting ``faction`` marks a custom roster where normal list-building
    rules do not apply (house rules or homebrew).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    faction: str | None = None
    units: tuple[UnitRecord, ...] = ()


class UnitCardView(BaseModel):
    name: str
    title: str | None = None
    display_name: str
    points: int
    rank: str | None = None
    faction: str | None = None
    keywords: list[str] = Field(default_factory=list)
    text: str | None = None
    minis: int = 1


class UpgradeCardView(BaseModel):
    name: str
    points: int
    slot: str | None = None
    keywords: list[str] = Field(default_factory=list)
    text: str | None = None
    unique: bool = False


class UnitView(BaseModel):
    card: UnitCardView
    upgrades: list[UpgradeCardView] = Field(default_factory=list)
    loadout: list[UpgradeCardView] | None = None
    points: int


class UnresolvedNameView(BaseModel):
    kind: str
    name: str
    unit: str | None = None


class RosterView(BaseModel):
    name: str
    faction: str | None = None
    points: int
    units: list[UnitView] = Field(default_factory=list)
    unresolved: list[UnresolvedNameView] = Field(default_factory=list)
