"""
Card record models.

Card records are read-only projections consumed by the table engine. The
record shape depends on the view: catalog views list card definitions shared
by every owner, collection views list a user's owned copies with
copy-specific fields. Both share CardBase.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar


class CardKind(str, Enum):
    """Discriminator for card record variants."""

    CATALOG = "catalog"
    COLLECTION = "collection"


@dataclass(frozen=True, slots=True)
class Player:
    first_name: str = ""
    last_name: str = ""
    display_name: str | None = None

    @property
    def name(self) -> str:
        """Display name, falling back to "First Last"."""
        if self.display_name:
            return self.display_name
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True, slots=True)
class Team:
    team_id: int | None = None
    name: str = ""
    abbreviation: str = ""
    primary_color: str | None = None
    secondary_color: str | None = None


@dataclass(frozen=True, slots=True)
class PlayerTeam:
    """One player/team pairing on a card. Combo cards carry several."""

    player: Player = field(default_factory=Player)
    team: Team = field(default_factory=Team)


@dataclass(frozen=True, slots=True)
class Series:
    name: str = ""
    slug: str = ""
    set_name: str = ""
    year: int | None = None
    production_code: str = ""


@dataclass(frozen=True, slots=True)
class CardColor:
    """Parallel/variant descriptor."""

    name: str = ""
    hex_color: str | None = None


@dataclass(frozen=True, slots=True)
class CardBase:
    """
    Fields shared by every card record.

    Attributes:
        id: Catalog card id or user card id, depending on the view
        card_number: Number within the series; may contain letters ("1A")
        player_teams: Player/team pairings, in print order
        series: Series the card belongs to
        color: Parallel color, None for base cards
        print_run: Serial-numbered denominator, None for unnumbered cards
    """

    kind: ClassVar[CardKind]

    id: int | str
    card_number: str = ""
    player_teams: tuple[PlayerTeam, ...] = ()
    series: Series = field(default_factory=Series)
    color: CardColor | None = None
    print_run: int | None = None
    is_rookie: bool = False
    is_autograph: bool = False
    is_relic: bool = False
    is_short_print: bool = False
    notes: str = ""

    @property
    def player_names(self) -> list[str]:
        """Non-empty player display names in print order."""
        return [pt.player.name for pt in self.player_teams if pt.player.name]

    @property
    def player_display(self) -> str:
        """All player names joined for display and sorting."""
        return " / ".join(self.player_names)

    @property
    def team_names(self) -> list[str]:
        """Distinct non-empty team names in print order."""
        names: list[str] = []
        for pt in self.player_teams:
            if pt.team.name and pt.team.name not in names:
                names.append(pt.team.name)
        return names

    @property
    def team_display(self) -> str:
        return " / ".join(self.team_names)

    @property
    def team_ids(self) -> set[int]:
        return {pt.team.team_id for pt in self.player_teams if pt.team.team_id is not None}

    @property
    def series_name(self) -> str:
        return self.series.name

    @property
    def color_name(self) -> str:
        return self.color.name if self.color else ""

    @property
    def print_run_display(self) -> str:
        """Print run as "/99" for numbered cards, empty otherwise."""
        return f"/{self.print_run}" if self.print_run else ""

    def attribute_codes(self) -> list[str]:
        """Short attribute codes in canonical order: RC, AUTO, RELIC, SP."""
        codes = []
        if self.is_rookie:
            codes.append("RC")
        if self.is_autograph:
            codes.append("AUTO")
        if self.is_relic:
            codes.append("RELIC")
        if self.is_short_print:
            codes.append("SP")
        return codes


@dataclass(frozen=True, slots=True)
class CatalogCard(CardBase):
    """
    A card definition as shown in catalog views.

    owned_count is how many copies the signed-in user owns; 0 means the card
    is not owned and must never be styled as owned.
    """

    kind: ClassVar[CardKind] = CardKind.CATALOG

    owned_count: int = 0
    sort_order: int | None = None

    @property
    def is_owned(self) -> bool:
        return self.owned_count > 0


@dataclass(frozen=True, slots=True)
class CollectionCard(CardBase):
    """A user's owned copy of a card, as shown in collection views."""

    kind: ClassVar[CardKind] = CardKind.COLLECTION

    card_id: int | None = None
    serial_number: int | None = None
    purchase_price: float | None = None
    estimated_value: float | None = None
    current_value: float | None = None
    location_name: str = ""
    grade: float | None = None
    grading_agency_name: str = ""
    grading_agency_abbr: str = ""
    is_favorite: bool = False
    aftermarket_autograph: bool = False
    date_added: datetime | None = None
    photo_count: int = 0
    random_code: str = ""

    @property
    def serial_display(self) -> str:
        """Serial and print run as "45/99", "45" or "/99", empty when neither is known."""
        if self.serial_number is not None and self.print_run:
            return f"{self.serial_number}/{self.print_run}"
        if self.serial_number is not None:
            return str(self.serial_number)
        return self.print_run_display

    @property
    def grade_display(self) -> str:
        """Grade prefixed with the agency abbreviation, e.g. "PSA 10"."""
        if self.grade is None:
            return ""
        grade = f"{self.grade:g}"
        if self.grading_agency_abbr:
            return f"{self.grading_agency_abbr} {grade}"
        return grade


CardRecord = CatalogCard | CollectionCard
