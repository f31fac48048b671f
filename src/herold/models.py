"""Data classes for family tree projects and the structures derived from them."""

from dataclasses import dataclass, field


@dataclass
class PersonDetails:
    birth_date: str | None = None  # ISO format YYYY-MM-DD where it could be normalised
    death_date: str | None = None
    cultural_background: str | None = None
    titles: list[str] = field(default_factory=list)
    locations: list[str] = field(default_factory=list)


@dataclass
class Person:
    id: str
    name: str
    gender: str  # male, female, other
    generation: float  # fractional values place blended lineages between bands
    parents: list[str] = field(default_factory=list)
    children: list[str] = field(default_factory=list)
    partner: str | None = None
    status: str = "unknown"  # living, deceased, unknown
    notes: str = ""
    details: PersonDetails = field(default_factory=PersonDetails)


@dataclass
class Relationship:
    relationship_type: str  # marriage, parent-child, sibling
    person1_id: str
    person2_id: str
    status: str | None = None  # married, divorced, widowed (marriages only)
    start_date: str | None = None
    end_date: str | None = None
    notes: str | None = None


@dataclass
class FontConfig:
    family: str = "Dancing Script"
    fallbacks: list[str] = field(
        default_factory=lambda: ["Lucida Handwriting", "Apple Chancery", "cursive", "serif"]
    )
    title_size: int = 32
    names_size: int = 16
    relationships_size: int = 10


@dataclass
class ThemeConfig:
    name: str = "parchment"
    background: str = "#f4f1e8"
    text: str = "#5a4a3a"
    lines: str = "#8b7355"
    accent: str = "#d4c4a8"
    show_border: bool = True
    show_corner_decorations: bool = True
    show_shadows: bool = True


@dataclass
class LayoutSettings:
    algorithm: str = "family-groups-separated"
    spacing: str = "comfortable"  # tight, comfortable, spacious
    show_generation_labels: bool = True
    show_marriage_symbols: bool = True
    center_main_person: bool = True


@dataclass
class ProjectSettings:
    font: FontConfig = field(default_factory=FontConfig)
    orientation: str = "portrait"  # portrait, landscape
    theme: ThemeConfig = field(default_factory=ThemeConfig)
    layout: LayoutSettings = field(default_factory=LayoutSettings)


@dataclass
class ProjectSnapshot:
    id: str
    name: str
    main_person_id: str
    members: dict[str, Person]
    description: str = ""
    relationships: list[Relationship] = field(default_factory=list)
    settings: ProjectSettings = field(default_factory=ProjectSettings)


# ============================================================================
# Derived layout structures (rebuilt on every render)
# ============================================================================


@dataclass
class Placement:
    person: Person
    x: float
    y: float
    text_width: float


@dataclass
class GenerationBand:
    generation: float
    members: list[Person]
    y: float
    leftmost_x: float = 0.0
    rightmost_x: float = 0.0


@dataclass
class FamilyUnit:
    anchor: Person
    partner: Person | None = None
    children: list[Person] = field(default_factory=list)

    @property
    def members(self) -> list[Person]:
        head = [self.anchor] if self.partner is None else [self.anchor, self.partner]
        return head + self.children


@dataclass
class Connection:
    x1: float
    y1: float
    x2: float
    y2: float
    kind: str = "parent-child"
    source_id: str = ""
    target_id: str = ""

    @property
    def mid_y(self) -> float:
        return (self.y1 + self.y2) / 2


@dataclass
class MarriageConnection:
    person1: Placement
    person2: Placement
    symbol_x: float
    symbol_y: float
    kind: str = "marriage"


@dataclass
class Dimensions:
    width: float
    height: float
    offset_x: float = 0.0  # shift that centres the content box on the canvas


@dataclass
class LayoutResult:
    people: list[Placement]
    connections: list[Connection]
    marriages: list[MarriageConnection]
    dimensions: Dimensions
    generations: list[GenerationBand]
