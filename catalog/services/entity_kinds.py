"""
Registry of the moderated content kinds.

The moderation service is written once against this table instead of once per
kind. Each entry names the table, the foreign keys that must point at existing
rows, the columns that may not be cleared, and the listing filters the kind
accepts.
"""

from dataclasses import dataclass, field
from typing import Any

from catalog.config import EntityKind
from catalog.models.brand import Brands
from catalog.models.character import Characters
from catalog.models.figure import Figures
from catalog.models.line import Lines
from catalog.models.series import Series


@dataclass(frozen=True)
class KindSpec:
    kind: EntityKind
    model: Any
    label: str
    path: str
    references: dict[str, Any] = field(default_factory=dict)
    required: frozenset[str] = frozenset({"name"})
    filters: frozenset[str] = frozenset()


KINDS: dict[EntityKind, KindSpec] = {
    EntityKind.FIGURE: KindSpec(
        kind=EntityKind.FIGURE,
        model=Figures,
        label="Figure",
        path="figures",
        references={"brand_id": Brands, "line_id": Lines},
        required=frozenset({"name", "brand_id", "line_id", "is_released", "is_nsfw"}),
        filters=frozenset({"brand_id", "line_id", "series_id", "search", "is_released"}),
    ),
    EntityKind.BRAND: KindSpec(
        kind=EntityKind.BRAND,
        model=Brands,
        label="Brand",
        path="brands",
        filters=frozenset({"search"}),
    ),
    EntityKind.LINE: KindSpec(
        kind=EntityKind.LINE,
        model=Lines,
        label="Line",
        path="lines",
        references={"brand_id": Brands},
        required=frozenset({"name", "brand_id"}),
        filters=frozenset({"brand_id", "search"}),
    ),
    EntityKind.SERIES: KindSpec(
        kind=EntityKind.SERIES,
        model=Series,
        label="Series",
        path="series",
        filters=frozenset({"search"}),
    ),
    EntityKind.CHARACTER: KindSpec(
        kind=EntityKind.CHARACTER,
        model=Characters,
        label="Character",
        path="characters",
        references={"series_id": Series},
        filters=frozenset({"series_id", "search"}),
    ),
}


def get_kind(kind: EntityKind) -> KindSpec:
    return KINDS[kind]
