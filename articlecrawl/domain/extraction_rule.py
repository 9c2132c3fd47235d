from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Multiplicity(str, Enum):
    SINGLE = "single"
    MANY = "many"


@dataclass(frozen=True)
class ExtractionRule:
    """Declarative mapping of a named field to a CSS selector.

    - `attribute`: read this attribute instead of the node's text.
    - `join`: for MANY rules, return one newline-joined string instead of a list.
    - `parse_date`: parse the value as an ISO-8601-like date.
    """

    field_name: str
    selector: str
    multiplicity: Multiplicity = Multiplicity.SINGLE
    attribute: Optional[str] = None
    join: bool = False
    parse_date: bool = False

    def __post_init__(self):
        if not self.field_name or not self.field_name.strip():
            raise ValueError("field_name is required")
        if not self.selector or not self.selector.strip():
            raise ValueError(f"selector is required for field {self.field_name!r}")
        if self.join and self.multiplicity is not Multiplicity.MANY:
            raise ValueError(f"join only applies to MANY rules (field {self.field_name!r})")

    @property
    def is_many(self) -> bool:
        return self.multiplicity is Multiplicity.MANY
