"""
Data models for storage layer.

Defines the logged entry and its JSON mapping.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict

from habit_tally.core.errors import ValidationError
from habit_tally.core.parsing import coerce_quantity, validate_quantity

QUANTITY_FIELDS = ("coffee", "books", "trips")


@dataclass(frozen=True)
class Record:
    """One logged entry: an id, its creation date and three quantities.
    
    The id and date are fixed at creation. Quantities are validated on
    construction, so a Record with a negative value cannot exist.
    """
    id: int
    date: str
    coffee: float
    books: float
    trips: float
    
    def __post_init__(self):
        """Validate identity and quantities."""
        if not isinstance(self.id, int) or isinstance(self.id, bool):
            raise ValidationError("id must be an integer", {"id": self.id})
        if not isinstance(self.date, str):
            raise ValidationError("date must be a string", {"date": self.date})
        for name in QUANTITY_FIELDS:
            number = validate_quantity(coerce_quantity(getattr(self, name), name), name)
            object.__setattr__(self, name, number)
    
    def with_quantities(self, **quantities: float) -> "Record":
        """Return a copy with some quantities replaced, id and date kept."""
        unknown = set(quantities) - set(QUANTITY_FIELDS)
        if unknown:
            raise ValueError(f"Unknown record fields: {unknown}")
        return replace(self, **quantities)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "coffee": self.coffee,
            "books": self.books,
            "trips": self.trips,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Record":
        """Build a record from its labelled JSON object.
        
        Raises:
            ValidationError: If a field is missing or invalid
        """
        if not isinstance(data, dict):
            raise ValidationError("record must be an object", {"record": data})
        missing = {"id", "date", *QUANTITY_FIELDS} - set(data)
        if missing:
            raise ValidationError(f"Missing record fields: {sorted(missing)}")
        return cls(
            id=data["id"],
            date=data["date"],
            coffee=data["coffee"],
            books=data["books"],
            trips=data["trips"],
        )
