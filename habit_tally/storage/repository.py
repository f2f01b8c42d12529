"""
Repository pattern for in-memory record state.

Holds the authoritative collection for the running process. Persisting
changes is the caller's job.
"""

from typing import Iterable, List, Optional

from habit_tally.core.errors import NotFoundError

from .models import Record


class RecordRepository:
    """Ordered, mutable collection of records.
    
    Records keep their insertion order; display sorting is derived
    elsewhere and never changes the stored order.
    """
    
    def __init__(self, records: Optional[Iterable[Record]] = None):
        self._records: List[Record] = list(records or [])
    
    def initialize(self, records: Iterable[Record]) -> None:
        """Replace the whole collection, used once at startup."""
        self._records = list(records)
    
    def all(self) -> List[Record]:
        """Return a copy of the collection in insertion order."""
        return list(self._records)
    
    def get(self, record_id: int) -> Optional[Record]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None
    
    def require(self, record_id: int) -> Record:
        """Return the record with the given id.
        
        Raises:
            NotFoundError: If the id is not in the collection
        """
        record = self.get(record_id)
        if record is None:
            raise NotFoundError(f"Record {record_id} not found", {"id": record_id})
        return record
    
    def add(self, record: Record) -> None:
        self._records.append(record)
    
    def replace(self, record_id: int, **quantities: float) -> Optional[Record]:
        """Replace quantities of the record with the given id.
        
        Args:
            record_id: Id of the record to update
            **quantities: Any of coffee, books, trips
            
        Returns:
            The updated record, or None if the id is absent
        """
        for index, record in enumerate(self._records):
            if record.id == record_id:
                updated = record.with_quantities(**quantities)
                self._records[index] = updated
                return updated
        return None
    
    def remove_by_id(self, record_id: int) -> Optional[Record]:
        """Remove the record with the given id and return it, or None."""
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return self._records.pop(index)
        return None
    
    def is_empty(self) -> bool:
        return not self._records
    
    def __len__(self) -> int:
        return len(self._records)
    
    def __contains__(self, record_id: object) -> bool:
        return any(record.id == record_id for record in self._records)
