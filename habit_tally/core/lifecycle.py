"""
Record lifecycle management.

Validates entries, assigns identity, and keeps the JSON file in sync with
the in-memory collection after every change.

Synchronization Order:
1. Coerce and validate the three quantities
2. Mutate the in-memory repository
3. Clear the edit selection
4. Save the full collection to the store
A failed save is reported on the outcome but never undoes step 2.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Union

from habit_tally.storage.models import Record
from habit_tally.storage.repository import RecordRepository
from habit_tally.storage.store import JsonRecordStore

from .errors import NotFoundError, PersistenceError
from .parsing import QuantityInput, coerce_quantity, validate_quantity

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%d/%m/%Y"


class Ordering(Enum):
    """Display orderings for the record list."""
    MOST_RECENT = "recent"
    HIGHEST_COFFEE = "coffee"


class OutcomeKind(Enum):
    """What a successful submission did."""
    CREATED = "created"
    UPDATED = "updated"


@dataclass
class SubmitOutcome:
    """Result of a successful submit_entry call."""
    kind: OutcomeKind
    record: Record
    saved: bool = True
    warning: Optional[str] = None
    
    @property
    def message(self) -> str:
        if self.kind == OutcomeKind.UPDATED:
            return "Entry updated."
        return "Entry saved."


@dataclass
class DeleteOutcome:
    """Result of a delete_entry call. removed is None when the id was absent."""
    record_id: int
    removed: Optional[Record]
    saved: bool = True
    warning: Optional[str] = None
    
    @property
    def message(self) -> str:
        return "Entry deleted."


class LifecycleController:
    """Mediates every create, update and delete on the record collection.
    
    Owns the edit selection and the display ordering. Both are transient and
    never persisted.
    """
    
    def __init__(
        self,
        repository: RecordRepository,
        store: JsonRecordStore,
        clock: Callable[[], datetime] = datetime.now,
        date_format: str = DEFAULT_DATE_FORMAT,
        ordering: Ordering = Ordering.MOST_RECENT
    ):
        """Initialize the controller.
        
        Args:
            repository: In-memory record collection
            store: Durable mirror of the collection
            clock: Source of "now" for ids and creation dates
            date_format: strftime format of the creation date
            ordering: Initial display ordering
        """
        self.repository = repository
        self.store = store
        self.clock = clock
        self.date_format = date_format
        self._ordering = ordering
        self._editing: Optional[Record] = None
    
    def load(self) -> List[Record]:
        """Fill the repository from the store, used once at startup."""
        records = self.store.load()
        self.repository.initialize(records)
        logger.info("Loaded %d records", len(records))
        return self.repository.all()
    
    @property
    def editing(self) -> Optional[Record]:
        """Record selected for editing, or None in new-entry mode."""
        return self._editing
    
    def begin_edit(self, record: Union[Record, int]) -> bool:
        """Select a record for editing.
        
        Returns:
            False if the record is not in the collection
        """
        record_id = record.id if isinstance(record, Record) else record
        try:
            self._editing = self.repository.require(record_id)
        except NotFoundError as e:
            logger.info("Cannot enter edit mode: %s", e.message)
            return False
        return True
    
    def cancel_edit(self) -> None:
        self._editing = None
    
    def submit_entry(
        self,
        coffee: QuantityInput,
        books: QuantityInput,
        trips: QuantityInput,
        editing_id: Optional[int] = None
    ) -> SubmitOutcome:
        """Create a new record or update the one being edited.
        
        Args:
            coffee: Coffee quantity, text or number
            books: Books quantity, text or number
            trips: Trips quantity, text or number
            editing_id: Record to update; defaults to the edit selection
            
        Returns:
            SubmitOutcome describing what happened
            
        Raises:
            ValidationError: If any quantity is not a number or is negative.
                Nothing changes and the edit selection is kept.
        """
        quantities = {}
        for name, value in (("coffee", coffee), ("books", books), ("trips", trips)):
            quantities[name] = validate_quantity(coerce_quantity(value, name), name)
        
        if editing_id is None and self._editing is not None:
            editing_id = self._editing.id
        
        updated = None
        if editing_id is not None:
            updated = self.repository.replace(editing_id, **quantities)
        
        if updated is not None:
            outcome = SubmitOutcome(kind=OutcomeKind.UPDATED, record=updated)
            logger.info("Updated record %d", updated.id)
        else:
            now = self.clock()
            record = Record(
                id=int(now.timestamp() * 1000),
                date=now.strftime(self.date_format),
                **quantities
            )
            self.repository.add(record)
            outcome = SubmitOutcome(kind=OutcomeKind.CREATED, record=record)
            logger.info("Created record %d", record.id)
        
        self._editing = None
        outcome.saved, outcome.warning = self._sync()
        return outcome
    
    def delete_entry(self, record_id: int) -> DeleteOutcome:
        """Remove a record. Deleting an absent id is a no-op."""
        removed = self.repository.remove_by_id(record_id)
        if removed is None:
            logger.debug("Delete of absent record %s ignored", record_id)
        else:
            logger.info("Deleted record %d", record_id)
            if self._editing is not None and self._editing.id == record_id:
                self._editing = None
        
        outcome = DeleteOutcome(record_id=record_id, removed=removed)
        outcome.saved, outcome.warning = self._sync()
        return outcome
    
    @property
    def ordering(self) -> Ordering:
        return self._ordering
    
    def set_ordering(self, ordering: Union[Ordering, str]) -> None:
        """Choose the display ordering by enum member or value."""
        self._ordering = Ordering(ordering)
    
    def displayed(self) -> List[Record]:
        """Return the collection sorted for display, stored order untouched."""
        records = self.repository.all()
        if self._ordering == Ordering.HIGHEST_COFFEE:
            return sorted(records, key=lambda record: record.coffee, reverse=True)
        return sorted(records, key=lambda record: record.id, reverse=True)
    
    def is_empty(self) -> bool:
        return self.repository.is_empty()
    
    def _sync(self):
        """Save the full collection; failures are logged, not raised."""
        try:
            self.store.save(self.repository.all())
        except PersistenceError as e:
            logger.warning("Changes kept in memory but not saved: %s", e)
            return False, str(e)
        return True, None
