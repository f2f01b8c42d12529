"""
JSON file persistence.

The whole record collection lives in one JSON document that is rewritten
on every save.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import IO, Iterable, List, Union

from habit_tally.core.errors import HabitTallyError, PersistenceError

from .models import Record

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path.home() / ".habit-tally" / "dados.json"


def dump_records(records: Iterable[Record], stream: IO[str]) -> None:
    """Write records to a text stream as a labelled JSON array."""
    json.dump([record.to_dict() for record in records], stream, indent=2, ensure_ascii=False)
    stream.write("\n")


def parse_records(raw: object) -> List[Record]:
    """Convert a decoded JSON document into records.
    
    Raises:
        HabitTallyError: If the document is not an array of valid records
    """
    if not isinstance(raw, list):
        raise PersistenceError("Record file must contain a JSON array")
    return [Record.from_dict(item) for item in raw]


class JsonRecordStore:
    """Durable mirror of the record collection in a single JSON file."""
    
    def __init__(self, path: Union[str, Path] = DEFAULT_DATA_FILE):
        """Initialize the store with a file path.
        
        Args:
            path: Location of the JSON file; "~" is expanded
        """
        self.path = Path(path).expanduser()
    
    def exists(self) -> bool:
        return self.path.exists()
    
    def load(self) -> List[Record]:
        """Return the saved collection.
        
        A missing, unreadable or corrupt file yields an empty list so a
        fresh install starts with zero records.
        """
        if not self.path.exists():
            logger.debug("No record file at %s, starting empty", self.path)
            return []
        
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                records = parse_records(json.load(f))
        except (OSError, ValueError, HabitTallyError) as e:
            error = PersistenceError(
                f"Could not load records: {e}", {"path": str(self.path)}
            )
            logger.warning("%s", error)
            return []
        
        logger.debug("Loaded %d records from %s", len(records), self.path)
        return records
    
    def save(self, records: Iterable[Record]) -> None:
        """Overwrite the file with the given collection.
        
        The document is written to a temporary file next to the target and
        renamed over it, so a failed save leaves the previous content intact.
        
        Raises:
            PersistenceError: If the file cannot be written
        """
        records = list(records)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                dump_records(records, f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise PersistenceError(
                f"Failed to save records: {e}", {"path": str(self.path)}
            ) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
        
        logger.debug("Saved %d records to %s", len(records), self.path)
