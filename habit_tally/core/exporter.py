"""
Record export.

Writes the collection in the same JSON format the store uses, either to a
file or to an open text stream.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Sequence, Union

from habit_tally.storage.models import Record
from habit_tally.storage.store import dump_records

from .errors import PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "dados.json"


@dataclass(frozen=True)
class ExportResult:
    """Outcome of an export request."""
    exported: bool
    message: str
    count: int = 0


def export_records(
    records: Sequence[Record],
    destination: Union[str, Path, IO[str]] = DEFAULT_EXPORT_NAME
) -> ExportResult:
    """Export records as a JSON document.
    
    An empty collection is reported as "nothing to export" and the
    destination is left untouched.
    
    Args:
        records: Records to export
        destination: File path or writable text stream
        
    Returns:
        ExportResult describing what happened
        
    Raises:
        PersistenceError: If the destination file cannot be written
    """
    if not records:
        return ExportResult(exported=False, message="Nothing to export.")
    
    if hasattr(destination, "write"):
        dump_records(records, destination)
        target = "stream"
    else:
        path = Path(destination).expanduser()
        try:
            with open(path, "w", encoding="utf-8") as f:
                dump_records(records, f)
        except OSError as e:
            raise PersistenceError(f"Failed to export records: {e}", {"path": str(path)}) from e
        target = str(path)
    
    logger.info("Exported %d records to %s", len(records), target)
    return ExportResult(
        exported=True,
        message=f"Exported {len(records)} records to {target}.",
        count=len(records)
    )
