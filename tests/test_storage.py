"""
Unit tests for storage layer.

Tests JSON store load/save behavior and the in-memory repository.
"""

import json
import os
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from habit_tally.core.errors import NotFoundError, PersistenceError
from habit_tally.storage.models import Record
from habit_tally.storage.repository import RecordRepository
from habit_tally.storage.store import JsonRecordStore


def make_record(record_id: int, coffee: float = 1.0, books: float = 2.0, trips: float = 0.0) -> Record:
    return Record(id=record_id, date="01/01/2024", coffee=coffee, books=books, trips=trips)


class TestJsonRecordStore:
    """Test loading and saving the record file."""
    
    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        self.path = Path(self.temp_dir) / "dados.json"
    
    def teardown_method(self):
        """Clean up test environment."""
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)
    
    def test_missing_file_loads_empty(self):
        """Test a fresh install starts with zero records."""
        store = JsonRecordStore(self.path)
        assert store.exists() is False
        assert store.load() == []
    
    def test_save_then_load(self):
        """Test saved records load back equal."""
        records = [make_record(3, coffee=0.1), make_record(1, books=1 / 3), make_record(2)]
        store = JsonRecordStore(self.path)
        store.save(records)
        
        loaded = store.load()
        assert sorted(loaded, key=lambda r: r.id) == sorted(records, key=lambda r: r.id)
    
    def test_file_format_is_labelled_json_array(self):
        """Test the document is an array of objects keyed by field name."""
        store = JsonRecordStore(self.path)
        store.save([make_record(1)])
        
        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)
        assert data == [
            {"id": 1, "date": "01/01/2024", "coffee": 1.0, "books": 2.0, "trips": 0.0}
        ]
    
    def test_save_overwrites_everything(self):
        """Test each save replaces the previous collection."""
        store = JsonRecordStore(self.path)
        store.save([make_record(1), make_record(2)])
        store.save([make_record(3)])
        assert [r.id for r in store.load()] == [3]
    
    def test_save_creates_parent_directories(self):
        """Test the data directory is created on first save."""
        store = JsonRecordStore(Path(self.temp_dir) / "nested" / "dir" / "dados.json")
        store.save([make_record(1)])
        assert len(store.load()) == 1
    
    def test_corrupt_file_loads_empty(self):
        """Test invalid JSON degrades to an empty collection."""
        self.path.write_text("{not json", encoding="utf-8")
        assert JsonRecordStore(self.path).load() == []
    
    def test_wrong_shape_loads_empty(self):
        """Test a JSON object instead of an array degrades to empty."""
        self.path.write_text('{"id": 1}', encoding="utf-8")
        assert JsonRecordStore(self.path).load() == []
    
    def test_invalid_record_loads_empty(self):
        """Test a stored negative value degrades to empty."""
        self.path.write_text(
            '[{"id": 1, "date": "x", "coffee": -1, "books": 0, "trips": 0}]',
            encoding="utf-8"
        )
        assert JsonRecordStore(self.path).load() == []
    
    def test_invalid_utf8_loads_empty(self):
        """Test bytes that are not UTF-8 degrade to an empty collection."""
        self.path.write_bytes(
            b'[{"id": 1, "date": "\xff\xfe", "coffee": 1, "books": 0, "trips": 0}]'
        )
        assert JsonRecordStore(self.path).load() == []
    
    def test_oversized_number_loads_empty(self):
        """Test an integer too large for a float degrades to empty."""
        huge = "1" + "0" * 400
        self.path.write_text(
            '[{"id": 1, "date": "x", "coffee": ' + huge + ', "books": 0, "trips": 0}]',
            encoding="utf-8"
        )
        assert JsonRecordStore(self.path).load() == []
    
    def test_failed_save_keeps_previous_content(self):
        """Test a failed write leaves the old file intact and no temp file."""
        store = JsonRecordStore(self.path)
        store.save([make_record(1)])
        
        with patch("habit_tally.storage.store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceError) as excinfo:
                store.save([make_record(2)])
        
        assert "disk full" in str(excinfo.value)
        assert [r.id for r in store.load()] == [1]
        assert os.listdir(self.temp_dir) == ["dados.json"]


class TestRecordRepository:
    """Test the in-memory collection."""
    
    def test_initialize_replaces_collection(self):
        """Test initialize discards previous contents."""
        repository = RecordRepository([make_record(1)])
        repository.initialize([make_record(2), make_record(3)])
        assert [r.id for r in repository.all()] == [2, 3]
    
    def test_all_returns_insertion_order_copy(self):
        """Test all() keeps insertion order and is a copy."""
        repository = RecordRepository()
        repository.add(make_record(3))
        repository.add(make_record(1))
        
        records = repository.all()
        records.clear()
        assert [r.id for r in repository.all()] == [3, 1]
    
    def test_replace_updates_in_place(self):
        """Test replace keeps the position, id and date."""
        repository = RecordRepository([make_record(1), make_record(2), make_record(3)])
        updated = repository.replace(2, coffee=9, trips=4)
        
        assert updated.coffee == 9.0
        assert updated.books == 2.0
        assert updated.trips == 4.0
        assert [r.id for r in repository.all()] == [1, 2, 3]
        assert repository.get(2) == updated
    
    def test_replace_missing_returns_none(self):
        """Test replacing an absent id changes nothing."""
        repository = RecordRepository([make_record(1)])
        assert repository.replace(99, coffee=1) is None
        assert repository.all() == [make_record(1)]
    
    def test_remove_by_id(self):
        """Test removal returns the removed record."""
        repository = RecordRepository([make_record(1), make_record(2)])
        removed = repository.remove_by_id(1)
        assert removed.id == 1
        assert 1 not in repository
        assert len(repository) == 1
        assert repository.remove_by_id(1) is None
    
    def test_require_missing_raises(self):
        """Test require raises NotFoundError for an absent id."""
        repository = RecordRepository([make_record(1)])
        assert repository.require(1) == make_record(1)
        with pytest.raises(NotFoundError) as excinfo:
            repository.require(2)
        assert excinfo.value.details == {"id": 2}
    
    def test_is_empty(self):
        """Test emptiness check."""
        repository = RecordRepository()
        assert repository.is_empty()
        repository.add(make_record(1))
        assert not repository.is_empty()
