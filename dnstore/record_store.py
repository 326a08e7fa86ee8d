# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Per-file records assembled from B-tree entries

Copyright 2025 DNAi inc.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from dnstore.btree import Entry
from dnstore.value_decoder import DecodedValue


class Record:
    """All fields stored for one file name."""

    def __init__(self, name: str):
        self.name = name
        self.fields: Dict[str, DecodedValue] = {}

    def update(self, field_code: str, value: DecodedValue) -> None:
        self.fields[field_code] = value

    def __repr__(self) -> str:
        return f"Record({self.name!r}, {sorted(self.fields)})"


class RecordStore:
    """
    Records keyed by file name, in the order names were first seen.

    A name that appears again merges its fields into the existing record.
    """

    def __init__(self):
        self._records: Dict[str, Record] = {}

    def add(self, entry: Entry) -> Record:
        record = self._records.get(entry.name)
        if record is None:
            record = Record(entry.name)
            self._records[entry.name] = record
        record.update(entry.field_code, entry.value)
        return record

    def get(self, name: str) -> Optional[Record]:
        return self._records.get(name)

    def names(self) -> List[str]:
        return list(self._records)

    def triples(self) -> List[Tuple[str, str, DecodedValue]]:
        """Return every (name, field code, value) triple."""
        return [
            (record.name, code, value)
            for record in self._records.values()
            for code, value in record.fields.items()
        ]

    def __iter__(self) -> Iterator[Record]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, name: str) -> bool:
        return name in self._records
