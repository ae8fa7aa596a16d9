"""
Record store for salary entries.

Keeps an in-memory list of salary entries and the ordered set of known
names in step with an append-only CSV file. Every mutation takes the
write side of a single readers-writer lock and holds it across the file
append, so readers never observe an entry that is not yet on disk.

File layout, one entry per row:

    name,amount CURRENCY,year
    Alice,50000.00 NOK,2023
"""

import csv
import math
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Set, Tuple, Union

from pydantic import ValidationError

from .exceptions import PersistenceError
from .logging_config import get_logger
from .models import SalaryEntry
from .rwlock import ReadWriteLock

logger = get_logger(__name__)

FIELDS_PER_ROW = 3

# Names are free text of any length; csv.reader refuses fields over 128 KiB by default.
MAX_FIELD_SIZE = 2**31 - 1

AMOUNT_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
YEAR_PATTERN = re.compile(r"[+-]?[0-9]+")


def format_amount(salary: float, currency: str) -> str:
    """Render an amount the way it is stored, e.g. ``50000.00 NOK``."""
    return f"{salary:.2f} {currency}"


def parse_amount(text: str, currency: str) -> Optional[float]:
    """
    Parse a stored amount.

    Accepts a bare number or a number followed by whitespace and the
    configured currency suffix. The number itself must be plain
    decimal or exponent notation; anything else returns None.
    """
    parts = text.split()
    if len(parts) == 2 and parts[1] == currency:
        number = parts[0]
    elif len(parts) == 1:
        number = parts[0]
    else:
        return None

    if not AMOUNT_PATTERN.fullmatch(number):
        return None

    value = float(number)
    if not math.isfinite(value):
        return None
    return value


def format_row(entry: SalaryEntry, currency: str) -> List[str]:
    """Convert an entry to its CSV row."""
    return [entry.name, format_amount(entry.salary, currency), str(entry.year)]


def parse_row(row: Sequence[str], currency: str) -> Optional[SalaryEntry]:
    """Convert a CSV row to an entry, or None if the row is malformed."""
    if len(row) != FIELDS_PER_ROW:
        return None

    name, amount, year_text = row
    salary = parse_amount(amount, currency)
    if salary is None:
        return None

    if not YEAR_PATTERN.fullmatch(year_text):
        return None
    year = int(year_text)

    try:
        return SalaryEntry(name=name, salary=salary, year=year)
    except ValidationError:
        return None


@dataclass(frozen=True)
class StoreSnapshot:
    """Consistent read-only view of the store."""

    names: Tuple[str, ...]
    entries: Tuple[SalaryEntry, ...]


class RecordStore:
    """
    In-memory cache of salary entries backed by a CSV file.

    Attributes:
        path: Backing CSV file
        currency: Suffix written after every amount
    """

    def __init__(self, path: Union[str, Path], currency: str = "NOK") -> None:
        self.path = Path(path)
        self.currency = currency
        self._lock = ReadWriteLock()
        self._entries: List[SalaryEntry] = []
        self._names: List[str] = []
        self._known: Set[str] = set()

    def _add_name(self, name: str) -> bool:
        if name in self._known:
            return False
        self._known.add(name)
        self._names.append(name)
        return True

    def _ends_without_newline(self) -> bool:
        """True if the file exists, is non-empty and its last byte is not a line break."""
        try:
            with self.path.open("rb") as fh:
                fh.seek(0, os.SEEK_END)
                if fh.tell() == 0:
                    return False
                fh.seek(-1, os.SEEK_END)
                return fh.read(1) not in (b"\n", b"\r")
        except FileNotFoundError:
            return False

    def load(self) -> None:
        """
        Replace the in-memory state with the rows of the backing file.

        Malformed rows are skipped. A missing file leaves the store as it
        is; any other read failure is logged and also leaves it untouched.
        """
        with self._lock.write_locked():
            csv.field_size_limit(max(csv.field_size_limit(), MAX_FIELD_SIZE))
            try:
                with self.path.open("r", newline="", encoding="utf-8") as fh:
                    rows = list(csv.reader(fh))
            except FileNotFoundError:
                logger.info("Data file not found, starting empty", path=str(self.path))
                return
            except (OSError, UnicodeDecodeError, csv.Error) as e:
                logger.error("Failed to read data file", path=str(self.path), error=str(e))
                return

            entries: List[SalaryEntry] = []
            for line_number, row in enumerate(rows, start=1):
                entry = parse_row(row, self.currency)
                if entry is None:
                    logger.debug("Skipping malformed row", line=line_number)
                    continue
                entries.append(entry)

            self._entries = entries
            self._names = []
            self._known = set()
            for entry in entries:
                self._add_name(entry.name)

            logger.info(
                "Loaded salary entries",
                path=str(self.path),
                entries=len(self._entries),
                names=len(self._names),
            )

    def append_entry(self, entry: SalaryEntry) -> List[SalaryEntry]:
        """
        Persist an entry and add it to the cache.

        The row is written and the file closed before the cache changes,
        so a failed write leaves the visible state as it was.

        Args:
            entry: Entry to append

        Returns:
            Copy of the entry list including the new entry

        Raises:
            PersistenceError: If the file cannot be opened or written
        """
        row = format_row(entry, self.currency)

        with self._lock.write_locked():
            try:
                needs_newline = self._ends_without_newline()
                with self.path.open("a", newline="", encoding="utf-8") as fh:
                    if needs_newline:
                        fh.write("\r\n")
                    csv.writer(fh).writerow(row)
            except OSError as e:
                logger.error(
                    "Failed to append salary entry",
                    path=str(self.path),
                    name=entry.name,
                    error=str(e),
                )
                raise PersistenceError(str(self.path), str(e)) from e

            self._entries.append(entry)
            self._add_name(entry.name)
            logger.info(
                "Salary entry appended",
                name=entry.name,
                year=entry.year,
                total=len(self._entries),
            )
            return list(self._entries)

    def register_name(self, name: str) -> List[str]:
        """
        Add a name to the name set if it is not there yet.

        Returns:
            Copy of the name list
        """
        with self._lock.write_locked():
            if self._add_name(name):
                logger.info("Name registered", name=name, total=len(self._names))
            return list(self._names)

    def snapshot(self) -> StoreSnapshot:
        """Return the current names and entries."""
        with self._lock.read_locked():
            return StoreSnapshot(names=tuple(self._names), entries=tuple(self._entries))
