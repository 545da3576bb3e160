"""Reading of BSA archives: a short header, raw records and a trailing directory."""

from __future__ import annotations

import enum
import struct
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, Optional, TextIO, Union

MAX_RECORDS = 0x3000
"""Largest number of records accepted in one archive (exclusive)."""

HEADER_SIZE = 4
FILENAME_LENGTH = 14
COMPARE_LENGTH = 13

_HEADER = struct.Struct("<hh")
_LONG = struct.Struct("<i")


class BsaError(Exception):
    """Raised when a BSA archive cannot be read or a record cannot be found."""


class DirectoryType(enum.IntEnum):
    """How directory entries identify their records."""

    FILENAME = 0x0100
    VALUE = 0x0200

    @property
    def entry_size(self) -> int:
        """Size in bytes of one directory entry of this type."""
        return 18 if self is DirectoryType.FILENAME else 8


@dataclass(frozen=True)
class DirectoryRecord:
    """One directory entry: its identifier, the record size and its offset."""

    size: int
    offset: int
    filename: Optional[str] = None
    value: Optional[int] = None


ExtractCallback = Callable[[int, int, DirectoryRecord, DirectoryType], None]


class BsaFile:
    """A BSA archive on disk whose directory is read on first open."""

    def __init__(self, filename: Union[str, Path, None] = None) -> None:
        self.filename: Optional[Path] = Path(filename) if filename is not None else None
        self.directory_type = DirectoryType.FILENAME
        self.header_read = False
        self.directory_read = False
        self._records: list[DirectoryRecord] = []
        self._handle: Optional[BinaryIO] = None

    # ------------------------------------------------------------------ state

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    @property
    def records(self) -> tuple[DirectoryRecord, ...]:
        return tuple(self._records)

    @property
    def num_records(self) -> int:
        return len(self._records)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def directory_size(self) -> int:
        return len(self._records) * self.directory_type.entry_size

    def is_valid_index(self, index: int) -> bool:
        return 0 <= index < len(self._records)

    # ---------------------------------------------------------- open / close

    def open(self, filename: Union[str, Path, None] = None) -> None:
        """Open the archive and read its header and directory if not yet read."""
        if self.is_open:
            return
        path = Path(filename) if filename is not None else self.filename
        if path is None:
            raise BsaError("No BSA filename given!")
        try:
            self._handle = open(path, "rb")
        except OSError as exc:
            raise BsaError(f"Failed to open file {path}!") from exc
        if filename is not None:
            self.filename = path
        if self.directory_read:
            return
        try:
            self._read_header()
            self._read_directory()
        except BsaError:
            self.close()
            raise

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self) -> "BsaFile":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def clear(self) -> None:
        """Close the file and forget the header and directory."""
        self.close()
        self._records = []
        self.directory_type = DirectoryType.FILENAME
        self.header_read = False
        self.directory_read = False

    @contextmanager
    def _opened(self) -> Iterator[BinaryIO]:
        if self._handle is not None:
            yield self._handle
            return
        self.open()
        try:
            assert self._handle is not None
            yield self._handle
        finally:
            self.close()

    # ------------------------------------------------------------- reading

    def _read_header(self) -> None:
        handle = self._handle
        assert handle is not None
        handle.seek(0)
        data = handle.read(HEADER_SIZE)
        if len(data) != HEADER_SIZE:
            raise BsaError("Failed to read the BSA header!")
        count, dir_type = _HEADER.unpack(data)
        if count <= 0 or count >= MAX_RECORDS:
            raise BsaError(f"Invalid number of BSA records received ({count})!")
        if dir_type <= 0:
            raise BsaError(f"Invalid BSA directory type received ({dir_type})!")
        try:
            self.directory_type = DirectoryType(dir_type)
        except ValueError as exc:
            raise BsaError(f"Unsupported BSA directory type 0x{dir_type:04X}!") from exc
        self._records = [DirectoryRecord(size=0, offset=0)] * count
        self.header_read = True

    def _read_directory(self) -> None:
        handle = self._handle
        assert handle is not None
        count = len(self._records)
        entry_size = self.directory_type.entry_size
        file_size = handle.seek(0, 2)
        if file_size < count * entry_size:
            raise BsaError("Error moving to start of BSA directory!")
        handle.seek(file_size - count * entry_size)

        records: list[DirectoryRecord] = []
        offset = HEADER_SIZE
        for index in range(count):
            data = handle.read(entry_size)
            if len(data) != entry_size:
                raise BsaError(f"Failed to read directory record {index}")
            if self.directory_type is DirectoryType.FILENAME:
                raw_name = data[:FILENAME_LENGTH].split(b"\0", 1)[0]
                (size,) = _LONG.unpack_from(data, FILENAME_LENGTH)
                record = DirectoryRecord(
                    size=size, offset=offset, filename=raw_name.decode("latin-1")
                )
            else:
                value, size = struct.unpack("<ii", data)
                record = DirectoryRecord(size=size, offset=offset, value=value)
            records.append(record)
            offset += size
        self._records = records
        self.directory_read = True

    # ------------------------------------------------------------- lookup

    def find_filename_index(self, filename: str) -> int:
        """Return the index of the record with this name, compared case-insensitively."""
        if self.directory_type is not DirectoryType.FILENAME:
            raise BsaError("BSA filename directory type not in use!")
        wanted = filename[:COMPARE_LENGTH].lower()
        for index, record in enumerate(self._records):
            if (record.filename or "")[:COMPARE_LENGTH].lower() == wanted:
                return index
        if not self._records:
            raise BsaError(
                f"No matching record found for '{filename}', no directory records defined!"
            )
        raise BsaError(f"No matching record found for '{filename}'.")

    def find_value_index(self, value: int) -> int:
        """Return the index of the record with this value."""
        if self.directory_type is not DirectoryType.VALUE:
            raise BsaError("BSA value directory type not in use!")
        for index, record in enumerate(self._records):
            if record.value == value:
                return index
        if not self._records:
            raise BsaError(f"No matching record found for {value}, no directory records defined!")
        closest = min(
            range(len(self._records)), key=lambda i: abs(value - (self._records[i].value or 0))
        )
        raise BsaError(
            f"No matching record found for {value}. "
            f"Closest match is {closest}[{self._records[closest].value}]"
        )

    def filename_record_size(self, filename: str) -> int:
        return self._records[self.find_filename_index(filename)].size

    def value_record_size(self, value: int) -> int:
        return self._records[self.find_value_index(value)].size

    def get_record(self, index: int) -> DirectoryRecord:
        if not self.is_valid_index(index):
            raise BsaError(f"Invalid record index {index} specified!")
        return self._records[index]

    def record_filename(self, index: int) -> str:
        record = self.get_record(index)
        if self.directory_type is not DirectoryType.FILENAME or record.filename is None:
            raise BsaError("BSA filename directory type not in use!")
        return record.filename

    def record_value(self, index: int) -> int:
        record = self.get_record(index)
        if self.directory_type is not DirectoryType.VALUE or record.value is None:
            raise BsaError("BSA value directory type not in use!")
        return record.value

    def record_size(self, index: int) -> int:
        return self.get_record(index).size

    def record_offset(self, index: int) -> int:
        return self.get_record(index).offset

    # -------------------------------------------------------------- output

    def dump(self, stream: TextIO) -> None:
        """Write a short description of the archive and its directory."""
        count = len(self._records)
        stream.write(f"BSA File Object ({self.filename})\n")
        stream.write(f"\tNumRecords = {count}\n")
        stream.write(f"\tDirectoryType = 0x{int(self.directory_type):04X}\n")
        stream.write("\tDirectory Entries...\n")
        head = min(count, 5)
        for index in range(head):
            self._dump_entry(stream, index)
        tail_start = count - 5 if count >= 10 else head
        stream.write("\t\t....\n")
        for index in range(tail_start, count):
            self._dump_entry(stream, index)

    def _dump_entry(self, stream: TextIO, index: int) -> None:
        record = self._records[index]
        if self.directory_type is DirectoryType.FILENAME:
            ident = f"'{record.filename}'"
        else:
            ident = f"0x{(record.value or 0) & 0xFFFFFFFF:08X}"
        stream.write(
            f"\t\t{index}) {ident} = 0x{record.size & 0xFFFFFFFF:08X} bytes"
            f" at 0x{record.offset & 0xFFFFFFFF:08X}\n"
        )

    def read_raw_record(self, index: int) -> bytes:
        """Return the bytes of one record, opening the file briefly if needed."""
        if self._handle is None and not self.directory_read:
            with self._opened():
                return self.read_raw_record(index)
        record = self.get_record(index)
        with self._opened() as handle:
            handle.seek(record.offset)
            data = handle.read(record.size)
        if len(data) != record.size:
            raise BsaError(f"Failed to read BSA record index {index} from file!")
        return data

    def raw_record_filename(self, index: int) -> str:
        """Name under which a record is extracted."""
        record = self.get_record(index)
        if self.directory_type is DirectoryType.FILENAME:
            return record.filename or ""
        return f"{(record.value or 0) & 0xFFFFFFFF:08X}.dat"

    def write_raw_record(self, stream: BinaryIO, index: int) -> None:
        data = self.read_raw_record(index)
        written = stream.write(data)
        if written is not None and written != len(data):
            raise BsaError(f"Failed to write raw BSA record index {index} to file!")

    def write_raw_record_file(self, index: int, directory: Union[str, Path] = ".") -> Path:
        """Write one record to its own file in a directory and return the path."""
        data = self.read_raw_record(index)
        path = Path(directory) / self.raw_record_filename(index)
        try:
            path.write_bytes(data)
        except OSError as exc:
            raise BsaError(f"Failed to open file '{path}' for output!") from exc
        return path

    def extract_records(
        self,
        directory: Union[str, Path] = ".",
        callback: Optional[ExtractCallback] = None,
    ) -> list[Path]:
        """Write every record to its own file; the callback runs before each one."""
        paths: list[Path] = []
        with self._opened():
            count = len(self._records)
            for index, record in enumerate(self._records):
                if callback is not None:
                    callback(index, count, record, self.directory_type)
                paths.append(self.write_raw_record_file(index, directory))
        return paths