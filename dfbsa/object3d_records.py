"""Binary records that make up a 3D object: points, planes, data sections and header."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

MAX_PLANES = 1000
MAX_POINTS = 2000
MAX_PLANE_POINTS = 40
MAX_DATA2 = 300

POINT_RECORD_SIZE = 12
NORMAL_RECORD_SIZE = 12
DATA1_RECORD_SIZE = 24
HEADER_RECORD_SIZE = 64
DATA2_SUBRECORD_SIZE = 6

PLANE_HEADER_SIZE = 8
PLANE_POINT_SIZE = 8
DATA2_HEADER_SIZE = 18

DEFAULT_VERSION = "v2.7"

_POINT = struct.Struct("<iii")
_PLANE_POINT = struct.Struct("<ii")
_PLANE_HEADER = struct.Struct("<BBHi")
_DATA2_HEADER = struct.Struct("<4ih")
_HEADER = struct.Struct("<4s7i4h6i")

_SUB_IMAGE_BITS = 7
_SUB_IMAGE_MASK = (1 << _SUB_IMAGE_BITS) - 1
_TEXTURE_MASK = (1 << 9) - 1


def _require(data: bytes, needed: int, what: str) -> None:
    if len(data) < needed:
        raise ValueError(f"Failed to read the {what} ({len(data)} of {needed} bytes)!")


@dataclass
class Point:
    """A point or normal vector in object coordinates."""

    x: int = 0
    y: int = 0
    z: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> "Point":
        _require(data, POINT_RECORD_SIZE, "point data")
        return cls(*_POINT.unpack_from(data))

    def to_bytes(self) -> bytes:
        return _POINT.pack(self.x, self.y, self.z)


@dataclass
class PlanePoint:
    """One corner of a plane: the byte offset of its point and an unknown value."""

    point_offset: int = 0
    unknown: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> "PlanePoint":
        _require(data, PLANE_POINT_SIZE, "plane point data")
        return cls(*_PLANE_POINT.unpack_from(data))

    def to_bytes(self) -> bytes:
        return _PLANE_POINT.pack(self.point_offset, self.unknown)


@dataclass
class Plane:
    """A face of the object with its texture and corner points."""

    unknown1: int = 0
    sub_image_index: int = 0
    texture_index: int = 0
    unknown2: int = 0
    points: list[PlanePoint] = field(default_factory=list)

    @property
    def point_count(self) -> int:
        return len(self.points)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Plane":
        """Decode a plane from the start of data; trailing bytes are ignored."""
        _require(data, PLANE_HEADER_SIZE, "face data")
        count, unknown1, bits, unknown2 = _PLANE_HEADER.unpack_from(data)
        if count > MAX_PLANE_POINTS:
            raise ValueError(f"Invalid number of face-points received, {count}!")
        needed = PLANE_HEADER_SIZE + PLANE_POINT_SIZE * count
        _require(data, needed, "face data")
        points = [
            PlanePoint(*fields)
            for fields in _PLANE_POINT.iter_unpack(data[PLANE_HEADER_SIZE:needed])
        ]
        return cls(
            unknown1=unknown1,
            sub_image_index=bits & _SUB_IMAGE_MASK,
            texture_index=bits >> _SUB_IMAGE_BITS,
            unknown2=unknown2,
            points=points,
        )

    def to_bytes(self) -> bytes:
        if self.point_count > MAX_PLANE_POINTS:
            raise ValueError(f"Too many face-points ({self.point_count})!")
        if not 0 <= self.sub_image_index <= _SUB_IMAGE_MASK:
            raise ValueError(f"Invalid sub-image index {self.sub_image_index}!")
        if not 0 <= self.texture_index <= _TEXTURE_MASK:
            raise ValueError(f"Invalid texture index {self.texture_index}!")
        bits = (self.texture_index << _SUB_IMAGE_BITS) | self.sub_image_index
        header = _PLANE_HEADER.pack(self.point_count, self.unknown1 & 0xFF, bits, self.unknown2)
        return header + b"".join(point.to_bytes() for point in self.points)

    def size(self) -> int:
        """Size of the plane record in bytes."""
        return PLANE_HEADER_SIZE + PLANE_POINT_SIZE * self.point_count


@dataclass
class Data2Record:
    """A record of the second data section: four values and raw sub-records."""

    unknown: tuple[int, int, int, int] = (0, 0, 0, 0)
    sub_records: list[bytes] = field(default_factory=list)

    @property
    def num_sub_records(self) -> int:
        return len(self.sub_records)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Data2Record":
        """Decode a record from the start of data; trailing bytes are ignored."""
        _require(data, DATA2_HEADER_SIZE, "first 18 bytes of the Data2 section")
        *unknown, count = _DATA2_HEADER.unpack_from(data)
        if count < 0 or count >= MAX_DATA2:
            raise ValueError(f"Invalid number of Data2 subrecords read ({count})!")
        needed = DATA2_HEADER_SIZE + DATA2_SUBRECORD_SIZE * count
        _require(data, needed, "Data2 subrecords")
        subs = [
            bytes(data[start : start + DATA2_SUBRECORD_SIZE])
            for start in range(DATA2_HEADER_SIZE, needed, DATA2_SUBRECORD_SIZE)
        ]
        return cls(unknown=tuple(unknown), sub_records=subs)

    def to_bytes(self) -> bytes:
        if len(self.unknown) != 4:
            raise ValueError("Data2 records hold exactly four unknown values!")
        if self.num_sub_records >= MAX_DATA2:
            raise ValueError(f"Too many Data2 subrecords ({self.num_sub_records})!")
        for sub in self.sub_records:
            if len(sub) != DATA2_SUBRECORD_SIZE:
                raise ValueError(f"Data2 subrecords must be {DATA2_SUBRECORD_SIZE} bytes!")
        header = _DATA2_HEADER.pack(*self.unknown, self.num_sub_records)
        return header + b"".join(self.sub_records)

    def size(self) -> int:
        """Size of the record in bytes."""
        return DATA2_HEADER_SIZE + DATA2_SUBRECORD_SIZE * self.num_sub_records


@dataclass
class ObjectHeader:
    """The 64 byte header at the start of every 3D object record."""

    version: str = DEFAULT_VERSION
    num_points: int = 0
    num_planes: int = 0
    unknown1: int = 0
    null_value1: int = 0
    null_value2: int = 0
    data1_offset: int = 0
    data2_offset: int = 0
    num_data2_records: int = 0
    null_value3: int = 0
    unknown3: int = 0
    unknown4: int = 0
    null_value4: int = 0
    null_value5: int = 0
    point_offset: int = 0
    normal_offset: int = 0
    unknown6: int = 0
    plane_offset: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> "ObjectHeader":
        _require(data, HEADER_RECORD_SIZE, "header information")
        raw_version, *values = _HEADER.unpack_from(data)
        version = raw_version.split(b"\0", 1)[0].decode("latin-1")
        return cls(version, *values)

    def to_bytes(self) -> bytes:
        return _HEADER.pack(
            self.version.encode("latin-1")[:4],
            self.num_points,
            self.num_planes,
            self.unknown1,
            self.null_value1,
            self.null_value2,
            self.data1_offset,
            self.data2_offset,
            self.num_data2_records,
            self.null_value3,
            self.unknown3,
            self.unknown4,
            self.null_value4,
            self.null_value5,
            self.point_offset,
            self.normal_offset,
            self.unknown6,
            self.plane_offset,
        )