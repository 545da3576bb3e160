"""In-memory model of a 3D object record: header, points, planes, normals and data."""

from __future__ import annotations

from typing import Optional

from .object3d_records import (
    DATA1_RECORD_SIZE,
    DEFAULT_VERSION,
    HEADER_RECORD_SIZE,
    NORMAL_RECORD_SIZE,
    POINT_RECORD_SIZE,
    Data2Record,
    ObjectHeader,
    Plane,
    Point,
)


class Object3DError(Exception):
    """Raised when a 3D object is asked for data it does not hold."""


class Object3D:
    """A 3D object as stored in an archive record.

    The header counts decide how many points, normals and data1 records the
    record holds; the plane and data2 lists hold what has been loaded.
    """

    def __init__(self) -> None:
        self.header = ObjectHeader()
        self.points: list[Point] = []
        self.normals: list[Point] = []
        self.planes: list[Plane] = []
        self.data1: list[bytes] = []
        self.data2: list[Data2Record] = []
        self.bsa_record_offset = 0
        self.bsa_record_size = 0
        self.bsa_record_id = 0
        self.bsa_record_index = 0

    # ----------------------------------------------------------------- views

    @property
    def version(self) -> str:
        return self.header.version

    @property
    def num_points(self) -> int:
        return self.header.num_points

    @property
    def num_planes(self) -> int:
        return self.header.num_planes

    @property
    def num_data2_records(self) -> int:
        return self.header.num_data2_records

    # ------------------------------------------------------------ operations

    def clear(self) -> None:
        """Drop all loaded data, zero the record counts and reset the version."""
        self.points = []
        self.normals = []
        self.planes = []
        self.data1 = []
        self.data2 = []
        self.header.num_points = 0
        self.header.num_planes = 0
        self.header.num_data2_records = 0
        self.set_version()

    def count_plane_points(self) -> int:
        """Total number of corner points over all loaded planes."""
        return sum(plane.point_count for plane in self.planes)

    def get_plane(self, index: int) -> Plane:
        if not 0 <= index < len(self.planes):
            raise Object3DError(f"Invalid face index {index}!")
        return self.planes[index]

    def record_size(self) -> int:
        """Size in bytes of the record described by the header and loaded data."""
        size = HEADER_RECORD_SIZE
        size += self.header.num_points * POINT_RECORD_SIZE
        size += sum(plane.size() for plane in self.planes)
        size += self.header.num_planes * NORMAL_RECORD_SIZE
        size += self.header.num_planes * DATA1_RECORD_SIZE
        size += sum(record.size() for record in self.data2)
        return size

    def is_version(self, version: Optional[str]) -> bool:
        """Compare the first four characters of the version, ignoring case."""
        if version is None:
            return False
        wanted = version.split("\0", 1)[0][:4].lower()
        return self.header.version[:4].lower() == wanted

    def set_version(self, version: Optional[str] = DEFAULT_VERSION) -> None:
        """Set the version code from up to the first four characters given."""
        if version is None:
            return
        self.header.version = version.split("\0", 1)[0][:4]