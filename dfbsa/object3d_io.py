"""Reading and writing 3D object records from and to binary streams."""

from __future__ import annotations

import struct
from typing import BinaryIO

from .object3d import Object3D, Object3DError
from .object3d_records import (
    DATA1_RECORD_SIZE,
    DATA2_HEADER_SIZE,
    DATA2_SUBRECORD_SIZE,
    HEADER_RECORD_SIZE,
    MAX_DATA2,
    MAX_PLANES,
    MAX_POINTS,
    NORMAL_RECORD_SIZE,
    PLANE_HEADER_SIZE,
    PLANE_POINT_SIZE,
    POINT_RECORD_SIZE,
    Data2Record,
    ObjectHeader,
    Plane,
    Point,
)

_DATA2_COUNT = struct.Struct("<h")


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise Object3DError(f"Failed to read the {what} ({len(data)} of {size} bytes)!")
    return data


def _check_counts(header: ObjectHeader) -> None:
    if not 0 <= header.num_points <= MAX_POINTS:
        raise Object3DError(f"Invalid number of points ({header.num_points})!")
    if not 0 <= header.num_planes <= MAX_PLANES:
        raise Object3DError(f"Invalid number of planes ({header.num_planes})!")
    if not 0 <= header.num_data2_records <= MAX_DATA2:
        raise Object3DError(f"Invalid number of Data2 records ({header.num_data2_records})!")


def _read_points(stream: BinaryIO, count: int, size: int, what: str) -> list[Point]:
    data = _read_exact(stream, size * count, what)
    return [Point.from_bytes(data[start : start + size]) for start in range(0, len(data), size)]


def _read_plane(stream: BinaryIO) -> Plane:
    head = _read_exact(stream, PLANE_HEADER_SIZE, "face data")
    count = head[0]
    body = _read_exact(stream, PLANE_POINT_SIZE * count, "face data")
    try:
        return Plane.from_bytes(head + body)
    except ValueError as exc:
        raise Object3DError(str(exc)) from exc


def _read_data2(stream: BinaryIO) -> Data2Record:
    head = _read_exact(stream, DATA2_HEADER_SIZE, "first 18 bytes of the Data2 section")
    (count,) = _DATA2_COUNT.unpack_from(head, DATA2_HEADER_SIZE - _DATA2_COUNT.size)
    if count < 0 or count >= MAX_DATA2:
        raise Object3DError(f"Invalid number of Data2 subrecords read ({count})!")
    body = _read_exact(stream, DATA2_SUBRECORD_SIZE * count, "Data2 subrecords")
    return Data2Record.from_bytes(head + body)


def read_object(stream: BinaryIO) -> Object3D:
    """Read a 3D object starting at the current position of a seekable stream."""
    obj = Object3D()
    start = stream.tell()
    if start < 0:
        raise Object3DError(f"Error reading record offset ({start})!")

    header = ObjectHeader.from_bytes(_read_exact(stream, HEADER_RECORD_SIZE, "header information"))
    _check_counts(header)
    obj.header = header

    stream.seek(start + header.point_offset)
    obj.points = _read_points(stream, header.num_points, POINT_RECORD_SIZE, "points data")

    stream.seek(start + header.plane_offset)
    obj.planes = [_read_plane(stream) for _ in range(header.num_planes)]

    stream.seek(start + header.normal_offset)
    obj.normals = _read_points(stream, header.num_planes, NORMAL_RECORD_SIZE, "normals data")

    stream.seek(start + header.data1_offset)
    obj.data1 = [
        _read_exact(stream, DATA1_RECORD_SIZE, "Data1 section information")
        for _ in range(header.num_planes)
    ]

    stream.seek(start + header.data2_offset)
    obj.data2 = [_read_data2(stream) for _ in range(header.num_data2_records)]
    return obj


def _write(stream: BinaryIO, data: bytes, what: str) -> None:
    written = stream.write(data)
    if written is not None and written != len(data):
        raise Object3DError(f"Failed to write {what} ({written} of {len(data)} bytes)!")


def write_object(obj: Object3D, stream: BinaryIO) -> None:
    """Write a 3D object at the current position of a seekable stream.

    Sections are placed at the offsets given in the header.
    """
    header = obj.header
    _check_counts(header)
    if len(obj.points) < header.num_points:
        raise Object3DError(
            f"Failed to write the points data ({len(obj.points)} of {header.num_points} points)!"
        )
    if len(obj.normals) < header.num_planes:
        raise Object3DError(
            f"Failed to write the normals data ({len(obj.normals)} of {header.num_planes} normals)!"
        )
    if len(obj.data1) < header.num_planes:
        raise Object3DError(
            f"Failed to write Data1 section information "
            f"({len(obj.data1)} of {header.num_planes} records)!"
        )
    if any(len(record) != DATA1_RECORD_SIZE for record in obj.data1[: header.num_planes]):
        raise Object3DError(f"Data1 records must be {DATA1_RECORD_SIZE} bytes!")

    start = stream.tell()
    if start < 0:
        raise Object3DError(f"Invalid starting offset received ({start})!")

    try:
        _write(stream, header.to_bytes(), "header section information")

        stream.seek(start + header.point_offset)
        _write(
            stream,
            b"".join(point.to_bytes() for point in obj.points[: header.num_points]),
            "points data",
        )

        stream.seek(start + header.plane_offset)
        _write(stream, b"".join(plane.to_bytes() for plane in obj.planes), "face data")

        stream.seek(start + header.normal_offset)
        _write(
            stream,
            b"".join(normal.to_bytes() for normal in obj.normals[: header.num_planes]),
            "normals data",
        )

        stream.seek(start + header.data1_offset)
        _write(stream, b"".join(obj.data1[: header.num_planes]), "Data1 section information")

        stream.seek(start + header.data2_offset)
        _write(stream, b"".join(record.to_bytes() for record in obj.data2), "Data2 section")
    except (ValueError, struct.error) as exc:
        raise Object3DError(str(exc)) from exc