import struct

import pytest

from dfbsa.object3d_records import (
    DATA2_HEADER_SIZE,
    DATA2_SUBRECORD_SIZE,
    HEADER_RECORD_SIZE,
    MAX_DATA2,
    MAX_PLANE_POINTS,
    PLANE_HEADER_SIZE,
    PLANE_POINT_SIZE,
    POINT_RECORD_SIZE,
    Data2Record,
    ObjectHeader,
    Plane,
    PlanePoint,
    Point,
)


def test_point_wire_format():
    assert Point(1, 2, 3).to_bytes() == struct.pack("<iii", 1, 2, 3)


def test_point_round_trip_negative():
    point = Point(-5, 70000, -123456)
    data = point.to_bytes()
    assert len(data) == POINT_RECORD_SIZE
    assert Point.from_bytes(data) == point


def test_point_short_data_raises():
    with pytest.raises(ValueError):
        Point.from_bytes(b"\x00" * (POINT_RECORD_SIZE - 1))


def test_plane_point_round_trip():
    pp = PlanePoint(point_offset=24, unknown=-1)
    assert PlanePoint.from_bytes(pp.to_bytes()) == pp
    assert len(pp.to_bytes()) == PLANE_POINT_SIZE


def test_plane_round_trip_and_size():
    plane = Plane(
        unknown1=7,
        sub_image_index=3,
        texture_index=2,
        unknown2=-9,
        points=[PlanePoint(0, 1), PlanePoint(12, 2), PlanePoint(24, 3)],
    )
    data = plane.to_bytes()
    assert len(data) == plane.size()
    assert plane.size() == PLANE_HEADER_SIZE + PLANE_POINT_SIZE * 3
    assert data[0] == plane.point_count
    assert Plane.from_bytes(data) == plane


def test_plane_texture_bitfield_layout():
    data = Plane(sub_image_index=3, texture_index=2).to_bytes()
    assert data[2:4] == b"\x03\x01"


def test_plane_ignores_trailing_bytes():
    plane = Plane(points=[PlanePoint(36, 0)])
    assert Plane.from_bytes(plane.to_bytes() + b"extra") == plane


def test_plane_truncated_raises():
    data = Plane(points=[PlanePoint(1, 1), PlanePoint(2, 2)]).to_bytes()
    with pytest.raises(ValueError):
        Plane.from_bytes(data[:-1])


def test_plane_too_many_points_raises():
    data = bytes([MAX_PLANE_POINTS + 1]) + b"\x00" * 1000
    with pytest.raises(ValueError):
        Plane.from_bytes(data)
    with pytest.raises(ValueError):
        Plane(points=[PlanePoint()] * (MAX_PLANE_POINTS + 1)).to_bytes()


def test_plane_rejects_out_of_range_texture():
    with pytest.raises(ValueError):
        Plane(texture_index=1 << 9).to_bytes()
    with pytest.raises(ValueError):
        Plane(sub_image_index=1 << 7).to_bytes()


def test_data2_round_trip_and_size():
    record = Data2Record(unknown=(1, -2, 3, -4), sub_records=[b"abcdef", b"ghijkl"])
    data = record.to_bytes()
    assert len(data) == record.size()
    assert record.size() == DATA2_HEADER_SIZE + DATA2_SUBRECORD_SIZE * 2
    assert Data2Record.from_bytes(data) == record


def test_data2_empty_record():
    record = Data2Record()
    assert record.size() == DATA2_HEADER_SIZE
    assert Data2Record.from_bytes(record.to_bytes()) == record


def test_data2_invalid_count_raises():
    too_many = struct.pack("<4ih", 0, 0, 0, 0, MAX_DATA2)
    negative = struct.pack("<4ih", 0, 0, 0, 0, -1)
    with pytest.raises(ValueError):
        Data2Record.from_bytes(too_many + b"\x00" * (MAX_DATA2 * DATA2_SUBRECORD_SIZE))
    with pytest.raises(ValueError):
        Data2Record.from_bytes(negative)


def test_data2_bad_subrecord_length_raises():
    with pytest.raises(ValueError):
        Data2Record(sub_records=[b"abc"]).to_bytes()


def test_header_default_version_and_size():
    header = ObjectHeader()
    data = header.to_bytes()
    assert len(data) == HEADER_RECORD_SIZE
    assert data[:4] == b"v2.7"
    assert ObjectHeader.from_bytes(data).version == "v2.7"


def test_header_round_trip():
    header = ObjectHeader(
        version="v2.5",
        num_points=10,
        num_planes=4,
        data1_offset=100,
        data2_offset=200,
        num_data2_records=2,
        unknown3=-1,
        point_offset=64,
        normal_offset=300,
        plane_offset=184,
    )
    assert ObjectHeader.from_bytes(header.to_bytes()) == header


def test_header_short_version_padded():
    data = ObjectHeader(version="v2").to_bytes()
    assert data[:4] == b"v2\x00\x00"
    assert ObjectHeader.from_bytes(data).version == "v2"


def test_header_short_data_raises():
    with pytest.raises(ValueError):
        ObjectHeader.from_bytes(b"\x00" * (HEADER_RECORD_SIZE - 1))