import pytest

from dfbsa.object3d import Object3D, Object3DError
from dfbsa.object3d_records import (
    HEADER_RECORD_SIZE,
    POINT_RECORD_SIZE,
    Data2Record,
    Plane,
    PlanePoint,
    Point,
)


def _plane(count):
    return Plane(texture_index=2, points=[PlanePoint(point_offset=12 * i) for i in range(count)])


def test_new_object_has_default_version_and_no_data():
    obj = Object3D()
    assert obj.version == "v2.7"
    assert obj.num_points == 0
    assert obj.num_planes == 0
    assert obj.planes == []


def test_empty_record_size_is_header_size():
    assert Object3D().record_size() == HEADER_RECORD_SIZE


def test_record_size_grows_with_points():
    obj = Object3D()
    base = obj.record_size()
    obj.header.num_points = 3
    assert obj.record_size() - base == 3 * POINT_RECORD_SIZE


def test_record_size_grows_with_planes_and_data2():
    obj = Object3D()
    base = obj.record_size()
    plane = _plane(4)
    obj.planes.append(plane)
    assert obj.record_size() - base == plane.size()
    record = Data2Record(sub_records=[b"abcdef", b"ghijkl"])
    obj.data2.append(record)
    assert obj.record_size() - base == plane.size() + record.size()


def test_count_plane_points_sums_all_planes():
    obj = Object3D()
    obj.planes = [_plane(3), _plane(4), _plane(0)]
    assert obj.count_plane_points() == sum(p.point_count for p in obj.planes)
    assert obj.count_plane_points() == 7


def test_get_plane_returns_plane():
    obj = Object3D()
    first, second = _plane(1), _plane(2)
    obj.planes = [first, second]
    assert obj.get_plane(1) is second


@pytest.mark.parametrize("index", [-1, 0, 5])
def test_get_plane_invalid_index_raises(index):
    with pytest.raises(Object3DError):
        Object3D().get_plane(index)


def test_set_version_keeps_first_four_characters():
    obj = Object3D()
    obj.set_version("v2.512345")
    assert obj.version == "v2.5"
    assert obj.is_version("v2.5")


def test_set_version_stops_at_nul():
    obj = Object3D()
    obj.set_version("v2\0xx")
    assert obj.version == "v2"


def test_set_version_none_is_ignored():
    obj = Object3D()
    obj.set_version("v2.5")
    obj.set_version(None)
    assert obj.version == "v2.5"


def test_set_version_default_restores():
    obj = Object3D()
    obj.set_version("v2.5")
    obj.set_version()
    assert obj.version == "v2.7"


def test_is_version_ignores_case_and_mismatches():
    obj = Object3D()
    assert obj.is_version("V2.7")
    assert not obj.is_version("v2.5")
    assert not obj.is_version("v2")
    assert not obj.is_version(None)


def test_clear_resets_counts_data_and_version():
    obj = Object3D()
    obj.set_version("v2.5")
    obj.header.num_points = 2
    obj.header.num_planes = 1
    obj.header.num_data2_records = 1
    obj.header.point_offset = 64
    obj.points = [Point(1, 2, 3), Point(4, 5, 6)]
    obj.planes = [_plane(2)]
    obj.data2 = [Data2Record()]
    obj.clear()
    assert obj.version == "v2.7"
    assert obj.num_points == 0
    assert obj.num_planes == 0
    assert obj.num_data2_records == 0
    assert obj.points == [] and obj.planes == [] and obj.data2 == []
    assert obj.header.point_offset == 64
    assert obj.record_size() == HEADER_RECORD_SIZE