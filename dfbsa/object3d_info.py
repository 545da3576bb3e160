"""Human readable descriptions of 3D objects and their planes."""

from __future__ import annotations

from typing import Optional, TextIO

from .object3d import Object3D, Object3DError


def _long(value: int) -> str:
    return f"0x{value & 0xFFFFFFFF:08X}"


def _short(value: int) -> str:
    return f"0x{value & 0xFFFF:04X}"


def dump(obj: Object3D, stream: TextIO) -> None:
    """Write the record placement and header of an object."""
    index = obj.bsa_record_index
    stream.write("3D Object\n")
    stream.write(f"\tBSARecordIndex  = {index} (0x{index & 0xFFFF:04X})\n")
    stream.write(f"\tBSARecordOffset = {_long(obj.bsa_record_offset)}\n")
    stream.write(f"\tBSARecordSize   = {_long(obj.bsa_record_size)}\n")
    stream.write(f"\tBSARecordID     = {_long(obj.bsa_record_id)}\n")
    dump_header(obj, stream)


def dump_header(obj: Object3D, stream: TextIO) -> None:
    """Write every header field of an object."""
    header = obj.header
    stream.write("\t3D Object Header\n")
    stream.write(f"\t\tVersion = '{header.version:>4}'\n")
    stream.write(f"\t\tNumPoints = {header.num_points}\n")
    stream.write(f"\t\tNumPlanes = {header.num_planes}\n")
    stream.write(f"\t\tUnknown1 = {_long(header.unknown1)}\n")
    stream.write(f"\t\tNullValue1 = {_long(header.null_value1)}\n")
    stream.write(f"\t\tNullValue2 = {_long(header.null_value2)}\n")
    stream.write(f"\t\tData1Offset = {_long(header.data1_offset)}\n")
    stream.write(f"\t\tData2Offset = {_long(header.data2_offset)}\n")
    stream.write(f"\t\tNumData2Records = {header.num_data2_records}\n")
    stream.write(f"\t\tNullValue3 = {_short(header.null_value3)}\n")
    stream.write(f"\t\tUnknown3 = {_short(header.unknown3)}\n")
    stream.write(f"\t\tUnknown4 = {_short(header.unknown4)}\n")
    stream.write(f"\t\tNullValue4 = {_long(header.null_value4)}\n")
    stream.write(f"\t\tNullValue5 = {_long(header.null_value5)}\n")
    stream.write(f"\t\tPointOffset = {_long(header.point_offset)}\n")
    stream.write(f"\t\tNormalOffset = {_long(header.normal_offset)}\n")
    stream.write(f"\t\tUnknown6 = {_long(header.unknown6)}\n")
    stream.write(f"\t\tPlaneOffset = {_long(header.plane_offset)}\n")
    stream.write("\tEnd of Header\n")


def plane_info(obj: Object3D, index: int, max_length: Optional[int] = None) -> str:
    """Describe one plane; the text must stay shorter than max_length if given."""
    if max_length is not None and max_length <= 0:
        raise Object3DError(f"Invalid maximum length {max_length}!")
    plane = obj.get_plane(index)

    lines = [
        f"\tPointCount = {plane.point_count}\n\r",
        f"\tTexture = {plane.texture_index} ({plane.sub_image_index})\n\r",
        f"\tUnknowns = 0x{plane.unknown1 & 0xFF:02X} {_long(plane.unknown2)}\n\r",
    ]
    lines.extend(
        f"\tPointRecord {number}: PointOffset {point.point_offset},  "
        f"Unknown = {_long(point.unknown)}\n\r"
        for number, point in enumerate(plane.points)
    )

    text = f"Plane {index}\n\r"
    for line in lines:
        if max_length is not None and len(text) + len(line) >= max_length:
            raise Object3DError(f"Maximum buffer string length of {max_length} was exceeded!")
        text += line
    return text