# dfbsa

Tools for reading the BSA archive files used by the game Daggerfall, together
with a reader and writer for the 3D object records stored in `ARCH3D.BSA`.

A BSA archive starts with a record count and a directory type, holds its
records back to back, and ends with a directory. The directory names each
record either by a short filename or by a numeric value.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Command line

Installing the package provides the `dfbsa` command:

```
dfbsa dump ARCHIVE
dfbsa list ARCHIVE
dfbsa extract ARCHIVE [-o DIRECTORY] [-v]
```

- `dump` prints the record count, the directory type and the first and last
  five directory entries.
- `list` prints one line per directory entry: index, filename (or value in
  hexadecimal), size and offset, separated by tabs.
- `extract` writes every record to its own file in the output directory
  (`-o/--output`, default the current directory, created if missing).
  Filename archives use each entry's name; value archives use the value in
  hexadecimal followed by `.dat`. `-v/--verbose` reports each record as it is
  written.

Errors are printed to standard error and the command exits with status 1.
Run `dfbsa --help` for the full usage.

## Library use

### Archives

```python
from dfbsa.bsa import BsaFile, BsaError, DirectoryType

with BsaFile("arena2/arch3d.bsa") as archive:
    index = archive.find_value_index(1234)
    data = archive.read_raw_record(index)
    print(archive.record_size(index), archive.record_offset(index))
```

`BsaFile` opens the archive and reads its header and directory; it can be
used as a context manager or with `open()` and `close()`. Once the directory
has been read, methods that need the file open it briefly themselves.

- Lookup by filename (compared case-insensitively on the first 13
  characters): `find_filename_index`, `filename_record_size`.
- Lookup by value: `find_value_index`, `value_record_size`.
- By index: `get_record`, `record_filename`, `record_value`, `record_size`,
  `record_offset`, `is_valid_index`; the `records` property returns all
  `DirectoryRecord` entries.
- `read_raw_record(index)` returns a record's bytes;
  `write_raw_record(stream, index)` copies them to a binary stream;
  `write_raw_record_file(index, directory)` writes them to a file named by
  `raw_record_filename(index)`.
- `extract_records(directory, callback)` writes every record to its own file
  and returns the paths; the callback, if given, is called before each record
  with the index, the record count, the `DirectoryRecord` and the
  `DirectoryType`.
- `dump(stream)` writes a short summary of the directory.

Failed lookups, bad indices and malformed files raise `BsaError`.

### 3D objects

```python
from dfbsa.bsa import BsaFile
from dfbsa.object3d_io import read_object, write_object
from dfbsa.object3d_info import dump, plane_info
import io, sys

with BsaFile("arena2/arch3d.bsa") as archive:
    obj = read_object(io.BytesIO(archive.read_raw_record(0)))

dump(obj, sys.stdout)
print(plane_info(obj, 0))
```

- `dfbsa.object3d_io.read_object(stream)` reads one object from the current
  position of a seekable binary stream, following the section offsets in its
  header, and returns an `Object3D`. `write_object(obj, stream)` writes the
  header and places each section at the offsets the header gives.
- `dfbsa.object3d.Object3D` holds the `header` (an `ObjectHeader`) and the
  lists `points`, `normals`, `planes`, `data1` and `data2`. It offers
  `count_plane_points()`, `get_plane(index)`, `record_size()`,
  `is_version(version)`, `set_version(version)` and `clear()`. Errors raise
  `Object3DError`.
- `dfbsa.object3d_records` defines the binary record types `Point`,
  `PlanePoint`, `Plane`, `Data2Record` and `ObjectHeader`, each with
  `from_bytes` and `to_bytes`.
- `dfbsa.object3d_info` provides `dump(obj, stream)`,
  `dump_header(obj, stream)` and `plane_info(obj, index, max_length)`, which
  returns a text description of one plane and raises `Object3DError` if it
  would reach `max_length` characters.

## What this package does not do

The package does not parse the RMB, RDI or RDB block records held in
`BLOCKS.BSA`; such records can only be read or extracted as raw bytes. It
also does not render 3D objects or build meshes or textures from them, and it
cannot create or modify BSA archives.