import io

from pdfsmith.image_holder import (
    image_holder_from_bytes,
    image_holder_from_path,
    image_holder_from_reader,
)


def test_empty_bytes_id_is_md5_of_nothing():
    assert image_holder_from_bytes(b"").id == "d41d8cd98f00b204e9800998ecf8427e"


def test_bytes_round_trip():
    holder = image_holder_from_bytes(b"\x89PNG data")
    assert holder.read() == b"\x89PNG data"
    assert holder.read() == b""


def test_partial_read():
    holder = image_holder_from_bytes(b"abcdef")
    assert holder.read(2) == b"ab"
    assert holder.read() == b"cdef"


def test_reader_and_bytes_share_id():
    data = b"some image bytes"
    a = image_holder_from_bytes(data)
    b = image_holder_from_reader(io.BytesIO(data))
    assert a.id == b.id
    assert len(a.id) == 32
    assert b.read() == data


def test_different_data_different_id():
    assert image_holder_from_bytes(b"a").id != image_holder_from_bytes(b"b").id


def test_path_holder(tmp_path):
    path = tmp_path / "img.bin"
    path.write_bytes(b"pixels")
    holder = image_holder_from_path(path)
    assert holder.id == str(path)
    assert holder.read() == b"pixels"