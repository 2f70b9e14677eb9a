import os

import pytest

from slslog.compression import (
    CompressType,
    compress_block,
    copy_incompressible,
    decompress_block,
)


def test_default_compress_type_is_lz4():
    assert CompressType(0) is CompressType.LZ4
    assert len(CompressType) == 2


def test_copy_incompressible_short_literal():
    assert copy_incompressible(b"abc") == b"\x30abc"


def test_copy_incompressible_extended_length_header():
    out = copy_incompressible(bytes(15))
    assert out[:2] == b"\xf0\x00"
    assert len(out) == 17


@pytest.mark.parametrize("size", [0, 1, 14, 15, 16, 269, 270, 600])
def test_copy_incompressible_round_trip(size):
    data = os.urandom(size)
    encoded = copy_incompressible(data)
    assert encoded.endswith(data)
    assert decompress_block(encoded, size) == data


@pytest.mark.parametrize(
    "data",
    [b"hello world " * 200, os.urandom(1000), b"x", b"key=value;" * 50],
)
def test_compress_round_trip(data):
    assert decompress_block(compress_block(data), len(data)) == data


def test_compress_shrinks_repetitive_data():
    data = b"a" * 4096
    assert len(compress_block(data)) < len(data)


def test_decompress_zero_size_is_empty():
    assert decompress_block(b"anything", 0) == b""


def test_decompress_wrong_size_raises():
    data = b"hello world " * 50
    with pytest.raises(ValueError):
        decompress_block(compress_block(data), len(data) + 10)


def test_decompress_negative_size_raises():
    with pytest.raises(ValueError):
        decompress_block(b"\x10a", -1)