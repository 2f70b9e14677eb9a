"""LZ4 block compression as used for log upload and download bodies."""

from __future__ import annotations

import enum

import lz4.block


class CompressType(enum.IntEnum):
    """Body compression used when putting logs; LZ4 is the default."""

    LZ4 = 0
    NONE = 1


def copy_incompressible(src: bytes) -> bytes:
    """Encode ``src`` as an LZ4 block holding a single literal run."""
    length = len(src)
    if length < 0xF:
        header = bytearray([length << 4])
    else:
        header = bytearray([0xF0])
        length -= 0xF
        while length >= 0xFF:
            header.append(0xFF)
            length -= 0xFF
        header.append(length)
    return bytes(header) + bytes(src)


def compress_block(data: bytes) -> bytes:
    """Compress ``data`` into a raw LZ4 block without a size prefix."""
    compressed = lz4.block.compress(bytes(data), store_size=False)
    if not compressed or len(compressed) >= len(data):
        return copy_incompressible(data)
    return compressed


def decompress_block(data: bytes, raw_size: int) -> bytes:
    """Decompress a raw LZ4 block that must expand to exactly ``raw_size`` bytes."""
    if raw_size < 0:
        raise ValueError(f"invalid raw size {raw_size}")
    if raw_size == 0:
        return b""
    try:
        out = lz4.block.decompress(bytes(data), uncompressed_size=raw_size)
    except lz4.block.LZ4BlockError as exc:
        raise ValueError(f"cannot decompress lz4 block: {exc}") from exc
    if len(out) != raw_size:
        raise ValueError(f"decompressed {len(out)} bytes, expected {raw_size}")
    return out