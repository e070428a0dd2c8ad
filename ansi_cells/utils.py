import os
import sys
from typing import BinaryIO, Optional

from .errors import SinkWriteError


def write_all(sink: BinaryIO, data: bytes) -> None:
    """Write all data to sink, handling partial writes."""
    if not data:
        return
    BUFFER_SIZE = 65536
    view = memoryview(data)
    total = 0
    remaining = len(data)

    while remaining > 0:
        chunk_size = min(remaining, BUFFER_SIZE)
        try:
            written = sink.write(view[total:total + chunk_size])
        except (OSError, ValueError) as e:
            raise SinkWriteError(f"Write to output sink failed: {e}") from e
        if written is None:
            written = chunk_size
        elif written == 0:
            raise SinkWriteError("Output sink accepted no bytes")
        total += written
        remaining -= written


def flush_sink(sink: BinaryIO) -> None:
    try:
        sink.flush()
    except (OSError, ValueError) as e:
        raise SinkWriteError(f"Flush of output sink failed: {e}") from e


def setup_lookup(max_val: int) -> list[bytes]:
    return [str(i).encode() for i in range(max_val)]


def terminal_width(stream=None) -> Optional[int]:
    """Column count of the terminal behind stream, or None when it is not a tty."""
    stream = stream if stream is not None else sys.stdout
    try:
        if not stream.isatty():
            return None
        return os.get_terminal_size(stream.fileno()).columns
    except (AttributeError, OSError, ValueError):
        return None
