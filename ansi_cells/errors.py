"""Exceptions raised by the cell buffer and renderer."""


class RendererError(Exception):
    pass


class OutOfBoundsError(RendererError, IndexError):
    """A read or write touched a cell outside the buffer."""


class DegenerateBufferError(RendererError, ValueError):
    """The buffer was given a zero or negative dimension."""


class SinkWriteError(RendererError, OSError):
    """The output sink rejected a write or flush."""
