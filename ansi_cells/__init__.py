# ANSI Cells Package
# This package renders a grid of colored character cells to a terminal as ANSI escape sequences

from .ansi_renderer import AnsiRenderer, RenderStats
from .cell_buffer import BLANK_CELL, Cell, CellBuffer
from .colors import Color
from .config import Config
from .errors import DegenerateBufferError, OutOfBoundsError, RendererError, SinkWriteError
from .logging_setup import configure_logging

__all__ = [
    'AnsiRenderer',
    'RenderStats',
    'BLANK_CELL',
    'Cell',
    'CellBuffer',
    'Color',
    'Config',
    'DegenerateBufferError',
    'OutOfBoundsError',
    'RendererError',
    'SinkWriteError',
    'configure_logging',
]
