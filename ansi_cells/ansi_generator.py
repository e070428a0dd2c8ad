import torch
from typing import Optional

from .cell_buffer import CellBuffer
from .colors import Color
from .config import (ESC_VALS, SEP_VAL, CUR_END_VAL, SGR_END_VAL, FG_256_PREF_VALS,
                     BG_256_PREF_VALS, CLEAR_SCREEN, GLYPH_ENCODING)
from .utils import setup_lookup

LOOKUP = setup_lookup(256)
_FG_SEQS = [bytes(FG_256_PREF_VALS) + LOOKUP[i] + bytes((SGR_END_VAL,)) for i in range(256)]
_BG_SEQS = [bytes(BG_256_PREF_VALS) + LOOKUP[i] + bytes((SGR_END_VAL,)) for i in range(256)]


def _decimal(n: int) -> bytes:
    return LOOKUP[n] if n < len(LOOKUP) else str(n).encode()


def clear_screen() -> bytes:
    return CLEAR_SCREEN


def cursor_pos(x: int, y: int) -> bytes:
    # Console positions are 1-based
    return bytes(ESC_VALS) + _decimal(y + 1) + bytes((SEP_VAL,)) + _decimal(x + 1) + bytes((CUR_END_VAL,))


def foreground(color: Color) -> bytes:
    return _FG_SEQS[int(color)]


def background(color: Color) -> bytes:
    return _BG_SEQS[int(color)]


def glyph(code: int) -> bytes:
    return chr(code).encode(GLYPH_ENCODING, errors='replace')


def horizontal_offset(columns: Optional[int], rows: int) -> int:
    """
    Left offset for the rendered block: half the terminal width minus half
    the buffer's row count. Unknown terminal width gives 0, and a negative
    result is clamped to 0 so the cursor never leaves the first column.
    """
    if columns is None:
        return 0
    return max(0, int(0.5 * columns) - int(0.5 * rows))


def color_changes(colors: torch.Tensor, initial: Color = Color.BLACK) -> torch.Tensor:
    """Mask over the row-major cells whose color differs from the cell emitted before it."""
    flat = colors.reshape(-1)
    previous = torch.empty_like(flat)
    previous[0] = int(initial)
    previous[1:] = flat[:-1]
    return flat != previous


def ansi_generate(buffer: CellBuffer, left: int) -> tuple[bytes, int, int]:
    """
    Encode the whole buffer as one frame: cursor placement at (left, 0),
    then every row left to right with color sequences only where the color
    changes, and a cursor move to the start of the next row after each row.

    Returns the frame bytes with the number of foreground and background
    sequences it contains.
    """
    fg_mask = color_changes(buffer.fg)
    bg_mask = color_changes(buffer.bg)
    fg_changed = fg_mask.tolist()
    bg_changed = bg_mask.tolist()
    fg_codes = buffer.fg.reshape(-1).tolist()
    bg_codes = buffer.bg.reshape(-1).tolist()
    chars = buffer.chars.reshape(-1).tolist()

    out = bytearray(cursor_pos(left, 0))
    i = 0
    for y in range(buffer.height):
        for _ in range(buffer.width):
            if fg_changed[i]:
                out += _FG_SEQS[fg_codes[i]]
            if bg_changed[i]:
                out += _BG_SEQS[bg_codes[i]]
            out += glyph(chars[i])
            i += 1
        out += cursor_pos(left, y + 1)

    return bytes(out), int(fg_mask.sum()), int(bg_mask.sum())
