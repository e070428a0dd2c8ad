from dataclasses import dataclass
from typing import Optional

import torch

from .colors import Color
from .config import DEVICE
from .errors import DegenerateBufferError, OutOfBoundsError

BLANK_CHAR = ' '


@dataclass(frozen=True)
class Cell:
    char: str = BLANK_CHAR
    fg: Color = Color.BLACK
    bg: Color = Color.BLACK


BLANK_CELL = Cell()


class CellBuffer:
    """
    Fixed-size grid of cells held as three (height, width) tensors:
    code points in ``chars`` and 256-color indices in ``fg`` and ``bg``.
    The tensors are allocated once and only ever written in place.
    """

    def __init__(self, width: int, height: int, device: Optional[torch.device] = None):
        if width <= 0 or height <= 0:
            raise DegenerateBufferError(f"Buffer dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.device = device or DEVICE
        self.chars = torch.full((height, width), ord(BLANK_CHAR), dtype=torch.int32, device=self.device)
        self.fg = torch.full((height, width), int(Color.BLACK), dtype=torch.uint8, device=self.device)
        self.bg = torch.full((height, width), int(Color.BLACK), dtype=torch.uint8, device=self.device)

    @property
    def shape(self) -> tuple[int, int]:
        return self.height, self.width

    def write_cells(self, row: int, start_column: int, characters: str, fg: Color, bg: Color) -> None:
        fg, bg = Color(fg), Color(bg)
        end = start_column + len(characters)
        if not 0 <= row < self.height:
            raise OutOfBoundsError(f"Row {row} outside buffer of height {self.height}")
        if start_column < 0 or end > self.width:
            raise OutOfBoundsError(
                f"Span [{start_column}, {end}) outside row of width {self.width}")
        if not characters:
            return

        codes = torch.tensor([ord(c) for c in characters], dtype=torch.int32, device=self.device)
        self.chars[row, start_column:end] = codes
        self.fg[row, start_column:end] = int(fg)
        self.bg[row, start_column:end] = int(bg)

    def reset_all(self) -> None:
        self.chars.fill_(ord(BLANK_CHAR))
        self.fg.fill_(int(Color.BLACK))
        self.bg.fill_(int(Color.BLACK))

    def cell(self, x: int, y: int) -> Cell:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfBoundsError(f"Cell ({x}, {y}) outside {self.width}x{self.height} buffer")
        return Cell(
            char=chr(int(self.chars[y, x])),
            fg=Color(int(self.fg[y, x])),
            bg=Color(int(self.bg[y, x])),
        )

    def row_text(self, y: int) -> str:
        if not 0 <= y < self.height:
            raise OutOfBoundsError(f"Row {y} outside buffer of height {self.height}")
        return ''.join(chr(c) for c in self.chars[y].tolist())
