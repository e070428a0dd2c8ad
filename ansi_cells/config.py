import torch
from dataclasses import dataclass
from typing import Optional

DEVICE = torch.device('cpu')

ESC_VALS = (27, 91)  # \e[
SEP_VAL = 59  # ;
CUR_END_VAL = 72  # H
SGR_END_VAL = 109  # m
FG_256_PREF_VALS = (27, 91, 51, 56, 59, 53, 59)  # \e[38;5;
BG_256_PREF_VALS = (27, 91, 52, 56, 59, 53, 59)  # \e[48;5;
RESET_VALS = (27, 91, 48, 109)  # \e[0m
HIDE_CURSOR = b"\033[?25l"
SHOW_CURSOR = b"\033[?25h"
CLEAR_SCREEN = b"\033[2J"
ENABLE_ALT_BUFFER = b"\033[?1049h"
DISABLE_ALT_BUFFER = b"\033[?1049l"

GLYPH_ENCODING = "utf-8"


@dataclass
class Config:
    width: int
    height: int
    device: torch.device = DEVICE
    fallback_width: Optional[int] = None
    hide_cursor: bool = True
    alt_buffer: bool = False
    fps: float = 30.0
