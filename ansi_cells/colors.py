from enum import IntEnum


class Color(IntEnum):
    """Terminal colors, valued by their index in the 256-color palette."""

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7
    BRIGHT_BLACK = 8
    BRIGHT_RED = 9
    BRIGHT_GREEN = 10
    BRIGHT_YELLOW = 11
    BRIGHT_BLUE = 12
    BRIGHT_MAGENTA = 13
    BRIGHT_CYAN = 14
    BRIGHT_WHITE = 15
    ORANGE = 208
    GREY = 244

    @classmethod
    def parse(cls, name: str) -> "Color":
        key = name.strip().upper().replace('-', '_')
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown color: {name}") from None
