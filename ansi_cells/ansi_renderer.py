from dataclasses import dataclass
from typing import BinaryIO, Callable, Optional

from .ansi_generator import ansi_generate, clear_screen, horizontal_offset
from .cell_buffer import Cell, CellBuffer
from .colors import Color
from .config import Config, DISABLE_ALT_BUFFER, ENABLE_ALT_BUFFER, HIDE_CURSOR, RESET_VALS, SHOW_CURSOR
from .errors import SinkWriteError
from .logging_setup import get_logger
from .utils import flush_sink, terminal_width, write_all

logger = get_logger()


@dataclass(frozen=True)
class RenderStats:
    left: int
    bytes_written: int
    fg_changes: int
    bg_changes: int


class AnsiRenderer:
    """
    Owns a cell buffer and an output sink. Callers draw with ``set_text``
    and push the whole buffer to the terminal with ``render``.
    """

    def __init__(self,
                 width: int,
                 height: int,
                 sink: BinaryIO,
                 config: Optional[Config] = None,
                 width_query: Optional[Callable[[], Optional[int]]] = None):
        if config is not None and (config.width, config.height) != (width, height):
            raise ValueError(
                f"Config size {config.width}x{config.height} does not match renderer size {width}x{height}")
        self.config = config or Config(width=width, height=height)
        self.buffer = CellBuffer(width, height, self.config.device)
        self.sink = sink
        self.width_query = width_query or (lambda: terminal_width(sink))
        self._alt_active = False
        logger.debug("renderer created %dx%d", width, height, extra={"event": "renderer_created"})

    @classmethod
    def from_config(cls, config: Config, sink: BinaryIO,
                    width_query: Optional[Callable[[], Optional[int]]] = None) -> "AnsiRenderer":
        return cls(config.width, config.height, sink, config=config, width_query=width_query)

    def set_text(self, text: str, x: int, y: int,
                 fg: Color = Color.WHITE, bg: Color = Color.BLACK) -> None:
        self.buffer.write_cells(y, x, text, fg, bg)

    def clear_buffer(self) -> None:
        self.buffer.reset_all()

    def cell(self, x: int, y: int) -> Cell:
        return self.buffer.cell(x, y)

    def clear_screen(self) -> None:
        self._write(clear_screen())
        self._flush()

    def render(self) -> RenderStats:
        self.clear_screen()

        columns = self.width_query()
        if columns is None:
            columns = self.config.fallback_width
        left = horizontal_offset(columns, self.buffer.height)

        frame, fg_changes, bg_changes = ansi_generate(self.buffer, left)
        self._write(frame)
        self._flush()

        stats = RenderStats(
            left=left,
            bytes_written=len(clear_screen()) + len(frame),
            fg_changes=fg_changes,
            bg_changes=bg_changes,
        )
        logger.debug(
            "frame rendered left=%d bytes=%d fg_changes=%d bg_changes=%d",
            left, stats.bytes_written, fg_changes, bg_changes,
            extra={"event": "frame_rendered"},
        )
        return stats

    def enter(self) -> None:
        data = b""
        if self.config.hide_cursor:
            data += HIDE_CURSOR
        if self.config.alt_buffer:
            data += ENABLE_ALT_BUFFER
            self._alt_active = True
        self._write(data)
        self._flush()
        logger.debug("terminal session entered", extra={"event": "session_entered"})

    def leave(self) -> None:
        data = bytes(RESET_VALS)
        if self.config.hide_cursor:
            data += SHOW_CURSOR
        if self._alt_active:
            data += DISABLE_ALT_BUFFER
            self._alt_active = False
        self._write(data)
        self._flush()
        logger.debug("terminal session left", extra={"event": "session_left"})

    def __enter__(self) -> "AnsiRenderer":
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.leave()

    def _write(self, data: bytes) -> None:
        try:
            write_all(self.sink, data)
        except SinkWriteError:
            logger.error("write to output sink failed", exc_info=True, extra={"event": "sink_write_failed"})
            raise

    def _flush(self) -> None:
        try:
            flush_sink(self.sink)
        except SinkWriteError:
            logger.error("flush of output sink failed", exc_info=True, extra={"event": "sink_flush_failed"})
            raise
