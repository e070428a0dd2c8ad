import io
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT))

from ansi_cells import AnsiRenderer, BLANK_CELL, Cell, Color, Config, OutOfBoundsError, SinkWriteError
from ansi_cells.config import CLEAR_SCREEN, DISABLE_ALT_BUFFER, ENABLE_ALT_BUFFER, HIDE_CURSOR, SHOW_CURSOR

FG_PREFIX = b"\x1b[38;5;"
BG_PREFIX = b"\x1b[48;5;"


class BrokenSink:
    def __init__(self, fail_on="write"):
        self.fail_on = fail_on

    def write(self, data):
        if self.fail_on == "write":
            raise OSError("broken pipe")
        return len(data)

    def flush(self):
        if self.fail_on == "flush":
            raise OSError("broken pipe")


class StalledSink(io.BytesIO):
    def write(self, data):
        return 0


class NoCountSink:
    """Accepts every write but, like some raw streams, returns None from write."""

    def __init__(self):
        self.data = bytearray()

    def write(self, data):
        self.data += data

    def flush(self):
        pass


def make_renderer(width, height, columns=None, **config):
    sink = io.BytesIO()
    cfg = Config(width=width, height=height, **config)
    return AnsiRenderer.from_config(cfg, sink, width_query=lambda: columns), sink


class MutationTests(unittest.TestCase):
    def test_set_text_then_read_back(self):
        renderer, sink = make_renderer(4, 2)
        renderer.set_text("AB", 0, 0, Color.RED, Color.BLUE)
        self.assertEqual(renderer.cell(0, 0), Cell('A', Color.RED, Color.BLUE))
        self.assertEqual(renderer.cell(1, 0), Cell('B', Color.RED, Color.BLUE))
        self.assertEqual(renderer.cell(2, 0), BLANK_CELL)
        self.assertEqual(sink.getvalue(), b"")

    def test_set_text_past_row_end_fails(self):
        renderer, _ = make_renderer(4, 2)
        with self.assertRaises(OutOfBoundsError):
            renderer.set_text("hello", 0, 0, Color.RED, Color.BLUE)
        for x in range(4):
            self.assertEqual(renderer.cell(x, 0), BLANK_CELL)

    def test_clear_buffer_restores_blank(self):
        renderer, sink = make_renderer(3, 2)
        renderer.set_text("abc", 0, 1, Color.GREEN, Color.MAGENTA)
        renderer.clear_buffer()
        for y in range(2):
            for x in range(3):
                self.assertEqual(renderer.cell(x, y), BLANK_CELL)
        self.assertEqual(sink.getvalue(), b"")


class OutputTests(unittest.TestCase):
    def test_clear_screen(self):
        renderer, sink = make_renderer(2, 2)
        renderer.set_text("x", 0, 0)
        renderer.clear_screen()
        self.assertEqual(sink.getvalue(), CLEAR_SCREEN)
        self.assertEqual(renderer.cell(0, 0).char, "x")

    def test_exact_frame(self):
        renderer, sink = make_renderer(3, 2, columns=20)
        renderer.set_text("Hi", 0, 0, Color.RED, Color.BLUE)
        stats = renderer.render()
        expected = (
            b"\x1b[2J"
            b"\x1b[1;10H"
            b"\x1b[38;5;1m\x1b[48;5;4mHi"
            b"\x1b[38;5;0m\x1b[48;5;0m "
            b"\x1b[2;10H"
            b"   "
            b"\x1b[3;10H"
        )
        self.assertEqual(sink.getvalue(), expected)
        self.assertEqual(stats.bytes_written, len(expected))
        self.assertEqual((stats.fg_changes, stats.bg_changes), (2, 2))

    def test_non_square_offset_uses_row_count(self):
        renderer, sink = make_renderer(10, 4, columns=80)
        stats = renderer.render()
        self.assertEqual(stats.left, 38)
        self.assertTrue(sink.getvalue().startswith(CLEAR_SCREEN + b"\x1b[1;39H"))

    def test_unknown_width_uses_fallback_then_zero(self):
        renderer, sink = make_renderer(4, 4, columns=None, fallback_width=50)
        self.assertEqual(renderer.render().left, 23)
        renderer, sink = make_renderer(4, 4, columns=None)
        renderer.render()
        self.assertTrue(sink.getvalue().startswith(CLEAR_SCREEN + b"\x1b[1;1H"))

    def test_single_color_buffer_emits_one_change_each(self):
        renderer, sink = make_renderer(20, 10, columns=100)
        for y in range(10):
            renderer.set_text("#" * 20, 0, y, Color.GREEN, Color.BLUE)
        stats = renderer.render()
        output = sink.getvalue()
        self.assertEqual(output.count(FG_PREFIX), 1)
        self.assertEqual(output.count(BG_PREFIX), 1)
        self.assertEqual(output.count(b"#"), 200)
        self.assertEqual((stats.fg_changes, stats.bg_changes), (1, 1))

    def test_alternating_colors_emit_every_cell(self):
        k = 9
        renderer, sink = make_renderer(k, 1)
        for x in range(k):
            renderer.set_text("o", x, 0, Color.RED if x % 2 == 0 else Color.GREEN, Color.BLACK)
        stats = renderer.render()
        self.assertEqual(sink.getvalue().count(FG_PREFIX), k)
        self.assertEqual(sink.getvalue().count(BG_PREFIX), 0)
        self.assertEqual(stats.fg_changes, k)

    def test_erase_screen_once_before_cells(self):
        renderer, sink = make_renderer(5, 3, columns=40)
        renderer.set_text("cells", 0, 1, Color.WHITE, Color.BLACK)
        renderer.render()
        output = sink.getvalue()
        self.assertEqual(output.count(CLEAR_SCREEN), 1)
        self.assertTrue(output.startswith(CLEAR_SCREEN))
        self.assertLess(output.index(CLEAR_SCREEN), output.index(b"cells"))

    def test_render_does_not_touch_buffer(self):
        renderer, _ = make_renderer(3, 1)
        renderer.set_text("abc", 0, 0, Color.YELLOW, Color.BLUE)
        renderer.render()
        renderer.render()
        self.assertEqual(renderer.buffer.row_text(0), "abc")
        self.assertEqual(renderer.cell(2, 0), Cell('c', Color.YELLOW, Color.BLUE))


class UncountedWriteTests(unittest.TestCase):
    def test_sink_returning_none_gets_whole_frame(self):
        sink = NoCountSink()
        renderer = AnsiRenderer(2, 1, sink, width_query=lambda: None)
        renderer.set_text("ok", 0, 0, Color.RED, Color.BLUE)
        stats = renderer.render()
        reference, expected = make_renderer(2, 1)
        reference.set_text("ok", 0, 0, Color.RED, Color.BLUE)
        reference.render()
        self.assertEqual(bytes(sink.data), expected.getvalue())
        self.assertEqual(stats.bytes_written, len(sink.data))

    def test_sink_returning_none_across_chunks(self):
        sink = NoCountSink()
        renderer = AnsiRenderer(300, 300, sink, width_query=lambda: None)
        stats = renderer.render()
        self.assertGreater(stats.bytes_written, 65536)
        self.assertEqual(len(sink.data), stats.bytes_written)
        self.assertEqual(sink.data.count(b" "), 300 * 300)


class SinkFailureTests(unittest.TestCase):
    def test_write_failure_is_reported(self):
        renderer = AnsiRenderer(2, 2, BrokenSink("write"), width_query=lambda: None)
        with self.assertRaises(SinkWriteError) as ctx:
            renderer.render()
        self.assertIsInstance(ctx.exception.__cause__, OSError)

    def test_flush_failure_is_reported(self):
        renderer = AnsiRenderer(2, 2, BrokenSink("flush"), width_query=lambda: None)
        with self.assertRaises(SinkWriteError):
            renderer.clear_screen()

    def test_closed_sink(self):
        sink = io.BytesIO()
        sink.close()
        renderer = AnsiRenderer(2, 2, sink, width_query=lambda: None)
        with self.assertRaises(OSError):
            renderer.clear_screen()

    def test_sink_accepting_nothing(self):
        renderer = AnsiRenderer(2, 2, StalledSink(), width_query=lambda: None)
        with self.assertRaises(SinkWriteError):
            renderer.render()


class ConstructionTests(unittest.TestCase):
    def test_config_size_must_match(self):
        with self.assertRaises(ValueError):
            AnsiRenderer(3, 2, io.BytesIO(), config=Config(width=5, height=5))

    def test_from_config_sizes_buffer(self):
        renderer = AnsiRenderer.from_config(Config(width=5, height=3), io.BytesIO())
        self.assertEqual(renderer.buffer.shape, (3, 5))

    def test_render_log_is_formatted_lazily(self):
        renderer, _ = make_renderer(4, 2, columns=20)
        with self.assertLogs("ansi_cells", level="DEBUG") as logs:
            stats = renderer.render()
        record = logs.records[-1]
        self.assertIn("%d", record.msg)
        self.assertEqual(record.args, (stats.left, stats.bytes_written, stats.fg_changes, stats.bg_changes))


class SessionTests(unittest.TestCase):
    def test_context_manager_restores_terminal(self):
        renderer, sink = make_renderer(2, 1, alt_buffer=True)
        with renderer:
            self.assertEqual(sink.getvalue(), HIDE_CURSOR + ENABLE_ALT_BUFFER)
        self.assertTrue(sink.getvalue().endswith(b"\x1b[0m" + SHOW_CURSOR + DISABLE_ALT_BUFFER))

    def test_leave_without_alt_buffer(self):
        renderer, sink = make_renderer(2, 1, hide_cursor=False)
        renderer.enter()
        renderer.leave()
        self.assertEqual(sink.getvalue(), b"\x1b[0m")


if __name__ == "__main__":
    unittest.main()
