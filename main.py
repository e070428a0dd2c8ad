import sys
import argparse
import time

from ansi_cells import AnsiRenderer, Color, Config, SinkWriteError, configure_logging

BAR_COLORS = [c for c in Color if c != Color.BLACK]


def draw_scene(renderer: AnsiRenderer, frame: int, fg: Color, bg: Color) -> None:
    width, height = renderer.buffer.width, renderer.buffer.height
    renderer.clear_buffer()

    title = "ansi-cells"[:width]
    renderer.set_text(title, (width - len(title)) // 2, 0, fg, bg)

    if height >= 3:
        renderer.set_text('*', frame % width, height // 2, Color.BRIGHT_YELLOW, bg)

    if height >= 2:
        for x in range(width):
            color = BAR_COLORS[(x + frame) % len(BAR_COLORS)]
            renderer.set_text(' ', x, height - 1, Color.BLACK, color)


def run(renderer: AnsiRenderer, fg: Color, bg: Color, frames: int) -> None:
    interval = 1.0 / renderer.config.fps
    last_time = time.monotonic()
    i = 0
    while frames <= 0 or i < frames:
        draw_scene(renderer, i, fg, bg)
        renderer.render()
        i += 1

        sleep_time = interval - (time.monotonic() - last_time)
        if sleep_time > 0:
            time.sleep(sleep_time)
        last_time = time.monotonic()


def main() -> None:
    parser = argparse.ArgumentParser(description="Render an animated cell grid with ANSI escape sequences")
    parser.add_argument('--width', type=int, default=32)
    parser.add_argument('--height', type=int, default=12)
    parser.add_argument('-f', '--fps', type=float, default=10.0)
    parser.add_argument('-n', '--frames', type=int, default=0, help='Frames to render, 0 runs until interrupted')
    parser.add_argument('--fg', type=Color.parse, default=Color.BRIGHT_WHITE, help='Title foreground color name')
    parser.add_argument('--bg', type=Color.parse, default=Color.BLUE, help='Title background color name')
    parser.add_argument('--fallback-width', type=int, default=None,
                        help='Terminal width to center against when it cannot be queried')
    parser.add_argument('--alt-buffer', action='store_true', help='Draw on the alternate screen buffer')
    parser.add_argument('--log-level', default='WARNING')
    parser.add_argument('--log-file', default=None, help='Also write JSON log records to this file')
    args = parser.parse_args()

    logger = configure_logging(args.log_level.upper(), args.log_file)
    cfg = Config(width=args.width, height=args.height, fps=args.fps,
                 fallback_width=args.fallback_width, alt_buffer=args.alt_buffer)

    try:
        with AnsiRenderer.from_config(cfg, sys.stdout.buffer) as renderer:
            run(renderer, args.fg, args.bg, args.frames)
    except KeyboardInterrupt:
        print("\nInterrupted by user. Exiting...", file=sys.stderr)
    except SinkWriteError as e:
        logger.error(f"Output stopped: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
