"""Terminal weather card: type a city, see its current weather."""
import argparse
import asyncio
import logging
import os
import signal
import sys
import threading
from typing import Optional, TextIO

from card_canvas import PILCanvas, TextCanvas
from fetch_controller import FetchController, Success
from layout import build_panel, render_panel
from local_clock import LocalClock
from settings import WeatherSettings, build_provider, load_settings

DEFAULT_LOG_FILE = os.path.join(os.getcwd(), "weather-card.log")
PROMPT = "City name, blank to clear, :units, :retry or :quit"
CLEAR_SCREEN = "\033[H\033[J"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("Terminal weather card")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE)
    parser.add_argument("--units", choices=["metric", "imperial"], default="metric")
    parser.add_argument("--timeout", type=int, default=10, help="HTTP timeout in seconds")
    parser.add_argument("--city", default="", help="City to look up on startup")
    parser.add_argument("--once", action="store_true", help="Look up --city, print the card and exit")
    parser.add_argument("--png", default=None, help="Also render the card to this PNG file")
    parser.add_argument("--width", type=int, default=64, help="Card width in characters")
    parser.add_argument("--height", type=int, default=12, help="Card height in lines")
    parser.add_argument("--env-file", default=None, help="Path to a .env file")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: str, verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.FileHandler(log_file)]
    if verbose:
        handlers.append(logging.StreamHandler(sys.stderr))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


def build_controller(settings: WeatherSettings) -> FetchController:
    controller = FetchController(
        provider=build_provider(settings),
        api_key=settings.api_key,
        units=settings.units,
        clock=LocalClock(),
    )
    logging.info("Fetch controller ready (units=%s)", settings.units)
    return controller


class CardView:
    """Draws the controller's current state to a text stream and optionally a PNG."""

    def __init__(
        self,
        stream: TextIO = sys.stdout,
        width: int = 64,
        height: int = 12,
        png_path: Optional[str] = None,
        live: bool = False
    ):
        """
        Args:
            stream: Where the text card is written
            width: Card width in characters
            height: Card height in lines
            png_path: If set, every redraw is also saved there as a PNG
            live: Clear the screen and redraw on every clock tick; otherwise
                only state and unit changes are printed
        """
        self.stream = stream
        self.canvas = TextCanvas(width, height)
        self.png_path = png_path
        self.live = live
        self._last_key = None

    def redraw(self, controller: FetchController, force: bool = False) -> None:
        key = (controller.query, controller.state, controller.units)
        if not (self.live or force) and key == self._last_key:
            return
        self._last_key = key

        panel = build_panel(controller.query, controller.state, controller.units, controller.local_time)
        render_panel(self.canvas, panel)
        if self.live:
            self.stream.write(CLEAR_SCREEN)
        self.stream.write(self.canvas.to_text() + "\n")
        if self.live:
            self.stream.write(f"\n{PROMPT} ({controller.units})\n> ")
        self.stream.flush()

        if self.png_path:
            image = PILCanvas(self.canvas.width, self.canvas.height)
            render_panel(image, panel)
            image.save(self.png_path)


def handle_command(controller: FetchController, line: str) -> bool:
    """Apply one line of user input. Returns False when the user quits."""
    command = line.strip()
    if command in (":quit", ":q"):
        return False
    if command == ":units":
        controller.toggle_units()
    elif command == ":retry":
        controller.retry()
    else:
        controller.set_query(command)
    return True


def _read_lines(loop: asyncio.AbstractEventLoop, queue: "asyncio.Queue") -> None:
    # Daemon thread: a blocked readline must not keep the process alive
    for line in sys.stdin:
        loop.call_soon_threadsafe(queue.put_nowait, line)
    loop.call_soon_threadsafe(queue.put_nowait, None)


async def run_interactive(controller: FetchController, view: CardView, initial_query: str = "") -> int:
    loop = asyncio.get_running_loop()
    lines: "asyncio.Queue" = asyncio.Queue()
    threading.Thread(target=_read_lines, args=(loop, lines), daemon=True).start()

    controller.subscribe(view.redraw)
    view.redraw(controller, force=True)
    if initial_query:
        controller.set_query(initial_query)

    try:
        while True:
            line = await lines.get()
            if line is None:
                logging.info("End of input")
                break
            if not handle_command(controller, line):
                break
    finally:
        controller.close()
    return 0


async def run_once(controller: FetchController, view: CardView, query: str) -> int:
    handle = controller.set_query(query)
    if handle is not None:
        await handle.wait()
    view.redraw(controller, force=True)
    controller.close()
    return 0 if isinstance(controller.state, Success) else 1


def signal_handler(signum, frame):
    logging.info("Received signal %s, shutting down", signum)
    raise KeyboardInterrupt()


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    settings = load_settings(units=args.units, timeout=args.timeout, env_file=args.env_file)

    if args.once and not args.city.strip():
        raise SystemExit("--once needs --city")

    signal.signal(signal.SIGTERM, signal_handler)

    async def run() -> int:
        controller = build_controller(settings)
        if args.once:
            view = CardView(width=args.width, height=args.height, png_path=args.png)
            return await run_once(controller, view, args.city)
        view = CardView(
            width=args.width,
            height=args.height,
            png_path=args.png,
            live=sys.stdout.isatty(),
        )
        return await run_interactive(controller, view, args.city)

    try:
        return asyncio.run(run())
    except KeyboardInterrupt:
        logging.info("Stopping weather card")
        return 130


if __name__ == "__main__":
    sys.exit(main())
