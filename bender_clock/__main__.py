"""Entry point for the analog clock application."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from PySide6.QtWidgets import QApplication

from .gui import ClockWindow


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bender_clock", description="Analog clock face.")
    parser.add_argument("--time", default="", help="time to display as H, H:M or H:M:S; current time if omitted")
    parser.add_argument("--log-level", default="WARNING", help="logging level, e.g. DEBUG")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Launch the PySide6 event loop and show the clock window."""
    args, qt_args = build_parser().parse_known_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication([sys.argv[0], *qt_args])
    window = ClockWindow(time=args.time)
    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
