"""
Application entry point and dark-theme stylesheet.

Usage:
    python -m image_cropper [IMAGE] [--ratio 16:9] [--output out.png] [--verbose]
    image-cropper          (after pip install)
"""

import argparse
import logging
import sys
from pathlib import Path

from PyQt6.QtWidgets import QApplication

from image_cropper.config import APP_NAME
from image_cropper.main_window import MainWindow
from image_cropper.ratios import parse_ratio

DARK_STYLESHEET = """
    QMainWindow { background: #2b2b2b; }
    QWidget { background: #2b2b2b; color: #ddd; font-size: 10pt; }
    QComboBox { background: #1e1e1e; border: 1px solid #555; border-radius: 4px; padding: 4px 8px; }
    QSlider::groove:horizontal { height: 4px; background: #444; border-radius: 2px; }
    QSlider::handle:horizontal { background: #3a6ea5; width: 14px; margin: -6px 0; border-radius: 7px; }
    QToolBar { background: #333; border-bottom: 1px solid #444; spacing: 4px; padding: 4px; }
    QStatusBar { background: #333; border-top: 1px solid #444; }
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=APP_NAME, description="Crop an image to a fixed aspect ratio.")
    parser.add_argument("image", nargs="?", type=Path, help="image to open on start")
    parser.add_argument("--ratio", type=parse_ratio, default=None, help="crop ratio, e.g. 16:9 (default 1:1)")
    parser.add_argument("--output", type=Path, default=None, help="save path used instead of asking")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv: list[str] | None = None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv[:1])
    app.setStyleSheet(DARK_STYLESHEET)

    window = MainWindow(image_path=args.image, ratio=args.ratio, output_path=args.output)
    window.show()

    try:
        sys.exit(app.exec())
    except (SystemExit, KeyboardInterrupt):
        pass


if __name__ == "__main__":
    main()
