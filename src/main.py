"""
Track Preview Player - Main Entry Point

Lists the audio tracks of a folder and previews the selected one.
"""

import argparse
import logging
import sys
import os

# Add src to path
src_path = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, src_path)

from PyQt6.QtWidgets import QApplication
from PyQt6.QtCore import Qt


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Preview local audio tracks")
    parser.add_argument("directory", nargs="?", help="Folder to list tracks from")
    parser.add_argument("--config", default="config/default_config.yaml", help="Configuration template")
    parser.add_argument("--backend", choices=["miniaudio", "pygame"], help="Override audio.backend")
    return parser.parse_args(argv)


def configure_logging(level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv=None):
    """Application entry point"""
    args = parse_args(argv)

    from services.config_service import ConfigService
    config = ConfigService(args.config)
    if args.backend:
        config.set("audio.backend", args.backend)
    configure_logging(config.get("logging.level", "INFO"))

    # Enable high DPI scaling
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv[:1])
    app.setApplicationName(config.get("app.name", "Track Preview Player"))
    app.setApplicationVersion(config.get("app.version", "1.0.0"))

    # Create dependency container (composition root)
    from app.container_factory import AppContainerFactory
    container = AppContainerFactory.create(args.config)

    # Import UI lazily so that Qt is initialized first
    from ui.main_window import MainWindow
    from ui.playback_driver import QtPlaybackDriver

    window = MainWindow(container)
    driver = QtPlaybackDriver(
        container.controller,
        interval_ms=config.get("playback.time_update_interval_ms", 250),
    )

    directory = args.directory or config.get("library.directory", "")
    if directory:
        window.load_directory(directory)

    window.show()
    driver.start()

    exit_code = app.exec()

    driver.stop()
    container.cleanup()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
