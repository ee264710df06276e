#!/usr/bin/env python3
"""
Audio EQ - Einstiegspunkt

Wendet die EQ-Kurve auf eine Audiodatei an und exportiert 16-bit PCM WAV.

Verwendung:
    python main.py [audio_file]

Beispiel:
    python main.py recording.mp3
"""

import logging
import sys


def main():
    """Start the Audio EQ application."""
    # Check Python version
    if sys.version_info < (3, 11):
        print("Error: Python 3.11 or higher is required.")
        print(f"Current version: {sys.version}")
        sys.exit(1)

    # Import PySide6 (late import for faster error if not installed)
    try:
        from PySide6.QtWidgets import QApplication
        from PySide6.QtCore import Qt
    except ImportError:
        print("Error: PySide6 is not installed.")
        print("Install with: pip install PySide6")
        sys.exit(1)

    # Import our application
    from audio_eq import __version__
    from audio_eq.gui import MainWindow

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Enable High DPI scaling
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    # Create application
    app = QApplication(sys.argv)
    app.setApplicationName("Audio EQ")
    app.setApplicationVersion(__version__)
    app.setOrganizationName("AudioEQ")

    # Create and show main window
    window = MainWindow()
    window.show()

    # Process file if provided as argument
    if len(sys.argv) > 1:
        window.process_file(sys.argv[1])

    # Run application
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
