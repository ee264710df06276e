"""
Hauptfenster der Audio EQ Anwendung

Struktur:
- Drop-Zone (Drag & Drop oder Import-Button)
- Anzeige der EQ-Kurve
- Status-/Fehlerzeile

Die Verarbeitung (Dekodieren → Rendern → WAV) läuft in einem QThread,
das Fenster bleibt währenddessen bedienbar.
"""

import io
import logging
from typing import Optional
from pathlib import Path
import soundfile as sf
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QFileDialog, QLabel, QStatusBar, QPushButton,
    QFrame, QProgressBar,
)
from PySide6.QtCore import Qt, QSettings, Signal, Slot, QThread

from ..core.audio_io import guess_mime_type
from ..core.errors import AudioEqError, DecodeError
from ..core.filter_spec import sort_by_frequency
from ..core.pipeline import (
    DEFAULT_CONFIG,
    ProcessingConfig,
    default_output_path,
    process_bytes,
    validate_input,
    write_atomic,
)
from ..utils.formatting import format_audio_summary, format_file_size, format_filter


logger = logging.getLogger(__name__)

DECODE_ERROR_MESSAGE = (
    "Error processing audio file. Make sure the file is a valid audio format."
)


class ProcessWorker(QThread):
    """Worker für die EQ-Verarbeitung im Hintergrund."""
    succeeded = Signal(bytes)
    failed = Signal(str)

    def __init__(self, file_path: Path, mime_type: str, config: ProcessingConfig):
        super().__init__()
        self.file_path = file_path
        self.mime_type = mime_type
        self.config = config

    def run(self):
        try:
            wav = process_bytes(self.file_path.read_bytes(), self.mime_type, self.config)
        except DecodeError as e:
            logger.warning("Decoding %s failed: %s", self.file_path, e)
            self.failed.emit(DECODE_ERROR_MESSAGE)
        except AudioEqError as e:
            logger.warning("Processing %s failed: %s", self.file_path, e)
            self.failed.emit(str(e))
        except Exception as e:
            # Jeder Fehler bricht den Lauf ab, das Fenster muss bedienbar bleiben
            logger.exception("Unexpected error while processing %s", self.file_path)
            self.failed.emit(f"{DECODE_ERROR_MESSAGE}\n{e}")
        else:
            self.succeeded.emit(wav)


class MainWindow(QMainWindow):
    """Hauptfenster mit Drop-Zone."""

    def __init__(self, config: ProcessingConfig = DEFAULT_CONFIG):
        super().__init__()

        self._config = config
        self._worker: Optional[ProcessWorker] = None
        self._input_path: Optional[Path] = None
        self._settings = QSettings("AudioEQ", "AudioEQ")

        self._init_ui()
        self._apply_theme()

    def _init_ui(self):
        """UI aufbauen."""
        self.setWindowTitle("Audio EQ Processor")
        self.setMinimumSize(480, 420)

        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(24, 24, 24, 24)

        title = QLabel("Audio EQ Processor")
        title.setObjectName("title")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title)

        limit = format_file_size(self._config.max_file_size)
        subtitle = QLabel(
            f"Drop your audio file (max {limit})\n"
            "Supported formats: WAV, MP3, OGG, AAC, M4A, FLAC"
        )
        subtitle.setAlignment(Qt.AlignmentFlag.AlignCenter)
        subtitle.setStyleSheet("color: #a6adc8;")
        layout.addWidget(subtitle)

        # Drop-Zone
        self.drop_zone = QFrame()
        self.drop_zone.setObjectName("dropZone")
        self.drop_zone.setMinimumHeight(140)
        drop_layout = QVBoxLayout(self.drop_zone)
        self.file_label = QLabel("Drag and drop your audio file here")
        self.file_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.file_label.setWordWrap(True)
        drop_layout.addWidget(self.file_label)
        layout.addWidget(self.drop_zone, stretch=1)

        # Toolbar unten
        toolbar = QHBoxLayout()
        self.btn_open = QPushButton("Import")
        self.btn_open.clicked.connect(self._open_file)
        toolbar.addWidget(self.btn_open)
        toolbar.addStretch()
        self.progress = QProgressBar()
        self.progress.setMaximumWidth(160)
        self.progress.setRange(0, 0)  # unbestimmt
        self.progress.hide()
        toolbar.addWidget(self.progress)
        layout.addLayout(toolbar)

        # EQ-Kurve (nur Anzeige)
        curve_text = "\n".join(
            format_filter(config) for config in sort_by_frequency(self._config.curve)
        )
        curve_label = QLabel(curve_text)
        curve_label.setStyleSheet("color: #888; font-family: monospace;")
        layout.addWidget(curve_label)

        self.error_label = QLabel("")
        self.error_label.setObjectName("error")
        self.error_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.error_label.setWordWrap(True)
        layout.addWidget(self.error_label)

        # Statusbar
        self.statusBar = QStatusBar()
        self.setStatusBar(self.statusBar)
        self.status_label = QLabel("")
        self.statusBar.addWidget(self.status_label)

        # Drag & Drop
        self.setAcceptDrops(True)

    def _apply_theme(self):
        """Dark theme."""
        self.setStyleSheet("""
            QMainWindow, QWidget {
                background-color: #1e1e2e;
                color: #cdd6f4;
                font-family: 'SF Pro Display', 'Segoe UI', sans-serif;
            }
            QLabel#title {
                font-size: 20px;
                font-weight: bold;
            }
            QLabel#error {
                color: #f38ba8;
            }
            QFrame#dropZone {
                border: 2px dashed #45475a;
                border-radius: 8px;
            }
            QFrame#dropZone[dragging="true"] {
                border-color: #89b4fa;
                background-color: #313244;
            }
            QPushButton {
                background-color: #313244;
                color: #cdd6f4;
                border: 1px solid #45475a;
                padding: 8px 16px;
                border-radius: 6px;
            }
            QPushButton:hover {
                background-color: #45475a;
                border-color: #89b4fa;
            }
            QPushButton:disabled {
                background-color: #181825;
                color: #585b70;
            }
            QProgressBar {
                background-color: #313244;
                border: 1px solid #45475a;
                border-radius: 4px;
                text-align: center;
            }
            QProgressBar::chunk {
                background-color: #89b4fa;
            }
            QStatusBar {
                background-color: #181825;
            }
        """)

    def _set_dragging(self, dragging: bool):
        """Drop-Zone hervorheben."""
        self.drop_zone.setProperty("dragging", "true" if dragging else "false")
        self.drop_zone.style().unpolish(self.drop_zone)
        self.drop_zone.style().polish(self.drop_zone)

    def _open_file(self):
        """Datei öffnen Dialog."""
        filename, _ = QFileDialog.getOpenFileName(
            self, "Open audio file", "",
            "Audio (*.wav *.mp3 *.ogg *.aac *.m4a *.mp4 *.webm *.flac);;All files (*)"
        )
        if filename:
            self.process_file(filename)

    def process_file(self, filepath: str):
        """Eingabe prüfen und Verarbeitung starten."""
        if self._worker is not None and self._worker.isRunning():
            return

        path = Path(filepath)
        self.error_label.setText("")

        mime_type = guess_mime_type(path)
        try:
            validate_input(mime_type, path.stat().st_size, self._config)
        except (AudioEqError, OSError) as e:
            self.error_label.setText(str(e))
            return

        self._input_path = path
        self.file_label.setText(f"File selected: {path.name}")
        self.btn_open.setEnabled(False)
        self.progress.show()
        self.status_label.setText("Processing audio...")

        self._worker = ProcessWorker(path, mime_type, self._config)
        self._worker.succeeded.connect(self._on_processed)
        self._worker.failed.connect(self._on_failed)
        self._worker.start()

    def _reset_idle(self):
        """Zurück in den Ruhezustand, neuer Versuch möglich."""
        self.btn_open.setEnabled(True)
        self.progress.hide()
        self.status_label.setText("")

    @Slot(bytes)
    def _on_processed(self, wav: bytes):
        """Verarbeitung fertig - Speichern anbieten."""
        self._reset_idle()

        info = sf.info(io.BytesIO(wav))
        summary = format_audio_summary(info.channels, info.samplerate, info.duration)

        # Vorschlag behält die Endung der Eingabe (Inhalt ist immer WAV),
        # daher steht "All files" zuerst
        suggested = default_output_path(self._input_path)
        last_dir = self._settings.value("last_save_dir", str(suggested.parent))
        filename, _ = QFileDialog.getSaveFileName(
            self, "Save equalized audio (16-bit PCM WAV)",
            str(Path(last_dir) / suggested.name),
            "All files (*);;WAV (*.wav)"
        )
        if not filename:
            self.status_label.setText(f"Not saved ({summary})")
            return

        try:
            write_atomic(filename, wav)
        except OSError as e:
            self.error_label.setText(f"Could not save file:\n{e}")
            return

        self._settings.setValue("last_save_dir", str(Path(filename).parent))
        self.status_label.setText(
            f"Saved {Path(filename).name} ({summary}, {format_file_size(len(wav))})"
        )

    @Slot(str)
    def _on_failed(self, message: str):
        """Verarbeitung fehlgeschlagen."""
        self._reset_idle()
        self.error_label.setText(message)

    def dragEnterEvent(self, event):
        """Drag & Drop."""
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
            self._set_dragging(True)

    def dragLeaveEvent(self, event):
        self._set_dragging(False)

    def dropEvent(self, event):
        """Datei gedroppt - nur die erste wird verarbeitet."""
        self._set_dragging(False)
        urls = event.mimeData().urls()
        if urls:
            self.process_file(urls[0].toLocalFile())

    def closeEvent(self, event):
        """Beim Schließen."""
        # Worker beenden
        if self._worker and self._worker.isRunning():
            self._worker.quit()
            self._worker.wait()
        event.accept()
