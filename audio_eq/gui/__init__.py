"""
GUI module for Audio EQ.

Uses PySide6 for the drop window.
Strict separation from DSP logic - this module only contains presentation.
"""

from .main_window import MainWindow

__all__ = ["MainWindow"]
