import sys

from PyQt6.QtCore import QCoreApplication


def ensure_core_app():
    return QCoreApplication.instance() or QCoreApplication(sys.argv[:1])


class FakeKeyEvent:
    """Minimal stand-in for QKeyEvent: only key() and isAutoRepeat() are read."""

    def __init__(self, key, auto_repeat=False):
        self._key = int(key)
        self._auto_repeat = auto_repeat

    def key(self):
        return self._key

    def isAutoRepeat(self):
        return self._auto_repeat
