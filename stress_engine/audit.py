"""
Audit Sink Module
=================
Free-text event sink for run lifecycle messages ("simulation started",
"simulation completed").

A sink never influences the computed risk figure and never raises into
the engine: backend failures are swallowed by the sink itself.
"""

from typing import List

from loguru import logger


class AuditSink:
    """No-op audit sink; subclasses override :meth:`_write`."""

    def __init__(self):
        self.connected = False

    def connect(self) -> None:
        self.connected = True

    def disconnect(self) -> None:
        self.connected = False

    def record(self, message: str) -> None:
        """Record ``message`` if connected. Never raises."""
        if not self.connected:
            return
        try:
            self._write(message)
        except Exception:
            pass

    def _write(self, message: str) -> None:
        pass

    def __enter__(self) -> "AuditSink":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()


NullAuditSink = AuditSink


class LoguruAuditSink(AuditSink):
    """Audit sink backed by a ``loguru`` logger bound to ``component=audit``."""

    def __init__(self, level: str = "INFO"):
        super().__init__()
        self.level = level
        self._log = logger.bind(component="audit")

    def connect(self) -> None:
        super().connect()
        self.record("Audit sink connected")

    def disconnect(self) -> None:
        self.record("Audit sink disconnected")
        super().disconnect()

    def _write(self, message: str) -> None:
        self._log.log(self.level, "LOG: {}", message)


class MemoryAuditSink(AuditSink):
    """Keeps recorded messages in memory; handy for inspection."""

    def __init__(self):
        super().__init__()
        self.messages: List[str] = []

    def _write(self, message: str) -> None:
        self.messages.append(message)
