"""Log handler that keeps messages for the log view and the message bar."""

import logging
import threading

from pubsub import pub

LOG_TOPIC = "viscacha.log"


class LogSink(logging.Handler):
    """Logging handler that buffers formatted records in memory.

    Every record is also published on the LOG_TOPIC pubsub topic with
    arguments (message, level) so the UI can mirror the latest one.
    """

    def __init__(self, level: int = logging.INFO, topic: str = LOG_TOPIC):
        """
        Initialize the sink.

        Args:
            level: Minimum level of records to keep.
            topic: Pubsub topic records are published on.
        """
        super().__init__(level=level)
        self.topic = topic
        self._lines: list[str] = []
        self._buffer_lock = threading.Lock()
        self.setFormatter(logging.Formatter("%(asctime)s| %(levelname).4s| %(message)s", datefmt="%H:%M:%S"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
            with self._buffer_lock:
                self._lines.append(line)
            pub.sendMessage(self.topic, message=record.getMessage(), level=record.levelno)
        except Exception:
            self.handleError(record)

    def lines(self) -> list[str]:
        """Get a copy of every buffered line."""
        with self._buffer_lock:
            return list(self._lines)

    def text(self) -> str:
        """Get the buffered lines joined for display."""
        return "\n".join(self.lines())

    def clear(self) -> None:
        """Drop every buffered line."""
        with self._buffer_lock:
            self._lines.clear()
