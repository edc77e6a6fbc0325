"""Terminal UI — status spinner for fetches."""

from __future__ import annotations

import itertools
import sys
import threading
import time
from typing import TextIO


class Spinner:
    """Inline stderr status line: a frame, the current step and elapsed seconds.

    Use as a context manager and call the instance (or :meth:`update`) with
    each new step. Nothing is drawn when the stream is not a terminal.
    """

    FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"
    INTERVAL = 0.08

    def __init__(self, message: str = "", stream: TextIO | None = None) -> None:
        self.message = message
        self.steps: list[str] = []
        self._stream = stream or sys.stderr
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._thread: threading.Thread | None = None
        self._started = 0.0

    def update(self, message: str) -> None:
        with self._lock:
            self.message = message
            self.steps.append(message)

    __call__ = update

    def _draw(self) -> None:
        frames = itertools.cycle(self.FRAMES)
        while not self._done.wait(self.INTERVAL):
            with self._lock:
                text = self.message
            if not text:
                continue
            elapsed = time.monotonic() - self._started
            self._stream.write(f"\r{next(frames)} {text} ({elapsed:.0f}s)\033[K")
            self._stream.flush()
        self._stream.write("\r\033[K")
        self._stream.flush()

    def __enter__(self) -> Spinner:
        self._started = time.monotonic()
        if self._stream.isatty():
            self._thread = threading.Thread(target=self._draw, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self._done.set()
        if self._thread is not None:
            self._thread.join()
