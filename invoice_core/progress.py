"""
invoice_core.progress
Append-only progress log the pipeline reports into.

Sinks are best effort: a sink that fails to write logs the problem and
carries on, it never raises into the report run.
"""
from __future__ import annotations
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import List, Protocol
from .config import PROGRESS_TIME_FORMAT

EMOJI_RE = re.compile(
    "["
    "\U0001F000-\U0001FAFF"
    "\u2600-\u27BF"
    "\u2B00-\u2BFF"
    "\uFE0F\u200D"
    "]"
)

def sanitize_text(text: str) -> str:
    """Keep progress lines plain text."""
    if not text:
        return ""
    return EMOJI_RE.sub("", str(text))


class ProgressSink(Protocol):
    def report(self, message: str) -> None:
        ...


class NullProgress:
    def report(self, message: str) -> None:
        logging.debug("progress: %s", sanitize_text(message))


class LogProgress:
    """Writes one timestamped line per message to a progress log file."""

    def __init__(self, path: Path, echo: bool = True):
        self.path = Path(path)
        self.echo = echo

    def report(self, message: str) -> None:
        text = sanitize_text(message)
        line = f"{datetime.now().strftime(PROGRESS_TIME_FORMAT)}  {text}"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            logging.warning("Failed to update progress log: %s", e)
        if self.echo:
            logging.info(text)

    def clear(self) -> bool:
        """Empty the progress log. Returns False when there was nothing to clear."""
        try:
            if not self.path.exists() or self.path.stat().st_size == 0:
                return False
            self.path.write_text("", encoding="utf-8")
        except OSError as e:
            logging.warning("Failed to clear progress log: %s", e)
            return False
        return True

    def lines(self) -> List[str]:
        if not self.path.exists():
            return []
        return self.path.read_text(encoding="utf-8").splitlines()


def safe_report(sink: ProgressSink, message: str) -> None:
    try:
        sink.report(message)
    except Exception as e:
        logging.warning("Progress sink failed (%s): %s", type(e).__name__, e)
