"""Interactive confirmation before changed files are synced."""

import queue
import sys
import threading
from typing import Callable, TextIO

import structlog

log = structlog.stdlib.get_logger()

CONFIRM_QUESTION: str = "Are you sure you want to sync the above files? [y|enter|n] "

ConfirmGate = Callable[[str], bool]


def is_affirmative(answer: str | None) -> bool:
    """
    Interpret a line of user input as yes or no.

    Args:
        answer: Raw input line, or None when no input arrived

    Returns:
        True for "y" (any case) or an empty line, False otherwise
    """
    if answer is None:
        return False
    answer = answer.strip()
    return answer == "" or answer.lower() == "y"


class ConsoleConfirmGate:
    """Asks a yes/no question on a text stream and waits for one line of input."""

    def __init__(
        self,
        timeout: float | None = None,
        input_stream: TextIO | None = None,
        writer: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the confirmation gate.

        Args:
            timeout: Seconds to wait for an answer; None waits indefinitely
            input_stream: Stream answers are read from (defaults to stdin)
            writer: Output function for the question and the echoed decision
        """
        self.timeout = timeout
        self._input_stream = input_stream
        self._writer = writer or print

    def __call__(self, question: str = CONFIRM_QUESTION) -> bool:
        """Ask the question and return the user's decision.

        Missing input within the timeout, or end of input, counts as "no".
        """
        self._writer(question)
        answer = self._read_line()

        if answer is None:
            log.warning("confirmation_timed_out", timeout=self.timeout)

        confirmed = is_affirmative(answer)
        self._writer("Yes" if confirmed else "No")
        log.info("confirmation_answered", confirmed=confirmed)
        return confirmed

    def _read_line(self) -> str | None:
        """Read one line, giving up after the timeout."""
        stream = self._input_stream or sys.stdin

        if self.timeout is None:
            line = stream.readline()
            return line.rstrip("\r\n") if line else None

        answers: queue.Queue = queue.Queue(maxsize=1)

        def reader() -> None:
            line = stream.readline()
            answers.put(line.rstrip("\r\n") if line else None)

        # Daemon thread so a pending read never blocks interpreter exit
        threading.Thread(target=reader, daemon=True).start()

        try:
            return answers.get(timeout=self.timeout)
        except queue.Empty:
            return None
