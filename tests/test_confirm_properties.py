"""Property-based tests for the confirmation gate and the console report.

**Feature: incremental-file-sync, Property 15: Affirmative answers**
**Feature: incremental-file-sync, Property 16: Aligned change report**
"""

import io
import os
import threading

from hypothesis import given
from hypothesis import strategies as st

from src.models.file import ChangedRecord
from src.sync.confirm import CONFIRM_QUESTION, ConsoleConfirmGate, is_affirmative
from src.sync.reporter import ChangeReporter, format_mtime, format_size


class TestAffirmativeAnswers:
    """Test Property 15: Affirmative answers.

    **Feature: incremental-file-sync, Property 15: Affirmative answers**

    Only "y" (any case) and an empty line confirm; everything else declines.
    """

    def test_accepted_answers(self) -> None:
        """Test the accepted spellings."""
        for answer in ["y", "Y", "", "  y  ", "\n"]:
            assert is_affirmative(answer), answer

    @given(answer=st.text(min_size=1).filter(lambda s: s.strip().lower() not in ("", "y")))
    def test_anything_else_declines(self, answer: str) -> None:
        """Test that any other input declines."""
        assert not is_affirmative(answer)

    def test_no_input_declines(self) -> None:
        """Test that missing input counts as no."""
        assert not is_affirmative(None)

    def test_console_gate_reads_one_line(self) -> None:
        """Test the console gate against an in-memory stream."""
        lines: list[str] = []
        gate = ConsoleConfirmGate(input_stream=io.StringIO("y\nn\n"), writer=lines.append)

        assert gate() is True
        assert lines == [CONFIRM_QUESTION, "Yes"]

    def test_console_gate_end_of_input_declines(self) -> None:
        """Test that a closed input stream declines."""
        lines: list[str] = []
        gate = ConsoleConfirmGate(input_stream=io.StringIO(""), writer=lines.append)

        assert gate() is False
        assert lines[-1] == "No"

    def test_console_gate_timeout_declines(self) -> None:
        """Test that no answer within the timeout declines instead of blocking."""
        read_fd, write_fd = os.pipe()
        stream = os.fdopen(read_fd, "r")
        lines: list[str] = []
        try:
            gate = ConsoleConfirmGate(timeout=0.1, input_stream=stream, writer=lines.append)
            assert gate() is False
            assert lines[-1] == "No"
        finally:
            os.close(write_fd)

    def test_console_gate_answer_within_timeout(self) -> None:
        """Test that an answer arriving before the timeout is used."""
        read_fd, write_fd = os.pipe()
        stream = os.fdopen(read_fd, "r")
        timer = threading.Timer(0.05, lambda: os.write(write_fd, b"Y\n"))
        timer.start()
        try:
            gate = ConsoleConfirmGate(timeout=5, input_stream=stream, writer=lambda line: None)
            assert gate() is True
        finally:
            timer.join()
            os.close(write_fd)


def _changed(key: str, size: int, ver_path: str | None = None) -> ChangedRecord:
    return ChangedRecord(
        key=key,
        path=f"/srv/{key}",
        size=size,
        mtime=1_700_000_000,
        hash="abc123",
        ver_path=ver_path,
    )


class TestAlignedChangeReport:
    """Test Property 16: Aligned change report.

    **Feature: incremental-file-sync, Property 16: Aligned change report**

    One summary line, then one line per file with keys and sizes padded so
    the columns line up.
    """

    def test_report_lines(self) -> None:
        """Test the exact report layout."""
        lines: list[str] = []
        reporter = ChangeReporter(lines.append)
        changed = {
            "a.txt": _changed("a.txt", 10),
            "docs/long-name.md": _changed("docs/long-name.md", 2048, "docs/long-name.abc123.md"),
        }

        reporter.report_changes(changed)

        mtime = format_mtime(1_700_000_000)
        assert lines == [
            "There are 2 file(s) to be synced:",
            f"{'a.txt'.ljust(17)}:   10 B, {mtime}, abc123 => -",
            f"docs/long-name.md: 2.0 KB, {mtime}, abc123 => docs/long-name.abc123.md",
        ]

    @given(
        keys=st.lists(st.text(min_size=1, max_size=15, alphabet="abcxyz./"), min_size=1, max_size=6, unique=True),
        sizes=st.lists(st.integers(min_value=0, max_value=10**10), min_size=6, max_size=6),
    )
    def test_columns_align(self, keys: list[str], sizes: list[int]) -> None:
        """Test that the separator after key and size sits at the same column on every line."""
        changed = {key: _changed(key, size) for key, size in zip(keys, sizes)}

        lines = ChangeReporter().format_changes(changed)[1:]

        key_width = max(len(k) for k in keys)
        assert {line[key_width] for line in lines} == {":"}
        assert len({line.index(",", key_width) for line in lines}) == 1

    def test_format_size(self) -> None:
        """Test human readable sizes."""
        assert format_size(0) == "0 B"
        assert format_size(1023) == "1023 B"
        assert format_size(1536) == "1.5 KB"
        assert format_size(5 * 1024**2) == "5.0 MB"
        assert format_size(3 * 1024**4) == "3072.0 GB"
