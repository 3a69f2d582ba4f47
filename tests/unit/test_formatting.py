"""Unit tests for byte, duration and spinner formatting."""

import pytest

from transfertrack.core.formatting import (
    HOUR,
    MILLISECOND,
    MINUTE,
    SECOND,
    format_bytes,
    format_duration,
    round_duration,
    spinner_frame,
)


@pytest.mark.core
class TestFormatBytes:
    """Tests for format_bytes()."""

    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            (0, "0 B"),
            (9, "9 B"),
            (10, "10 B"),
            (999, "999 B"),
            (1000, "1.0 kB"),
            (1500, "1.5 kB"),
            (15_000_000, "15 MB"),
            (2_500_000_000, "2.5 GB"),
        ],
    )
    def test_formats_with_si_units(self, size: int, expected: str) -> None:
        """Sizes use powers of 1000 and at most one decimal below 10."""
        assert format_bytes(size) == expected


@pytest.mark.core
class TestFormatDuration:
    """Tests for format_duration()."""

    @pytest.mark.parametrize(
        ("nanoseconds", "expected"),
        [
            (0, "0s"),
            (500, "500ns"),
            (1_000, "1µs"),
            (1_500, "1.5µs"),
            (12 * MILLISECOND, "12ms"),
            (1_500 * MILLISECOND, "1.5s"),
            (61 * SECOND, "1m1s"),
            (HOUR, "1h0m0s"),
            (2 * HOUR + 3 * MINUTE + 4 * SECOND, "2h3m4s"),
            (-1_500 * MILLISECOND, "-1.5s"),
        ],
    )
    def test_formats_like_elapsed_time(self, nanoseconds: int, expected: str) -> None:
        """Durations print with the largest fitting units."""
        assert format_duration(nanoseconds) == expected


@pytest.mark.core
class TestRoundDuration:
    """Tests for round_duration()."""

    @pytest.mark.parametrize(
        ("nanoseconds", "expected"),
        [
            (61_600 * MILLISECOND, 62 * SECOND),
            (1_234 * MILLISECOND, 1_200 * MILLISECOND),
            (1_600_000, 2 * MILLISECOND),
            (1_234, 1_230),
            (1_235, 1_240),
        ],
    )
    def test_precision_shrinks_as_duration_grows(
        self, nanoseconds: int, expected: int
    ) -> None:
        """Longer durations round to coarser units."""
        assert round_duration(nanoseconds) == expected


@pytest.mark.core
class TestSpinnerFrame:
    """Tests for spinner_frame()."""

    def test_advances_with_time(self) -> None:
        """Consecutive spinner intervals show consecutive frames."""
        from rich.spinner import Spinner

        spinner = Spinner("dots")
        step = int(spinner.interval * MILLISECOND)

        assert spinner_frame(0) == spinner.frames[0]
        assert spinner_frame(step) == spinner.frames[1]

    def test_wraps_around(self) -> None:
        """The frame index cycles through every frame."""
        from rich.spinner import Spinner

        spinner = Spinner("dots")
        cycle = int(spinner.interval * MILLISECOND) * len(spinner.frames)

        assert spinner_frame(cycle) == spinner.frames[0]
