"""ReportWriter のユニットテスト"""

import io
from datetime import datetime, timezone
from unittest.mock import Mock
import pytest

from src.gap_detector.domain.configuration import DiffMode, FilterMode
from src.gap_detector.domain.gap_detector import Gap, AcceptedLine
from src.gap_detector.domain.models import NumberValue, TimestampValue
from src.gap_detector.infrastructure.report_writer import ReportWriter


def create_gap(previous: str, current: str, line_number: int = 2) -> Gap:
    """テスト用 Gap を作成するヘルパー（行の先頭フィールドを uint として扱う）"""
    prev_value = NumberValue(value=int(previous.split(",")[0]))
    cur_value = NumberValue(value=int(current.split(",")[0]))
    return Gap(
        line_number=line_number,
        previous=AcceptedLine(line=previous, value=prev_value),
        current=AcceptedLine(line=current, value=cur_value),
        difference=cur_value - prev_value,
    )


class TestReportWriter:
    """ReportWriter のテストケース"""

    @pytest.fixture
    def stream(self):
        """出力先の StringIO"""
        return io.StringIO()

    def test_diff_mode_writes_values(self, stream):
        writer = ReportWriter(stream, DiffMode(output_delimiter=","))

        writer.write_gap(create_gap("10,a", "20,b"))
        writer.write_gap(create_gap("20,b", "40,c"))

        assert stream.getvalue() == "10,20\n20,40\n"
        assert writer.written_count == 2

    def test_diff_mode_uses_output_delimiter(self, stream):
        writer = ReportWriter(stream, DiffMode(output_delimiter="\t"))
        writer.write_gap(create_gap("10,a", "20,b"))
        assert stream.getvalue() == "10\t20\n"

    def test_diff_mode_displays_timestamps(self, stream):
        writer = ReportWriter(stream, DiffMode(output_delimiter=" "))
        previous = TimestampValue(value=datetime(2024, 1, 5, 12, 0, tzinfo=timezone.utc))
        current = TimestampValue(value=datetime(2024, 1, 5, 14, 0, 0, 500000, tzinfo=timezone.utc))
        gap = Gap(
            line_number=2,
            previous=AcceptedLine(line="a", value=previous),
            current=AcceptedLine(line="b", value=current),
            difference=current - previous,
        )

        writer.write_gap(gap)

        assert stream.getvalue() == "2024-01-05T12:00:00Z 2024-01-05T14:00:00.500Z\n"

    def test_filter_mode_single_gap_has_no_blank_lines(self, stream):
        """1 組のみの場合は前後に空行を出力しない"""
        writer = ReportWriter(stream, FilterMode())
        writer.write_gap(create_gap("10,a", "20,b"))
        assert stream.getvalue() == "10,a\n20,b\n"

    def test_filter_mode_separates_gaps_with_blank_line(self, stream):
        writer = ReportWriter(stream, FilterMode())

        writer.write_gap(create_gap("10,a", "20,b"))
        writer.write_gap(create_gap("30,c", "40,d"))
        writer.write_gap(create_gap("40,d", "50,e"))

        assert stream.getvalue() == "10,a\n20,b\n\n30,c\n40,d\n\n40,d\n50,e\n"

    def test_flush(self):
        stream = Mock()
        writer = ReportWriter(stream, FilterMode())
        writer.flush()
        stream.flush.assert_called_once()

    def test_broken_pipe_propagates(self):
        stream = Mock()
        stream.write.side_effect = BrokenPipeError()
        writer = ReportWriter(stream, DiffMode())

        with pytest.raises(BrokenPipeError):
            writer.write_gap(create_gap("10,a", "20,b"))
        assert writer.written_count == 0
