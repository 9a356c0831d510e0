"""
値モデル (Value, Difference) のユニットテスト
"""
import pytest
from datetime import datetime, timedelta, timezone
from pydantic import ValidationError

from src.gap_detector.domain.models import (
    NumberValue,
    TimestampValue,
    NumberDifference,
    DurationDifference,
    format_timestamp,
)


JST = timezone(timedelta(hours=9))


class TestNumberValue:
    """NumberValue モデルのテスト"""

    def test_subtraction_yields_number_difference(self):
        """同種の減算で NumberDifference が得られる"""
        assert NumberValue(value=20) - NumberValue(value=10) == NumberDifference(value=10)

    def test_subtraction_is_signed(self):
        """減算結果は符号付き"""
        assert NumberValue(value=16) - NumberValue(value=20) == NumberDifference(value=-4)

    def test_display_is_decimal(self):
        """10 進数で表示される"""
        assert str(NumberValue(value=42)) == "42"
        assert str(NumberValue(value=-7)) == "-7"

    def test_rejects_out_of_i64_range(self):
        """64 ビット符号付き整数の範囲外は生成できない"""
        with pytest.raises(ValidationError):
            NumberValue(value=2 ** 63)

    def test_is_frozen(self):
        """生成後は変更できない"""
        value = NumberValue(value=1)
        with pytest.raises(ValidationError):
            value.value = 2


class TestTimestampValue:
    """TimestampValue モデルのテスト"""

    def test_subtraction_yields_duration_difference(self):
        """同種の減算で DurationDifference が得られる"""
        earlier = TimestampValue(value=datetime(2024, 1, 5, 12, 0, tzinfo=timezone.utc))
        later = TimestampValue(value=datetime(2024, 1, 5, 12, 30, tzinfo=timezone.utc))

        assert later - earlier == DurationDifference(value=timedelta(minutes=30))

    def test_subtraction_across_offsets(self):
        """異なるオフセット間でも絶対時刻で差分を計算する"""
        utc = TimestampValue(value=datetime(2024, 1, 5, 3, 0, tzinfo=timezone.utc))
        jst = TimestampValue(value=datetime(2024, 1, 5, 13, 0, tzinfo=JST))

        assert jst - utc == DurationDifference(value=timedelta(hours=1))

    def test_requires_offset(self):
        """オフセットなしの日時は受け付けない"""
        with pytest.raises(ValidationError):
            TimestampValue(value=datetime(2024, 1, 5, 12, 0))

    def test_display_uses_iso8601(self):
        """拡張 ISO 8601 形式で表示される"""
        value = TimestampValue(value=datetime(2024, 1, 5, 12, 0, tzinfo=JST))
        assert str(value) == "2024-01-05T12:00:00+09:00"


class TestMixedVariants:
    """異なる種類の混在のテスト"""

    def test_subtraction_of_mixed_values_raises_type_error(self):
        """異なる種類の Value の減算は TypeError"""
        number = NumberValue(value=1)
        timestamp = TimestampValue(value=datetime(2024, 1, 5, tzinfo=timezone.utc))

        with pytest.raises(TypeError):
            number - timestamp
        with pytest.raises(TypeError):
            timestamp - number

    def test_ordering_of_mixed_differences_raises_type_error(self):
        """異なる種類の Difference の大小比較は TypeError"""
        number = NumberDifference(value=1)
        duration = DurationDifference(value=timedelta(hours=1))

        with pytest.raises(TypeError):
            number < duration
        with pytest.raises(TypeError):
            duration >= number


class TestDifferenceOrdering:
    """Difference の大小比較のテスト"""

    def test_number_difference_ordering(self):
        small = NumberDifference(value=3)
        large = NumberDifference(value=5)

        assert small < large
        assert small <= large
        assert large > small
        assert large >= small
        assert small <= NumberDifference(value=3)
        assert not small > NumberDifference(value=3)

    def test_duration_difference_ordering(self):
        half_hour = DurationDifference(value=timedelta(minutes=30))
        hour = DurationDifference(value=timedelta(hours=1))

        assert half_hour < hour
        assert hour >= DurationDifference(value=timedelta(minutes=60))
        assert DurationDifference(value=timedelta(hours=-1)) < half_hour


class TestFormatTimestamp:
    """format_timestamp のテスト"""

    @pytest.mark.parametrize("timestamp,expected", [
        (datetime(2024, 1, 5, 12, 0, 0, tzinfo=timezone.utc), "2024-01-05T12:00:00Z"),
        (datetime(2024, 1, 5, 12, 0, 0, 250000, tzinfo=timezone.utc), "2024-01-05T12:00:00.250Z"),
        (datetime(2024, 1, 5, 12, 0, 0, 123456, tzinfo=timezone.utc), "2024-01-05T12:00:00.123456Z"),
        (datetime(2024, 1, 5, 12, 0, 0, 1000, tzinfo=timezone.utc), "2024-01-05T12:00:00.001Z"),
        (datetime(2024, 1, 5, 12, 0, 0, tzinfo=JST), "2024-01-05T12:00:00+09:00"),
        (
            datetime(2024, 1, 5, 12, 0, 0, tzinfo=timezone(-timedelta(hours=5, minutes=30))),
            "2024-01-05T12:00:00-05:30",
        ),
    ])
    def test_minimal_fraction_and_offset(self, timestamp, expected):
        """小数秒は最小桁数、UTC は Z で表記される"""
        assert format_timestamp(timestamp) == expected
