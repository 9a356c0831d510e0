"""
データモデル定義

このモジュールは gap_detector のドメイン層の値モデルを定義します:
- Value: フィールドから解析した値（NumberValue / TimestampValue）
- Difference: 隣接する 2 つの値の差（NumberDifference / DurationDifference）

同じ種類同士でのみ減算・比較が定義されます。異なる種類を混在させた場合は
TypeError となります（1 回の実行では単一のフォーマットしか使わないため、
通常は発生しない内部不整合です）。
"""

from datetime import datetime, timedelta
from typing import Union

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


I64_MIN = -(2 ** 63)
I64_MAX = 2 ** 63 - 1


class _OrderedDifference(BaseModel):
    """同種の Difference 同士の大小比較を提供する基底クラス"""

    model_config = ConfigDict(frozen=True)

    def __lt__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.value >= other.value


class NumberDifference(_OrderedDifference):
    """整数フォーマット (uint, int) の差分"""

    value: int = Field(..., description="符号付きの差分値")

    def __str__(self) -> str:
        return str(self.value)


class DurationDifference(_OrderedDifference):
    """タイムスタンプフォーマット (unix, unix_ms, rfc-3339) の差分"""

    value: timedelta = Field(..., description="符号付きの時間差")

    def __str__(self) -> str:
        return str(self.value)


Difference = Union[NumberDifference, DurationDifference]


class NumberValue(BaseModel):
    """整数値"""

    model_config = ConfigDict(frozen=True)

    value: int = Field(..., ge=I64_MIN, le=I64_MAX, description="64 ビット符号付き整数")

    def __sub__(self, other):
        if not isinstance(other, NumberValue):
            return NotImplemented
        return NumberDifference(value=self.value - other.value)

    def __str__(self) -> str:
        return str(self.value)


class TimestampValue(BaseModel):
    """固定オフセット付きの時刻"""

    model_config = ConfigDict(frozen=True)

    value: AwareDatetime = Field(..., description="オフセット付き日時")

    def __sub__(self, other):
        if not isinstance(other, TimestampValue):
            return NotImplemented
        return DurationDifference(value=self.value - other.value)

    def __str__(self) -> str:
        return format_timestamp(self.value)


Value = Union[NumberValue, TimestampValue]


def format_timestamp(timestamp: datetime) -> str:
    """
    タイムスタンプを拡張 ISO 8601 形式の文字列に変換

    小数秒は 0 なら省略、ミリ秒単位で表せるなら 3 桁、それ以外は 6 桁で出力します。
    UTC (オフセット 0) は "Z" で表記します。

    Args:
        timestamp: オフセット付き日時

    Returns:
        str: 例 "2024-01-05T12:00:00Z", "2024-01-05T12:00:00.250+09:00"
    """
    if timestamp.microsecond == 0:
        timespec = "seconds"
    elif timestamp.microsecond % 1000 == 0:
        timespec = "milliseconds"
    else:
        timespec = "microseconds"

    text = timestamp.isoformat(timespec=timespec)
    if timestamp.utcoffset() == timedelta(0):
        # "+00:00" を "Z" に置換
        text = text[:-6] + "Z"
    return text
