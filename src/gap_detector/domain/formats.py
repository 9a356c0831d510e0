"""
フォーマット定義とパースロジック

フィールド文字列を Value に、閾値文字列を Difference に変換します。
対応フォーマット:
- uint: 符号なし整数 (2^63-1 まで)
- int: 64 ビット符号付き整数
- unix: Unix エポックからの秒数
- unix_ms: Unix エポックからのミリ秒数
- rfc-3339: "yyyy-mm-ddTHH:MM:SSZ" 形式のタイムスタンプ（オフセット必須）
"""

import re
from datetime import datetime, timedelta, timezone
from enum import Enum

from .errors import ParseError
from .models import (
    I64_MAX,
    I64_MIN,
    Difference,
    DurationDifference,
    NumberDifference,
    NumberValue,
    TimestampValue,
    Value,
)


class Format(str, Enum):
    """フィールドのフォーマット"""
    UINT = "uint"
    INT = "int"
    UNIX = "unix"
    UNIX_MS = "unix_ms"
    RFC3339 = "rfc-3339"

    @property
    def is_temporal(self) -> bool:
        """タイムスタンプ系フォーマットであれば True"""
        return self in (Format.UNIX, Format.UNIX_MS, Format.RFC3339)

    def parse_value(self, raw: str) -> Value:
        """
        フィールド文字列を Value に変換

        前後の空白を除去し、両端がダブルクォートの場合はそれも除去してから
        フォーマットごとのパーサーに渡します。

        Args:
            raw: フィールド文字列

        Returns:
            Value: 解析済みの値

        Raises:
            ParseError: フォーマットの文法に合致しない場合
        """
        return _VALUE_PARSERS[self](_unquote(raw))

    def parse_diff(self, raw: str) -> Difference:
        """
        閾値文字列を Difference に変換

        整数フォーマットでは符号付き整数、タイムスタンプ系フォーマットでは
        "<符号付き整数><単位>" (単位: s, m, h, d, w) を受け付けます。

        Args:
            raw: 閾値文字列（例: "5", "-3", "12h"）

        Returns:
            Difference: 閾値

        Raises:
            ParseError: 閾値の文法に合致しない場合

        Note:
            タイムスタンプ系フォーマットでは "1" を "1h" として扱います。
            明示的に "1" を指定した場合も同様です。
        """
        if self.is_temporal:
            return _parse_duration(raw)
        return _parse_number_diff(raw)


_UINT_PATTERN = re.compile(r'\+?[0-9]+')
_INT_PATTERN = re.compile(r'[+-]?[0-9]+')

_RFC3339_PATTERN = re.compile(
    r'([0-9]{4})-([0-9]{2})-([0-9]{2})[Tt ]([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.([0-9]+))?'
    r'(?:([Zz])|([+-])([0-9]{2}):([0-9]{2}))'
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_DURATION_UNITS = {
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}


def _unquote(raw: str) -> str:
    """前後の空白と、両端のダブルクォートを除去"""
    text = raw.strip()
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        text = text[1:-1]
    return text


def _parse_i64(text: str) -> int:
    """
    64 ビット符号付き整数リテラルを解析

    Raises:
        ValueError: リテラルが不正、または範囲外の場合
    """
    if not text:
        raise ValueError("cannot parse integer from empty string")
    if not _INT_PATTERN.fullmatch(text):
        raise ValueError("invalid digit found in string")

    number = int(text)
    if number > I64_MAX:
        raise ValueError("number too large to fit in target type")
    if number < I64_MIN:
        raise ValueError("number too small to fit in target type")
    return number


def _parse_uint(text: str) -> Value:
    if not text:
        raise ParseError("could not be parsed: cannot parse integer from empty string")
    if not _UINT_PATTERN.fullmatch(text):
        raise ParseError("could not be parsed: invalid digit found in string")

    try:
        number = int(text)
    except ValueError as e:
        # 整数文字列の桁数上限を超える場合
        raise ParseError("could not be parsed: number too large (>2^63-1)") from e
    if number > I64_MAX:
        raise ParseError("could not be parsed: number too large (>2^63-1)")
    return NumberValue(value=number)


def _parse_int(text: str) -> Value:
    try:
        return NumberValue(value=_parse_i64(text))
    except ValueError as e:
        raise ParseError(f"could not be parsed: {e}") from e


def _parse_epoch(text: str, unit: str) -> Value:
    """エポックからの経過時間 (unit 単位) を UTC のタイムスタンプに変換"""
    try:
        count = _parse_i64(text)
    except ValueError as e:
        raise ParseError(f"could not be parsed: {e}") from e

    try:
        timestamp = _EPOCH + timedelta(**{unit: count})
    except OverflowError as e:
        raise ParseError("could not be parsed: invalid timestamp") from e
    return TimestampValue(value=timestamp)


def _parse_unix(text: str) -> Value:
    return _parse_epoch(text, "seconds")


def _parse_unix_ms(text: str) -> Value:
    return _parse_epoch(text, "milliseconds")


def _parse_rfc3339(text: str) -> Value:
    """
    RFC 3339 タイムスタンプを解析

    ファイル名向けのエンコード (例: "2024-01-05_12:00:00Z") を許容するため、
    アンダースコアは "T" に置換してから解析します。
    マイクロ秒より細かい小数秒は切り捨てます。
    """
    text = text.replace("_", "T")

    match = _RFC3339_PATTERN.fullmatch(text)
    if not match:
        raise ParseError("could not be parsed: input is not in RFC 3339 format")

    (year, month, day, hour, minute, second, fraction,
     zulu, sign, offset_hours, offset_minutes) = match.groups()

    microsecond = int((fraction or "0")[:6].ljust(6, "0"))

    try:
        if zulu:
            tzinfo = timezone.utc
        else:
            offset = timedelta(hours=int(offset_hours), minutes=int(offset_minutes))
            if int(offset_minutes) >= 60:
                raise ValueError("offset minutes out of range")
            tzinfo = timezone(-offset if sign == "-" else offset)

        timestamp = datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second), microsecond,
            tzinfo=tzinfo,
        )
    except ValueError as e:
        raise ParseError(f"could not be parsed: {e}") from e

    return TimestampValue(value=timestamp)


_VALUE_PARSERS = {
    Format.UINT: _parse_uint,
    Format.INT: _parse_int,
    Format.UNIX: _parse_unix,
    Format.UNIX_MS: _parse_unix_ms,
    Format.RFC3339: _parse_rfc3339,
}


def _parse_number_diff(raw: str) -> Difference:
    try:
        return NumberDifference(value=_parse_i64(raw))
    except ValueError as e:
        raise ParseError(f"invalid numeric gap '{raw}': {e}") from e


def _parse_duration(raw: str) -> Difference:
    # 省略時のデフォルト "1" を 1 時間として扱う
    if raw == "1":
        raw = "1h"

    err_base = f"invalid duration gap '{raw}'"
    if not raw:
        raise ParseError(f"{err_base}: empty")

    number, unit = raw[:-1], raw[-1]
    if not number:
        raise ParseError(f"{err_base}: invalid value or timebase")

    try:
        count = _parse_i64(number)
    except ValueError as e:
        raise ParseError(f"{err_base}: {e}") from e

    if unit not in _DURATION_UNITS:
        raise ParseError(f"{err_base}: unexpected character '{unit}'")

    try:
        return DurationDifference(value=timedelta(**{_DURATION_UNITS[unit]: count}))
    except OverflowError as e:
        raise ParseError(f"{err_base}: duration out of range") from e
