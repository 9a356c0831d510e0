"""
ドメイン層

値モデル・フォーマット解析・比較・ギャップ検知ロジックを提供します。
"""

from .models import (
    NumberValue,
    TimestampValue,
    Value,
    NumberDifference,
    DurationDifference,
    Difference,
)
from .formats import Format
from .comparison import Comparison
from .configuration import Configuration, DiffMode, FilterMode, ReportMode
from .errors import GapDetectorError, ConfigurationError, LineError, ParseError
from .gap_detector import GapDetector, Gap, AcceptedLine

__all__ = [
    "NumberValue",
    "TimestampValue",
    "Value",
    "NumberDifference",
    "DurationDifference",
    "Difference",
    "Format",
    "Comparison",
    "Configuration",
    "DiffMode",
    "FilterMode",
    "ReportMode",
    "GapDetectorError",
    "ConfigurationError",
    "LineError",
    "ParseError",
    "GapDetector",
    "Gap",
    "AcceptedLine",
]
