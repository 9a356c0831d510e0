"""
インフラストラクチャ層

入力ストリームの取得とレポート出力などの I/O を提供します。
"""

from .line_source import open_line_source
from .report_writer import ReportWriter

__all__ = ["open_line_source", "ReportWriter"]
