"""
例外定義

ギャップ検知処理で発生するユーザー向けエラーを定義します。
いずれも GapDetectorError を継承し、CLI で 1 行のメッセージとして報告されます。
"""

from typing import Optional


class GapDetectorError(Exception):
    """ギャップ検知エラーの基底クラス"""


class ConfigurationError(GapDetectorError):
    """
    設定エラー例外

    区切り文字とフィールド番号の組み合わせが矛盾している場合など、
    入力を読み始める前に検出される設定の不整合を表します。
    """


class LineError(GapDetectorError):
    """
    行構造エラー例外

    空行、または対象フィールドが存在しない・空である行を表します。
    allow_empty が有効な場合は発生せず、該当行はスキップされます。
    """

    def __init__(self, message: str, line_number: int, field_index: Optional[int] = None):
        """
        Args:
            message: エラーメッセージ
            line_number: エラーが発生した行番号（1 始まり）
            field_index: 対象フィールド番号（1 始まり、該当する場合）
        """
        super().__init__(message)
        self.line_number = line_number
        self.field_index = field_index


class ParseError(GapDetectorError):
    """
    パースエラー例外

    フィールド文字列または閾値文字列が選択されたフォーマットの文法に
    合致しない場合を表します。allow_empty の設定に関わらず常に致命的です。
    """

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        field: Optional[str] = None,
    ):
        """
        Args:
            message: エラーメッセージ
            line_number: エラーが発生した行番号（スキャン中の場合）
            field: パースに失敗したフィールド文字列（スキャン中の場合）
        """
        super().__init__(message)
        self.line_number = line_number
        self.field = field
