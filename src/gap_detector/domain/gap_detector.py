"""
ギャップ検知ロジック

1 行ずつフィールドを抽出・解析し、直前に受理した行の値との差分を閾値と比較します。
状態は直前の受理行 (previous) のみで、スキップした行は状態を変更しません。
"""

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .configuration import Configuration
from .errors import LineError, ParseError
from .models import Difference, Value


class AcceptedLine(BaseModel):
    """受理した行（前後の空白を除去した行テキストと解析済みの値）"""

    model_config = ConfigDict(frozen=True)

    line: str = Field(..., description="前後の空白を除去した行テキスト")
    value: Value = Field(..., description="対象フィールドの値")


class Gap(BaseModel):
    """
    条件を満たした隣接行のペア

    Attributes:
        line_number: 現在行の行番号（1 始まり）
        previous: 直前に受理した行
        current: 現在行
        difference: current.value - previous.value
    """

    model_config = ConfigDict(frozen=True)

    line_number: int
    previous: AcceptedLine
    current: AcceptedLine
    difference: Difference


class GapDetector:
    """
    ギャップ検知ステートマシン

    状態:
    - 初回待ち: previous が None（まだ受理した行がない）
    - 前回値あり: previous に直前の受理行を保持

    行ごとに feed() を呼び出し、条件を満たした場合のみ Gap を返します。
    """

    def __init__(self, config: Configuration):
        """
        GapDetector を初期化

        Args:
            config: 実行設定（区切り文字の略記はここで正規化される）

        Raises:
            ConfigurationError: 区切り文字とフィールド番号が矛盾する場合
        """
        self.config = config.normalized()
        self.previous: Optional[AcceptedLine] = None
        self.accepted_count = 0
        self.skipped_count = 0
        self.logger = logging.getLogger(__name__)

    def feed(self, line_number: int, raw_line: str) -> Optional[Gap]:
        """
        1 行を処理

        Args:
            line_number: 行番号（1 始まり）
            raw_line: 改行を含む可能性のある生の行

        Returns:
            Optional[Gap]: 条件を満たした場合は Gap、それ以外（スキップ含む）は None

        Raises:
            LineError: 空行・フィールド欠落で allow_empty が無効な場合
            ParseError: フィールドがフォーマットに合致しない場合
        """
        line = raw_line.strip()

        field = self._extract_field(line_number, line)
        if field is None:
            self.logger.debug(f"Skipping line {line_number}")
            self.skipped_count += 1
            return None

        try:
            value = self.config.format.parse_value(field)
        except ParseError as e:
            raise ParseError(
                f"line {line_number} field '{field}' {e}",
                line_number=line_number,
                field=field,
            ) from e

        current = AcceptedLine(line=line, value=value)
        gap = None
        if self.previous is not None:
            difference = current.value - self.previous.value
            if self.config.comparison.evaluate(difference, self.config.threshold):
                gap = Gap(
                    line_number=line_number,
                    previous=self.previous,
                    current=current,
                    difference=difference,
                )

        self.previous = current
        self.accepted_count += 1
        return gap

    def _extract_field(self, line_number: int, line: str) -> Optional[str]:
        """
        対象フィールドを抽出

        Args:
            line_number: 行番号（エラーメッセージ用）
            line: 前後の空白を除去した行

        Returns:
            Optional[str]: 対象フィールド。スキップすべき行の場合は None

        Raises:
            LineError: 空行・フィールド欠落で allow_empty が無効な場合
        """
        config = self.config

        # コメント行
        if config.comment and line.startswith(config.comment):
            return None

        if not line:
            if config.allow_empty:
                return None
            raise LineError(f"line {line_number} is empty", line_number)

        # 区切り文字なし: 行全体が対象フィールド
        if not config.delimiter:
            return line

        # 区切り文字は文字クラスではなく固定文字列として分割
        fields = line.split(config.delimiter)
        if config.index > len(fields):
            if config.allow_empty:
                return None
            raise LineError(
                f"line {line_number} is invalid: "
                f"no field could be found at index {config.index}",
                line_number,
                config.index,
            )

        field = fields[config.index - 1]
        if not field:
            if config.allow_empty:
                return None
            raise LineError(
                f"line {line_number} is invalid: empty field at index {config.index}",
                line_number,
                config.index,
            )
        return field
