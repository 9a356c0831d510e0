"""
実行設定モデル

CLI から受け取る全パラメータを単一の不変モデルとして保持します。
コアは設定を変更せず、区切り文字の略記の正規化のみ normalized() で
新しいインスタンスとして返します。
"""

from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .comparison import Comparison
from .errors import ConfigurationError
from .formats import Format
from .models import Difference, DurationDifference, NumberDifference


STDIN_SOURCE = Path("-")
TAB_ESCAPE = "\\t"


class DiffMode(BaseModel):
    """差分モード: ギャップごとに「前の値 + 出力区切り文字 + 現在の値」を 1 行出力"""

    model_config = ConfigDict(frozen=True)

    output_delimiter: str = Field(default=",", description="出力区切り文字（空なら入力と同じ）")


class FilterMode(BaseModel):
    """フィルターモード: ギャップを挟む 2 行をそのまま出力"""

    model_config = ConfigDict(frozen=True)


ReportMode = Union[DiffMode, FilterMode]


class Configuration(BaseModel):
    """
    実行設定

    Attributes:
        delimiter: 入力区切り文字（空文字列なら行全体を対象フィールドとする）
        index: 対象フィールド番号（1 始まり）
        format: フィールドのフォーマット
        comparison: 比較方法
        threshold: 閾値（format.parse_diff で生成したもの）
        comment: コメント行の接頭辞（空文字列で無効）
        allow_empty: 空行・フィールド欠落を許容するか
        verbose: スキャン前に設定内容をログ出力するか
        mode: 出力モード
        source: 入力ファイルパス（"-" は標準入力）
    """

    model_config = ConfigDict(frozen=True)

    delimiter: str = ","
    index: int = Field(default=1, ge=1)
    format: Format = Format.UINT
    comparison: Comparison = Comparison.GREATER_THAN
    threshold: Difference
    comment: str = "#"
    allow_empty: bool = False
    verbose: bool = False
    mode: ReportMode = Field(default_factory=DiffMode)
    source: Path = STDIN_SOURCE

    @model_validator(mode="after")
    def validate_threshold_kind(self) -> "Configuration":
        """
        閾値の種類がフォーマットと一致することを検証

        Raises:
            ValueError: 整数フォーマットに時間差、またはタイムスタンプ系フォーマットに
                        整数差の閾値が渡された場合
        """
        expected = DurationDifference if self.format.is_temporal else NumberDifference
        if not isinstance(self.threshold, expected):
            raise ValueError(
                f"threshold {type(self.threshold).__name__} does not match "
                f"format '{self.format.value}'"
            )
        return self

    @property
    def reads_stdin(self) -> bool:
        """標準入力から読み込む場合は True"""
        return self.source == STDIN_SOURCE

    def normalized(self) -> "Configuration":
        """
        区切り文字の略記を正規化した設定を返す

        - 入力区切り文字 "\\t" はタブ文字に置換
        - 差分モードの出力区切り文字 "\\t" はタブ文字に置換
        - 差分モードの出力区切り文字が空なら入力区切り文字を使用

        Returns:
            Configuration: 正規化済みの設定（元の設定は変更しない）

        Raises:
            ConfigurationError: 区切り文字が空で index が 1 以外の場合
        """
        delimiter = "\t" if self.delimiter == TAB_ESCAPE else self.delimiter
        if not delimiter and self.index != 1:
            raise ConfigurationError("supplied index and delimiter are incompatible")

        mode = self.mode
        if isinstance(mode, DiffMode):
            if mode.output_delimiter == TAB_ESCAPE:
                mode = DiffMode(output_delimiter="\t")
            elif not mode.output_delimiter:
                mode = DiffMode(output_delimiter=delimiter)

        return self.model_copy(update={"delimiter": delimiter, "mode": mode})
