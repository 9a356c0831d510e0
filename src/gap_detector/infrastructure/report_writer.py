"""レポート出力コンポーネント"""

from typing import TextIO

from ..domain.configuration import DiffMode, ReportMode
from ..domain.gap_detector import Gap


class ReportWriter:
    """
    検出したギャップを出力モードに応じて書き出す

    Responsibilities:
    - 差分モード: 「前の値 + 区切り文字 + 現在の値」を 1 行で出力
    - フィルターモード: ギャップを挟む 2 行をそのまま出力し、
      2 組目以降の前に空行を挟む
    - ギャップごとに逐次書き込み（全体をメモリに溜めない）
    """

    def __init__(self, stream: TextIO, mode: ReportMode):
        """
        ReportWriter を初期化

        Args:
            stream: 出力先ストリーム
            mode: 出力モード（正規化済みであること）
        """
        self.stream = stream
        self.mode = mode
        self.written_count = 0

    def write_gap(self, gap: Gap) -> None:
        """
        ギャップを 1 件出力

        Args:
            gap: 条件を満たした隣接行のペア

        Raises:
            BrokenPipeError: 出力先が読み手によって閉じられた場合
        """
        if isinstance(self.mode, DiffMode):
            self.stream.write(
                f"{gap.previous.value}{self.mode.output_delimiter}{gap.current.value}\n"
            )
        else:
            # 先頭の組の前には空行を出力しない
            if self.written_count > 0:
                self.stream.write("\n")
            self.stream.write(f"{gap.previous.line}\n{gap.current.line}\n")

        self.written_count += 1

    def flush(self) -> None:
        """バッファ済みの出力を書き出す"""
        self.stream.flush()
