"""スキャンオーケストレーションサービス"""

from contextlib import AbstractContextManager
from pathlib import Path
from typing import Callable, List, Optional, TextIO
import logging
import sys
import time
from pydantic import BaseModel

from ..domain.configuration import TAB_ESCAPE, Configuration, DiffMode
from ..domain.errors import GapDetectorError
from ..domain.gap_detector import GapDetector
from ..infrastructure.line_source import open_line_source
from ..infrastructure.report_writer import ReportWriter


class ScanResult(BaseModel):
    """
    スキャン結果サマリー

    Attributes:
        success: スキャンが成功したか
        lines_read: 読み込んだ行数
        lines_skipped: スキップした行数（コメント行・許容された空行など）
        gaps_reported: 出力したギャップ件数
        output_closed: 出力先が読み手によって閉じられたか
        errors: エラーメッセージリスト
        execution_time_seconds: 実行時間（秒）
    """
    success: bool
    lines_read: int = 0
    lines_skipped: int = 0
    gaps_reported: int = 0
    output_closed: bool = False
    errors: List[str] = []
    execution_time_seconds: float = 0.0


class ScanService:
    """
    スキャン処理全体のオーケストレーション

    Responsibilities:
    - 設定の正規化（GapDetector 生成時）と詳細ログ出力
    - 行ソースの読み込み、ギャップ検知、レポート出力の調整
    - 致命的エラーの捕捉と結果サマリーへの変換
    - 出力先クローズ（BrokenPipeError）を正常終了として扱う
    """

    def __init__(
        self,
        config: Configuration,
        output: Optional[TextIO] = None,
        source_opener: Callable[[Path], AbstractContextManager] = open_line_source
    ):
        """
        ScanService を初期化

        Args:
            config: 実行設定
            output: 出力先ストリーム。None の場合は標準出力
            source_opener: 入力ストリームを開くコンテキストマネージャー生成関数
        """
        self.config = config
        self.output = output if output is not None else sys.stdout
        self.source_opener = source_opener
        self.logger = logging.getLogger(__name__)

    def run(self) -> ScanResult:
        """
        スキャンを実行

        Returns:
            ScanResult: スキャン結果サマリー

        Preconditions: config.threshold は config.format で生成されている
        Postconditions: 条件を満たしたギャップがすべて出力される
        Invariants: エラー発生時も、それまでに出力した行は取り消さない
        """
        start_time = time.time()
        detector = None
        writer = None
        line_number = 0

        try:
            # 入力を読む前に設定を検証
            detector = GapDetector(self.config)
            if self.config.verbose:
                self._log_configuration(detector.config)

            writer = ReportWriter(self.output, detector.config.mode)

            with self.source_opener(self.config.source) as source:
                for raw_line in source:
                    line_number += 1
                    gap = detector.feed(line_number, raw_line)
                    if gap is not None:
                        writer.write_gap(gap)

            writer.flush()

            result = ScanResult(
                success=True,
                lines_read=line_number,
                lines_skipped=detector.skipped_count,
                gaps_reported=writer.written_count,
                execution_time_seconds=time.time() - start_time
            )
            if self.config.verbose:
                self.logger.info(
                    f"Scan completed: {result.lines_read} lines read, "
                    f"{result.lines_skipped} skipped, "
                    f"{result.gaps_reported} gaps reported"
                )
            return result

        except BrokenPipeError:
            # 読み手が出力を閉じた場合は正常終了扱い
            self.logger.debug(f"Output closed by consumer after line {line_number}")
            return self._result(
                True, line_number, detector, writer, start_time, output_closed=True
            )

        except GapDetectorError as e:
            return self._result(
                False, line_number, detector, writer, start_time, errors=[str(e)]
            )

        except (OSError, UnicodeDecodeError) as e:
            return self._result(
                False, line_number, detector, writer, start_time,
                errors=[f"I/O error on '{self.config.source}': {e}"]
            )

    def _result(
        self,
        success: bool,
        line_number: int,
        detector: Optional[GapDetector],
        writer: Optional[ReportWriter],
        start_time: float,
        output_closed: bool = False,
        errors: Optional[List[str]] = None
    ) -> ScanResult:
        """途中終了時の ScanResult を組み立てる"""
        return ScanResult(
            success=success,
            lines_read=line_number,
            lines_skipped=detector.skipped_count if detector else 0,
            gaps_reported=writer.written_count if writer else 0,
            output_closed=output_closed,
            errors=errors or [],
            execution_time_seconds=time.time() - start_time
        )

    def _log_configuration(self, config: Configuration) -> None:
        """
        正規化済みの設定内容をログ出力

        Args:
            config: 正規化済みの設定
        """
        self.logger.info(f"Configuration: {config!r}")

        if config.delimiter == "\t":
            self.logger.info("Using tab as input delimiter.")
        elif not config.delimiter:
            self.logger.info("No delimiter, using whole line as target field.")

        # 正規化前の値で判定する（空の場合は入力の区切り文字に置き換わるため）
        raw_mode = self.config.mode
        if isinstance(raw_mode, DiffMode):
            if raw_mode.output_delimiter in (TAB_ESCAPE, "\t"):
                self.logger.info("Using tab as output delimiter.")
            elif not raw_mode.output_delimiter:
                self.logger.info("No output delimiter, using same as input.")
