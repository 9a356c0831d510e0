"""CLI エントリーポイント"""

import argparse
import sys
import logging
import os
from pathlib import Path

from .domain.comparison import Comparison
from .domain.configuration import Configuration, DiffMode, FilterMode
from .domain.errors import GapDetectorError
from .domain.formats import Format
from .orchestration.scan_service import ScanService


DESCRIPTION = """\
Tool to inspect CSV data, looking for (time) gaps between subsequent lines.
In a more general sense: calculates the difference between numerical or time
field values in subsequent lines of text, and reports gaps greater/less than
allowed."""

FORMAT_HELP = """\
format of the selected field: uint (unsigned integer), int (signed integer),
unix (non-leap seconds since the Unix Epoch), unix_ms (milliseconds since the
Unix Epoch), rfc-3339 (timestamp like "yyyy-mm-ddTHH:MM:SSZ")"""

GAP_HELP = """\
greater gaps than GAP trigger output (default behavior). GAP is a signed
integer for uint and int [default: 1], or a signed integer followed by one of
[smhdw] for rfc-3339, unix and unix_ms, like "12h" [default: 1h]"""

DEFAULT_GAP = "1"

_COMPARISON_OPTIONS = [
    ("gt", Comparison.GREATER_THAN),
    ("ge", Comparison.GREATER_OR_EQUAL),
    ("lt", Comparison.LESS_THAN),
    ("le", Comparison.LESS_OR_EQUAL),
]


def _non_empty(value: str) -> str:
    if not value:
        raise argparse.ArgumentTypeError("value must not be empty")
    return value


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: '{value}'")
    if number < 1:
        raise argparse.ArgumentTypeError(f"index must be at least 1: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """
    コマンドライン引数パーサーを構築

    Returns:
        argparse.ArgumentParser: csv-gap-detector 用のパーサー
    """
    parser = argparse.ArgumentParser(
        prog="csv-gap-detector",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-d", dest="delimiter", metavar="DELIM", default=",",
        help="input delimiter, can be longer than a single char; empty string "
             "uses the whole line as the field, '\\t' means tab (default: ',')",
    )
    parser.add_argument(
        "-i", dest="index", metavar="INDEX", type=_positive_int, default=1,
        help="index of the field to be evaluated, starting from 1 (default: 1)",
    )
    parser.add_argument(
        "-f", dest="format", metavar="FORMAT", default=Format.UINT.value,
        choices=[f.value for f in Format], help=FORMAT_HELP,
    )

    comparison = parser.add_mutually_exclusive_group()
    comparison.add_argument("--gt", metavar="GAP", type=_non_empty, help=GAP_HELP)
    comparison.add_argument(
        "--ge", metavar="GAP", type=_non_empty,
        help="'greater-or-equal' comparison, see --gt",
    )
    comparison.add_argument(
        "--lt", metavar="GAP", type=_non_empty,
        help="'less-than' comparison, see --gt",
    )
    comparison.add_argument(
        "--le", metavar="GAP", type=_non_empty,
        help="'less-or-equal' comparison, see --gt",
    )

    parser.add_argument(
        "-c", dest="comment", metavar="COMMENT", default="#",
        help="skip lines starting with COMMENT; empty string turns off "
             "comment detection (default: '#')",
    )
    parser.add_argument(
        "-a", dest="allow_empty", action="store_true",
        help="allow empty or invalid lines (empty, or fewer fields than expected)",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-D", "--diff", metavar="DELIM", nargs="?", const=",", default=None,
        help="diff mode (default): one line per gap with the two values "
             "separated by DELIM, same as input if empty (default: ',')",
    )
    mode.add_argument(
        "-F", "--filter", action="store_true",
        help="filter mode: both lines of each gap unchanged, separated by an "
             "empty line",
    )

    parser.add_argument(
        "-v", dest="verbose", action="store_true",
        help="verbose mode: log configuration and summary",
    )
    parser.add_argument(
        "file", metavar="FILE", type=_non_empty,
        help="delimiter separated input file, or '-' for standard input",
    )
    return parser


def build_configuration(args: argparse.Namespace) -> Configuration:
    """
    解析済みの引数から実行設定を構築

    Args:
        args: build_parser() で解析した引数

    Returns:
        Configuration: 実行設定

    Raises:
        ParseError: 閾値がフォーマットの文法に合致しない場合
    """
    data_format = Format(args.format)

    comparison, gap = Comparison.GREATER_THAN, DEFAULT_GAP
    for option, candidate in _COMPARISON_OPTIONS:
        value = getattr(args, option)
        if value is not None:
            comparison, gap = candidate, value
            break

    if args.filter:
        mode = FilterMode()
    else:
        mode = DiffMode(output_delimiter=args.diff if args.diff is not None else ",")

    return Configuration(
        delimiter=args.delimiter,
        index=args.index,
        format=data_format,
        comparison=comparison,
        threshold=data_format.parse_diff(gap),
        comment=args.comment,
        allow_empty=args.allow_empty,
        verbose=args.verbose,
        mode=mode,
        source=Path(args.file),
    )


def _discard_stdout() -> None:
    """
    標準出力を devnull に付け替える

    読み手が閉じたパイプに対して、インタープリター終了時の flush が
    再度 BrokenPipeError を起こさないようにする
    """
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())


def main(argv=None):
    """
    CLI エントリーポイント

    Usage:
        python -m gap_detector [options] FILE

    Exit codes:
        0: 成功（出力先が読み手に閉じられた場合を含む）
        1: 失敗
        2: 引数エラー（argparse）
    """
    args = build_parser().parse_args(argv)

    # ロギング設定
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    logger = logging.getLogger(__name__)

    try:
        config = build_configuration(args)
        service = ScanService(config)
        result = service.run()

        if result.output_closed:
            _discard_stdout()

        if result.success:
            sys.exit(0)
        else:
            logger.error("; ".join(result.errors))
            sys.exit(1)

    except GapDetectorError as e:
        logger.error(str(e))
        sys.exit(1)

    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
