"""
行ソース

入力ファイルまたは標準入力を、行単位で読み出せるテキストストリームとして提供します。
スキャン処理は入力元に関わらず同じコードで動作します。
"""

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO

from ..domain.configuration import STDIN_SOURCE


@contextmanager
def open_line_source(source: Path) -> Iterator[TextIO]:
    """
    入力ストリームを開く

    Args:
        source: 入力ファイルパス。"-" の場合は標準入力

    Yields:
        TextIO: 行単位で反復可能なテキストストリーム
                （最終行は末尾に改行がなくても 1 行として読み出される）

    Raises:
        OSError: ファイルを開けない場合

    Note:
        標準入力は呼び出し元の所有物のため、終了時にクローズしない。
        改行は LF のみとし、行の途中の CR では行を分割しない
    """
    if Path(source) == STDIN_SOURCE:
        reconfigure = getattr(sys.stdin, "reconfigure", None)
        if reconfigure is not None:
            reconfigure(newline="\n")
        yield sys.stdin
        return

    with open(source, "r", encoding="utf-8", newline="\n") as f:
        yield f
