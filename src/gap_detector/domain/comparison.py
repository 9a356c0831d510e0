"""比較演算子定義"""

import operator
from enum import Enum

from .models import Difference


class Comparison(str, Enum):
    """差分と閾値の比較方法"""
    GREATER_THAN = ">"
    GREATER_OR_EQUAL = ">="
    LESS_THAN = "<"
    LESS_OR_EQUAL = "<="

    def evaluate(self, gap: Difference, threshold: Difference) -> bool:
        """
        差分が閾値に対して条件を満たすかを判定

        Args:
            gap: 隣接行の差分
            threshold: 設定された閾値（gap と同じ種類であること）

        Returns:
            bool: 条件を満たせば True

        Raises:
            TypeError: gap と threshold の種類が異なる場合（内部不整合）
        """
        return _OPERATORS[self](gap, threshold)


_OPERATORS = {
    Comparison.GREATER_THAN: operator.gt,
    Comparison.GREATER_OR_EQUAL: operator.ge,
    Comparison.LESS_THAN: operator.lt,
    Comparison.LESS_OR_EQUAL: operator.le,
}
