"""
reactivex 運算子：把狀態流接到選擇器上。
"""

from typing import Any, Callable, Tuple

from reactivex import Observable
from reactivex import operators as ops

from .equality import shallow_equal


def select(selector: Callable[..., Any], *args: Any) -> Callable[[Observable], Observable]:
    """
    將每個狀態映射為 selector(state, *args)，並略過與前一次淺比較相同的結果。

    用法：
      state_stream.pipe(select(get_visible_todos, props)).subscribe(render)
    """
    def _select(source: Observable) -> Observable:
        return source.pipe(
            ops.map(lambda state: selector(state, *args)),
            ops.distinct_until_changed(comparer=shallow_equal),
        )

    return _select


def select_changes(selector: Callable[..., Any], *args: Any) -> Callable[[Observable], Observable]:
    """
    與 select 相同，但發出 (舊值, 新值) 元組；第一個值不會單獨發出。
    """
    def _changes(source: Observable) -> Observable[Tuple[Any, Any]]:
        return source.pipe(select(selector, *args), ops.pairwise())

    return _changes
