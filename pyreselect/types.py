"""
pyreselect 共用的類型定義。
"""

from typing import Any, Callable, NamedTuple, Sequence, Tuple, TypeVar

from typing_extensions import Literal, Protocol

S = TypeVar("S")
Input = TypeVar("Input")
Output = TypeVar("Output")
R = TypeVar("R")
R_co = TypeVar("R_co", covariant=True)

# 從 (state, props?) 取值的輸入函數
StateSelector = Callable[..., Output]
# 將所有輸入值組合成結果的函數
ResultSelector = Callable[..., R]
# 比較兩個值是否視為相同
EqualityCheck = Callable[[Any, Any], bool]

DevModeCheckFrequency = Literal["once", "always", "never"]


class CacheInfo(NamedTuple):
    """與 functools.lru_cache 相同格式的快取統計。"""
    hits: int
    misses: int
    maxsize: int
    currsize: int


class MemoizedFunction(Protocol[R_co]):
    """經 memoize 包裝後的函數。"""

    def __call__(self, *args: Any) -> R_co: ...

    def cache_info(self) -> CacheInfo: ...

    def cache_clear(self) -> None: ...

    def last_result(self) -> R_co: ...


MemoizeFunction = Callable[..., MemoizedFunction[Any]]


class MemoizedSelector(Protocol[R_co]):
    """create_selector 回傳的選擇器。"""

    result_func: ResultSelector[Any]
    memoized_result_func: MemoizedFunction[Any]
    dependencies: Tuple[StateSelector[Any], ...]

    def __call__(self, *args: Any) -> R_co: ...

    def recomputations(self) -> int: ...

    def reset_recomputations(self) -> None: ...

    def last_result(self) -> R_co: ...

    def cache_info(self) -> CacheInfo: ...

    def cache_clear(self) -> None: ...


SelectorList = Sequence[StateSelector[Any]]
