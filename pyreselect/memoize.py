"""
單槽（depth 1）記憶化。

每個 CacheEntry 只記住最近一次的參數與結果，新的參數組合會直接覆蓋舊的。
"""

import functools
import logging
import threading
from typing import Any, Callable, Optional, Sequence, Tuple

from .equality import args_equal, shallow_equal
from .errors import SelectorError
from .types import CacheInfo, EqualityCheck

logger = logging.getLogger("pyreselect.memoize")


class CacheEntry:
    """
    最近一次的 (參數, 結果) 配對。

    兩者存放在同一個 tuple 中，寫入時一次替換，
    因此不可能觀察到參數與結果不一致的狀態。
    """

    __slots__ = ("_slot",)

    def __init__(self):
        self._slot: Optional[Tuple[Tuple[Any, ...], Any]] = None

    @property
    def is_empty(self) -> bool:
        return self._slot is None

    @property
    def last_inputs(self) -> Optional[Tuple[Any, ...]]:
        return None if self._slot is None else self._slot[0]

    @property
    def last_result(self) -> Any:
        if self._slot is None:
            raise LookupError("cache entry is empty")
        return self._slot[1]

    def matches(self, inputs: Sequence[Any], equality_check: EqualityCheck = shallow_equal) -> bool:
        """判斷 inputs 是否與快取中的參數相同。空快取永遠不匹配。"""
        if self._slot is None:
            return False
        return args_equal(self._slot[0], inputs, equality_check)

    def store(self, inputs: Sequence[Any], result: Any) -> None:
        self._slot = (tuple(inputs), result)

    def clear(self) -> None:
        self._slot = None

    def __repr__(self):
        if self._slot is None:
            return "CacheEntry(empty)"
        return f"CacheEntry(last_inputs={self._slot[0]!r}, last_result={self._slot[1]!r})"


def default_memoize(func: Callable[..., Any], equality_check: EqualityCheck = shallow_equal):
    """
    以單一 CacheEntry 記憶化 func，快取鍵為所有位置參數。

    Args:
        func: 要記憶化的函數
        equality_check: 逐一位置比較參數的函數，預設為淺比較

    Returns:
        包裝後的函數，附帶 cache_info、cache_clear 與 last_result 方法
    """
    entry = CacheEntry()
    lock = threading.RLock()
    hits = 0
    misses = 0
    name = getattr(func, "__name__", repr(func))

    @functools.wraps(func)
    def memoized(*args: Any) -> Any:
        nonlocal hits, misses
        with lock:
            if entry.matches(args, equality_check):
                hits += 1
                return entry.last_result

            misses += 1
            logger.debug("cache miss for %s, recomputing", name)
            # func 失敗時異常直接往外拋，快取維持原狀
            result = func(*args)
            entry.store(args, result)
            return result

    def cache_info() -> CacheInfo:
        with lock:
            return CacheInfo(hits, misses, 1, 0 if entry.is_empty else 1)

    def cache_clear() -> None:
        nonlocal hits, misses
        with lock:
            entry.clear()
            hits = 0
            misses = 0

    def reset_stats() -> None:
        nonlocal hits, misses
        with lock:
            hits = 0
            misses = 0

    def last_result() -> Any:
        with lock:
            if entry.is_empty:
                raise SelectorError("memoized function has not been called yet", selector_name=name)
            return entry.last_result

    memoized.cache_info = cache_info  # type: ignore
    memoized.cache_clear = cache_clear  # type: ignore
    memoized.reset_stats = reset_stats  # type: ignore
    memoized.last_result = last_result  # type: ignore
    memoized.cache_entry = entry  # type: ignore

    return memoized
