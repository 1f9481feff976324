"""
選擇器快取使用的相等性比較。

預設採用淺比較：同一物件，或型別相同且值相等的基本型別。
容器一律只比較參照，這要求輸入函數回傳狀態樹中已存在的物件。
"""

from collections.abc import Mapping
from typing import Any, Sequence

from .types import EqualityCheck

_VALUE_TYPES = (int, float, complex, str, bytes, bool, type(None))


def shallow_equal(a: Any, b: Any) -> bool:
    """參照相等，或相同基本型別的值相等。"""
    if a is b:
        return True
    value_type = type(a)
    return value_type is type(b) and value_type in _VALUE_TYPES and a == b


def args_equal(prev: Sequence[Any], current: Sequence[Any], equality_check: EqualityCheck = shallow_equal) -> bool:
    """逐一位置比較兩組參數。"""
    if len(prev) != len(current):
        return False
    return all(equality_check(a, b) for a, b in zip(prev, current))


def deep_equal(a: Any, b: Any) -> bool:
    """
    結構化深度比較，只在明確需要時搭配 create_selector_creator 使用。

    支援 Mapping（含 immutables.Map）、list、tuple 與基本型別，
    其他物件退回 == 比較。
    """
    if a is b:
        return True
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        if len(a) != len(b):
            return False
        for key in a:
            if key not in b or not deep_equal(a[key], b[key]):
                return False
        return True
    if type(a) != type(b):
        return False
    if isinstance(a, (list, tuple)):
        if len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))
    return a == b
