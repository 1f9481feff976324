# pyreselect/immutable_utils.py
from typing import Any, Type, TypeVar

from immutables import Map
from pydantic import BaseModel

T = TypeVar('T', bound=BaseModel)


def to_immutable(obj: Any) -> Any:
    """
    將狀態轉換為不可變形式 (包括 Pydantic 模型)

    轉換後的狀態樹可以透過 Map.set 做結構共享的更新，
    未變動的分支維持同一個參照，淺比較的選擇器快取因此能命中。
    """
    if isinstance(obj, Map):
        return obj
    if isinstance(obj, BaseModel):
        return Map({k: to_immutable(getattr(obj, k)) for k in type(obj).model_fields})
    if isinstance(obj, dict):
        return Map({k: to_immutable(v) for k, v in obj.items()})
    if isinstance(obj, (list, tuple)):
        return tuple(to_immutable(i) for i in obj)
    if isinstance(obj, (set, frozenset)):
        return frozenset(to_immutable(i) for i in obj)
    return obj


def to_pydantic(map_obj: Map, model_class: Type[T]) -> T:
    """將 Map 轉換回 Pydantic 模型"""
    return model_class(**to_dict(map_obj))


def to_dict(obj: Any) -> Any:
    """將 Map 及其巢狀結構轉換為普通字典"""
    if isinstance(obj, Map):
        return {k: to_dict(v) for k, v in obj.items()}
    if isinstance(obj, tuple):
        return [to_dict(i) for i in obj]
    if isinstance(obj, frozenset):
        return {to_dict(i) for i in obj}
    return obj
