"""
開發模式檢查。

偵測常見的選擇器誤用：
- 輸入函數每次都回傳新建的集合（快取永遠不命中）
- 結果函數原封不動地回傳第一個輸入（選擇器沒有意義）

檢查結果只以警告日誌呈現，不會改變選擇器的回傳值。
"""

import logging
import threading
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ValidationError

from .equality import shallow_equal
from .errors import ConfigurationError
from .types import DevModeCheckFrequency, EqualityCheck

logger = logging.getLogger("pyreselect.dev_checks")


class DevModeChecks(BaseModel):
    """開發模式檢查的設定。"""

    input_stability_check: DevModeCheckFrequency = "never"
    identity_function_check: DevModeCheckFrequency = "never"


DevModeChecksLike = Union[DevModeChecks, Mapping[str, Any]]

_global_lock = threading.Lock()
_global_checks = DevModeChecks()


def _coerce(checks: DevModeChecksLike, base: DevModeChecks) -> DevModeChecks:
    if isinstance(checks, DevModeChecks):
        return checks
    if not isinstance(checks, Mapping):
        raise ConfigurationError(
            f"dev_mode_checks must be a mapping or DevModeChecks, got {type(checks).__name__}",
            component="dev_checks",
            config_key="dev_mode_checks",
        )
    unknown = set(checks) - set(DevModeChecks.model_fields)
    if unknown:
        raise ConfigurationError(
            f"unknown dev mode check(s): {', '.join(sorted(unknown))}",
            component="dev_checks",
            config_key="dev_mode_checks",
        )
    try:
        return base.model_validate({**base.model_dump(), **checks})
    except ValidationError as err:
        raise ConfigurationError(
            "invalid dev mode check frequency, expected 'once', 'always' or 'never'",
            component="dev_checks",
            config_key="dev_mode_checks",
            errors=err.errors(),
        ) from err


def set_global_dev_mode_checks(checks: Optional[DevModeChecksLike] = None, **kwargs: Any) -> DevModeChecks:
    """
    設定所有選擇器預設使用的開發模式檢查。

    用法：
      set_global_dev_mode_checks(input_stability_check="once")
    或
      set_global_dev_mode_checks({"identity_function_check": "always"})

    Returns:
        更新後的設定
    """
    global _global_checks
    with _global_lock:
        if checks is not None and not isinstance(checks, Mapping):
            checks = _coerce(checks, _global_checks)
        overrides = checks.model_dump() if isinstance(checks, DevModeChecks) else dict(checks or {})
        _global_checks = _coerce({**overrides, **kwargs}, _global_checks)
        return _global_checks


def get_global_dev_mode_checks() -> DevModeChecks:
    return _global_checks


def resolve_dev_mode_checks(checks: Optional[DevModeChecksLike]) -> Optional[Dict[str, Any]]:
    """
    驗證單一選擇器的設定，只保留明確指定的欄位。

    未指定的欄位在呼叫時沿用當下的全域設定；None 表示完全沿用全域設定。
    """
    if checks is None:
        return None
    validated = _coerce(checks, DevModeChecks())
    if isinstance(checks, DevModeChecks):
        return checks.model_dump(exclude_unset=True)
    return {key: getattr(validated, key) for key in checks}


def effective_dev_mode_checks(overrides: Optional[Dict[str, Any]]) -> DevModeChecks:
    """將單一選擇器的設定套用在目前的全域設定上。"""
    current = _global_checks
    if not overrides:
        return current
    return current.model_copy(update=overrides)


def should_run(frequency: DevModeCheckFrequency, first_run: bool) -> bool:
    if frequency == "always":
        return True
    return frequency == "once" and first_run


def run_input_stability_check(
    selector_name: str,
    input_selectors: Sequence[Callable[..., Any]],
    call_inputs: Callable[[], Sequence[Any]],
    values: Sequence[Any],
    equality_check: EqualityCheck = shallow_equal,
) -> bool:
    """
    以相同參數再執行一次輸入函數，比較兩次結果。

    equality_check 應與選擇器快取使用的比較方式一致。

    Returns:
        兩次結果全部相同時為 True
    """
    second = call_inputs()
    unstable = [
        getattr(fn, "__name__", repr(fn))
        for fn, first, again in zip(input_selectors, values, second)
        if not equality_check(first, again)
    ]
    if unstable:
        logger.warning(
            "An input selector of %s returned a different result when passed the same arguments "
            "(unstable: %s). The result function will recompute on every call; return existing "
            "references from the state instead of building new collections.",
            selector_name,
            ", ".join(unstable),
        )
        return False
    return True


def run_identity_function_check(selector_name: str, values: Sequence[Any], result: Any) -> bool:
    """
    Returns:
        結果函數沒有直接回傳第一個輸入時為 True
    """
    if values and result is values[0]:
        logger.warning(
            "The result function of %s returned its first input unchanged. A selector that only "
            "passes a value through adds caching overhead without benefit; use the input "
            "function directly.",
            selector_name,
        )
        return False
    return True
