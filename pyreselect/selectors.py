"""
選擇器引擎。

create_selector 由一組輸入函數與一個結果函數組成記憶化的選擇器：
每次呼叫先以相同參數執行所有輸入函數，若輸入值與上一次逐一淺比較相同，
直接回傳上一次的結果；否則重新執行結果函數並覆蓋快取。快取深度固定為 1。
"""

import functools
import inspect
import logging
import threading
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple, overload

from .dev_checks import (
    DevModeChecksLike, effective_dev_mode_checks, resolve_dev_mode_checks,
    run_identity_function_check, run_input_stability_check, should_run,
)
from .equality import shallow_equal
from .errors import ConfigurationError, SelectorError, handle_error
from .memoize import default_memoize
from .types import CacheInfo, MemoizedSelector, MemoizeFunction, R, ResultSelector, StateSelector

logger = logging.getLogger("pyreselect.selectors")

_NOT_SET = object()


class _Arity(NamedTuple):
    required: int
    # None 表示接受任意數量的位置參數
    maximum: Optional[int]
    required_keyword_only: bool


def _positional_arity(fn: Callable[..., Any]) -> Optional[_Arity]:
    """取得函數可接受的位置參數數量；無法取得簽名時回傳 None。"""
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return None

    required = 0
    maximum = 0
    variadic = False
    required_keyword_only = False
    for param in sig.parameters.values():
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            maximum += 1
            if param.default is param.empty:
                required += 1
        elif param.kind is param.VAR_POSITIONAL:
            variadic = True
        elif param.kind is param.KEYWORD_ONLY and param.default is param.empty:
            required_keyword_only = True
    return _Arity(required, None if variadic else maximum, required_keyword_only)


def _callable_name(fn: Any) -> str:
    return getattr(fn, "__name__", None) or type(fn).__name__


def _split_arguments(
    selectors: Sequence[Any], result_fn: Optional[Callable[..., Any]]
) -> Tuple[List[Any], Any]:
    """
    支援三種寫法：
      create_selector(a, b, result_fn=f)
      create_selector(a, b, f)
      create_selector([a, b], f)
    """
    args = list(selectors)
    if result_fn is None and len(args) >= 2:
        result_fn = args.pop()
    if len(args) == 1 and isinstance(args[0], (list, tuple)):
        args = list(args[0])
    return args, result_fn


def _validate(input_selectors: List[Any], result_fn: Any, component: str) -> List[Optional[int]]:
    """
    檢查輸入函數與結果函數，回傳每個輸入函數可接收的位置參數上限。
    """
    if not input_selectors:
        raise ConfigurationError(
            "at least one input selector is required",
            component=component,
            config_key="input_selectors",
        )
    limits: List[Optional[int]] = []
    for index, fn in enumerate(input_selectors):
        if not callable(fn):
            raise ConfigurationError(
                f"input selector at position {index} is not callable: {fn!r}",
                component=component,
                config_key="input_selectors",
                position=index,
            )
        arity = _positional_arity(fn)
        if arity is not None and arity.required_keyword_only:
            raise ConfigurationError(
                f"input selector {_callable_name(fn)} has required keyword-only parameters",
                component=component,
                config_key="input_selectors",
                position=index,
            )
        limits.append(None if arity is None else arity.maximum)

    if result_fn is None:
        raise ConfigurationError(
            "a result function is required",
            component=component,
            config_key="result_fn",
        )
    if not callable(result_fn):
        raise ConfigurationError(
            f"result function is not callable: {result_fn!r}",
            component=component,
            config_key="result_fn",
        )

    n = len(input_selectors)
    arity = _positional_arity(result_fn)
    if arity is not None:
        too_few = n < arity.required
        too_many = arity.maximum is not None and n > arity.maximum
        if too_few or too_many or arity.required_keyword_only:
            expected = (
                f"{arity.required}+" if arity.maximum is None
                else str(arity.required) if arity.required == arity.maximum
                else f"{arity.required}-{arity.maximum}"
            )
            raise ConfigurationError(
                f"result function {_callable_name(result_fn)} accepts {expected} positional "
                f"argument(s) but {n} input selector(s) were given",
                component=component,
                config_key="result_fn",
                input_count=n,
                expected_arity=expected,
            )
    return limits


def _build_selector(
    input_selectors: List[Any],
    result_fn: Any,
    memoize: MemoizeFunction,
    memoize_options: Optional[Dict[str, Any]],
    dev_mode_checks: Optional[DevModeChecksLike],
) -> MemoizedSelector[Any]:
    limits = _validate(input_selectors, result_fn, "create_selector")
    checks_override = resolve_dev_mode_checks(dev_mode_checks)
    # 穩定性檢查與快取使用同一種比較方式
    stability_check = (memoize_options or {}).get("equality_check", shallow_equal)
    dependencies = tuple(input_selectors)
    callers = tuple(zip(dependencies, limits))
    name = _callable_name(result_fn)

    recomputations = 0
    hits = 0
    first_run = True
    last = _NOT_SET
    lock = threading.RLock()

    @functools.wraps(result_fn)
    def counted_result_fn(*values: Any) -> Any:
        nonlocal recomputations
        recomputations += 1
        return result_fn(*values)

    try:
        memoized = memoize(counted_result_fn, **(memoize_options or {}))
    except TypeError as err:
        raise ConfigurationError(
            f"memoize function rejected its options: {err}",
            component="create_selector",
            config_key="memoize_options",
        ) from err

    def call_inputs(args: Tuple[Any, ...]) -> Tuple[Any, ...]:
        # 依列表順序執行，每個輸入函數看到相同的參數
        return tuple(
            fn(*args) if limit is None else fn(*args[:limit])
            for fn, limit in callers
        )

    def selector(*args: Any) -> Any:
        nonlocal hits, first_run, last
        with lock:
            values = call_inputs(args)
            checks = effective_dev_mode_checks(checks_override)
            if should_run(checks.input_stability_check, first_run):
                run_input_stability_check(
                    name, dependencies, lambda: call_inputs(args), values, stability_check
                )

            before = recomputations
            result = memoized(*values)
            if recomputations == before:
                hits += 1
            elif should_run(checks.identity_function_check, first_run):
                run_identity_function_check(name, values, result)

            first_run = False
            last = result
            return result

    def get_recomputations() -> int:
        return recomputations

    def reset_recomputations() -> None:
        nonlocal recomputations, hits
        with lock:
            recomputations = 0
            hits = 0

    def last_result() -> Any:
        with lock:
            if last is _NOT_SET:
                raise SelectorError("selector has not been evaluated yet", selector_name=name)
            return last

    def cache_info() -> CacheInfo:
        with lock:
            return CacheInfo(hits, recomputations, 1, 0 if last is _NOT_SET else 1)

    def cache_clear() -> None:
        nonlocal last, recomputations, hits
        clear = getattr(memoized, "cache_clear", None)
        if clear is None:
            raise SelectorError(
                "the memoize function used by this selector does not support cache_clear",
                selector_name=name,
            )
        with lock:
            clear()
            last = _NOT_SET
            recomputations = 0
            hits = 0

    selector.__name__ = name
    selector.__qualname__ = name
    selector.result_func = result_fn  # type: ignore
    selector.memoized_result_func = memoized  # type: ignore
    selector.dependencies = dependencies  # type: ignore
    selector.recomputations = get_recomputations  # type: ignore
    selector.reset_recomputations = reset_recomputations  # type: ignore
    selector.last_result = last_result  # type: ignore
    selector.cache_info = cache_info  # type: ignore
    selector.cache_clear = cache_clear  # type: ignore

    logger.debug("created selector %s with %d input selector(s)", name, len(dependencies))
    return selector  # type: ignore


@overload
def create_selector(
    *selectors: StateSelector[Any],
    result_fn: ResultSelector[R],
    memoize: Optional[MemoizeFunction] = None,
    memoize_options: Optional[Dict[str, Any]] = None,
    dev_mode_checks: Optional[DevModeChecksLike] = None,
) -> MemoizedSelector[R]:
    ...


@overload
def create_selector(
    *selectors: Any,
    memoize: Optional[MemoizeFunction] = None,
    memoize_options: Optional[Dict[str, Any]] = None,
    dev_mode_checks: Optional[DevModeChecksLike] = None,
) -> MemoizedSelector[Any]:
    ...


@handle_error
def create_selector(
    *selectors: Any,
    result_fn: Optional[Callable[..., Any]] = None,
    memoize: Optional[MemoizeFunction] = None,
    memoize_options: Optional[Dict[str, Any]] = None,
    dev_mode_checks: Optional[DevModeChecksLike] = None,
) -> MemoizedSelector[Any]:
    """
    創建一個記憶化的複合選擇器。

    Args:
        *selectors: 輸入選擇器，接收 (state) 或 (state, props)；也可傳入一個列表
        result_fn: 結果函數，參數數量必須等於輸入選擇器數量；
            省略時以最後一個位置參數作為結果函數
        memoize: 記憶化結果函數的方式，預設為 default_memoize
        memoize_options: 傳給 memoize 的額外參數，例如 equality_check
        dev_mode_checks: 此選擇器的開發模式檢查設定，覆蓋全域設定

    Returns:
        記憶化的選擇器

    Raises:
        ConfigurationError: 輸入為空、不可呼叫，或結果函數參數數量不符

    範例:
        >>> get_count = create_selector(lambda s: s["count"], result_fn=lambda c: c * 2)
        >>> get_count({"count": 3})
        6
    """
    input_selectors, result_fn = _split_arguments(selectors, result_fn)
    return _build_selector(
        input_selectors, result_fn, memoize or default_memoize, memoize_options, dev_mode_checks
    )


@handle_error
def create_selector_creator(memoize: MemoizeFunction = default_memoize, **memoize_options: Any):
    """
    創建一個使用自訂記憶化方式的 create_selector。

    用法：
      create_deep_selector = create_selector_creator(default_memoize, equality_check=deep_equal)
    """
    if not callable(memoize):
        raise ConfigurationError(
            f"memoize must be callable, got {memoize!r}",
            component="create_selector_creator",
            config_key="memoize",
        )

    base_options = memoize_options

    @handle_error
    def custom_create_selector(
        *selectors: Any,
        result_fn: Optional[Callable[..., Any]] = None,
        memoize_options: Optional[Dict[str, Any]] = None,
        dev_mode_checks: Optional[DevModeChecksLike] = None,
    ) -> MemoizedSelector[Any]:
        input_selectors, result_fn = _split_arguments(selectors, result_fn)
        options = dict(base_options)
        options.update(memoize_options or {})
        return _build_selector(input_selectors, result_fn, memoize, options, dev_mode_checks)

    return custom_create_selector


@handle_error
def create_structured_selector(
    selectors: Mapping,
    selector_creator: Optional[Callable[..., MemoizedSelector[Any]]] = None,
) -> MemoizedSelector[Dict[str, Any]]:
    """
    以字典形式組合選擇器，結果為鍵相同、值為各選擇器輸出的字典。

    範例:
        >>> select_view = create_structured_selector({"count": get_count, "user": get_user})
        >>> select_view(state)  # {"count": ..., "user": ...}
    """
    if not isinstance(selectors, Mapping):
        raise ConfigurationError(
            f"create_structured_selector expects a mapping of selectors, got {type(selectors).__name__}",
            component="create_structured_selector",
            config_key="selectors",
        )
    if not selectors:
        raise ConfigurationError(
            "create_structured_selector requires at least one selector",
            component="create_structured_selector",
            config_key="selectors",
        )

    keys = tuple(selectors)

    def structured_selector(*values: Any) -> Dict[str, Any]:
        return dict(zip(keys, values))

    creator = selector_creator or create_selector
    return creator(*[selectors[key] for key in keys], result_fn=structured_selector)
