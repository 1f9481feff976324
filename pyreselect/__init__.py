"""
pyreselect：記憶化狀態選擇器。
"""

from .errors import (
    ReselectError, ConfigurationError, SelectorError,
    ErrorHandler, global_error_handler, handle_error,
)
from .equality import shallow_equal, args_equal, deep_equal
from .memoize import CacheEntry, default_memoize
from .selectors import create_selector, create_selector_creator, create_structured_selector
from .dev_checks import DevModeChecks, set_global_dev_mode_checks, get_global_dev_mode_checks
from .rx_operators import select, select_changes
from .immutable_utils import to_immutable, to_dict, to_pydantic
from .types import CacheInfo

__version__ = "0.1.0"

__all__ = [
    # Errors
    "ReselectError", "ConfigurationError", "SelectorError",
    "ErrorHandler", "global_error_handler", "handle_error",

    # Equality
    "shallow_equal", "args_equal", "deep_equal",

    # Memoize
    "CacheEntry", "default_memoize", "CacheInfo",

    # Selectors
    "create_selector", "create_selector_creator", "create_structured_selector",

    # Dev mode checks
    "DevModeChecks", "set_global_dev_mode_checks", "get_global_dev_mode_checks",

    # Rx operators
    "select", "select_changes",

    # Immutable Utils
    "to_immutable", "to_dict", "to_pydantic",
]
