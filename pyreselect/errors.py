"""
pyreselect 錯誤處理模組。

定義選擇器引擎的異常類型，以及集中式的錯誤處理器。
只有建構期的配置錯誤會經過錯誤處理器；輸入函數與結果函數
拋出的異常一律原封不動地傳遞給呼叫者。
"""

import functools
import logging
import traceback
import weakref
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

T = TypeVar("T")

logger = logging.getLogger("pyreselect.errors")


class ReselectError(Exception):
    """所有 pyreselect 異常的基礎類。"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.traceback = "".join(traceback.format_stack()[:-1])
        self.handled = False

    def to_dict(self) -> Dict[str, Any]:
        """將異常轉為可序列化的字典。"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "traceback": self.traceback,
        }

    def __str__(self) -> str:
        if not self.details:
            return self.message
        details = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        return f"{self.message} ({details})"


class ConfigurationError(ReselectError):
    """選擇器建構參數錯誤，例如結果函數的參數數量與輸入選擇器數量不符。"""

    def __init__(self, message: str, component: str, config_key: Optional[str] = None, **kwargs: Any):
        details = {"component": component}
        if config_key is not None:
            details["config_key"] = config_key
        details.update(kwargs)
        super().__init__(message, details)
        self.component = component
        self.config_key = config_key


class SelectorError(ReselectError):
    """與 Selector 使用方式相關的錯誤。"""

    def __init__(self, message: str, selector_name: Optional[str] = None, **kwargs: Any):
        details = {}
        if selector_name is not None:
            details["selector_name"] = selector_name
        details.update(kwargs)
        super().__init__(message, details)
        self.selector_name = selector_name


class ErrorHandler:
    """
    集中式錯誤處理器，用於記錄與回報錯誤。

    Args:
        log_to_console: 是否輸出到終端
        log_to_file: 是否寫入檔案
        log_file: 日誌檔案路徑，log_to_file 為 True 時必填
    """

    def __init__(self, log_to_console: bool = True, log_to_file: bool = False, log_file: Optional[str] = None):
        if log_to_file and not log_file:
            raise ConfigurationError(
                "log_file is required when log_to_file is enabled",
                component="ErrorHandler",
                config_key="log_file",
            )
        self.log_to_console = log_to_console
        self.log_to_file = log_to_file
        self.log_file = log_file
        self.handlers: List[Callable[[ReselectError], None]] = []
        self._log_handlers: List[logging.Handler] = []

        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        if log_to_console:
            console = logging.StreamHandler()
            console.setFormatter(formatter)
            self._log_handlers.append(console)
        if log_to_file:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            self._log_handlers.append(file_handler)

        # 未呼叫 close 就被回收時，仍會關閉檔案等資源
        self._finalizer = weakref.finalize(self, _close_handlers, self._log_handlers)

    def register_handler(self, handler: Callable[[ReselectError], None]) -> None:
        """註冊一個在每次錯誤發生時被呼叫的回調。"""
        self.handlers.append(handler)

    def handle(self, error: Union[ReselectError, Exception]) -> None:
        """
        記錄錯誤並依序通知已註冊的回調。

        非 ReselectError 的異常會先包裝為 ReselectError 再交給回調。
        同一個異常只會被處理一次。
        """
        if not isinstance(error, ReselectError):
            wrapped = ReselectError(str(error), {"original_type": error.__class__.__name__})
            wrapped.__cause__ = error
            error = wrapped
        if error.handled:
            return
        error.handled = True

        # 模組日誌器只記 DEBUG，由外部應用自行配置
        logger.debug("%s: %s", error.__class__.__name__, error)
        if self._log_handlers:
            # 本處理器的 handler 不掛在任何日誌器上，直接交給它們輸出
            record = logger.makeRecord(
                logger.name, logging.ERROR, __file__, 0,
                "%s: %s", (error.__class__.__name__, error), None,
            )
            for h in self._log_handlers:
                if record.levelno >= h.level:
                    h.handle(record)
        for handler in self.handlers:
            handler(error)

    def close(self) -> None:
        """關閉本處理器持有的日誌 handler。"""
        self._finalizer()


def _close_handlers(log_handlers: List[logging.Handler]) -> None:
    for h in log_handlers:
        h.close()
    log_handlers.clear()


# 單例錯誤處理器
global_error_handler = ErrorHandler()


def handle_error(func: Callable[..., T]) -> Callable[..., T]:
    """
    裝飾器：將函數拋出的 ReselectError 交給全域錯誤處理器後重新拋出。

    其他異常不做任何處理。
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return func(*args, **kwargs)
        except ReselectError as err:
            global_error_handler.handle(err)
            raise

    return wrapper
