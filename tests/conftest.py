"""
pyreselect 測試共用的 fixtures。
"""

import functools

import pytest

from pyreselect import DevModeChecks, global_error_handler, set_global_dev_mode_checks


@pytest.fixture(autouse=True)
def reset_dev_mode_checks():
    """每個測試都從關閉所有開發模式檢查開始。"""
    set_global_dev_mode_checks(DevModeChecks())
    yield
    set_global_dev_mode_checks(DevModeChecks())


@pytest.fixture
def counted():
    """
    回傳一個包裝函數，記錄被包裝函數的呼叫次數於 .calls。

    透過 functools.wraps 保留原函數簽名，選擇器的參數數量檢查仍然有效。
    """
    def make(fn):
        @functools.wraps(fn)
        def wrapper(*args):
            wrapper.calls += 1
            return fn(*args)

        wrapper.calls = 0
        return wrapper

    return make


@pytest.fixture
def reported_errors():
    """收集經由全域錯誤處理器回報的錯誤。"""
    errors = []
    global_error_handler.register_handler(errors.append)
    yield errors
    global_error_handler.handlers.remove(errors.append)


@pytest.fixture
def todo_state():
    todos = (
        {"id": 1, "text": "write selectors", "done": True},
        {"id": 2, "text": "keep inputs pure", "done": False},
        {"id": 3, "text": "avoid returning functions", "done": False},
    )
    return {"todos": todos, "filter": "active", "user": {"name": "ada"}}
