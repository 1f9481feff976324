"""
不可變狀態輔助函數，以及結構共享對選擇器快取的影響。
"""

from typing import List

from immutables import Map
from pydantic import BaseModel

from pyreselect import create_selector, to_dict, to_immutable, to_pydantic


class Todo(BaseModel):
    id: int
    text: str


class TodoList(BaseModel):
    todos: List[Todo]
    owner: str


class TestToImmutable:

    def test_converts_nested_structures(self):
        state = to_immutable({"todos": [{"id": 1, "tags": {"a"}}], "owner": "ada"})

        assert isinstance(state, Map)
        assert isinstance(state["todos"], tuple)
        assert isinstance(state["todos"][0], Map)
        assert state["todos"][0]["tags"] == frozenset({"a"})

    def test_existing_map_is_returned_as_is(self):
        state = Map({"a": 1})
        assert to_immutable(state) is state

    def test_pydantic_model(self):
        model = TodoList(todos=[Todo(id=1, text="a")], owner="ada")

        state = to_immutable(model)

        assert state["owner"] == "ada"
        assert state["todos"][0]["text"] == "a"

    def test_back_to_plain_and_pydantic(self):
        model = TodoList(todos=[Todo(id=1, text="a")], owner="ada")
        state = to_immutable(model)

        assert to_dict(state) == {"todos": [{"id": 1, "text": "a"}], "owner": "ada"}
        assert to_pydantic(state, TodoList) == model


class TestStructuralSharing:

    def test_untouched_branch_keeps_selector_cached(self, counted):
        state = to_immutable({"todos": [{"id": 1, "done": False}], "owner": "ada"})
        pending = counted(lambda todos: tuple(t for t in todos if not t["done"]))
        select_pending = create_selector(lambda s: s["todos"], result_fn=pending)

        first = select_pending(state)
        renamed = state.set("owner", "grace")
        second = select_pending(renamed)

        assert first is second
        assert pending.calls == 1

        select_pending(state.set("todos", state["todos"] + (Map({"id": 2, "done": False}),)))
        assert pending.calls == 2
