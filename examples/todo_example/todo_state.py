from typing import List, Optional

from pydantic import BaseModel

from pyreselect import to_immutable


class TodoItem(BaseModel):
    id: int
    text: str
    completed: bool = False


class TodoState(BaseModel):
    todos: List[TodoItem]
    filter: str = "all"
    owner: Optional[str] = None


# 以 Map 保存狀態，更新時未變動的分支維持同一個參照
initial_state = to_immutable(TodoState(
    todos=[
        TodoItem(id=1, text="Write input selectors"),
        TodoItem(id=2, text="Keep them pure", completed=True),
        TodoItem(id=3, text="Never return functions from a result function"),
    ],
    owner="ada",
))


def toggle(state, todo_id):
    todos = tuple(
        todo.set("completed", not todo["completed"]) if todo["id"] == todo_id else todo
        for todo in state["todos"]
    )
    return state.set("todos", todos)


def set_filter(state, value):
    return state.set("filter", value)


def set_owner(state, owner):
    return state.set("owner", owner)
