from pyreselect import create_selector, create_structured_selector

# 輸入函數：只回傳狀態中既有的參照
get_todos = lambda state: state["todos"]
get_filter = lambda state: state["filter"]
get_owner = lambda state: state["owner"]
# props 由呼叫端提供，例如某個元件的 todo id
get_todo_id = lambda state, props: props["todo_id"]


def _visible(todos, flt):
    print("  (recomputing visible todos)")
    if flt == "active":
        return tuple(t for t in todos if not t["completed"])
    if flt == "completed":
        return tuple(t for t in todos if t["completed"])
    return todos


get_visible_todos = create_selector(get_todos, get_filter, result_fn=_visible)

get_visible_count = create_selector(get_visible_todos, result_fn=len)

get_todo_text = create_selector(
    get_todos,
    get_todo_id,
    result_fn=lambda todos, todo_id: next((t["text"] for t in todos if t["id"] == todo_id), None),
)

get_header = create_structured_selector({
    "owner": get_owner,
    "visible": get_visible_count,
})
