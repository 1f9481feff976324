import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from reactivex import Subject

from pyreselect import select, select_changes
from todo_state import initial_state, set_filter, set_owner, toggle
from todo_selectors import get_header, get_todo_text, get_visible_count, get_visible_todos

if __name__ == "__main__":
    states = Subject()

    states.pipe(select_changes(get_visible_count)).subscribe(
        on_next=lambda t: print(f"visible count: {t[0]} -> {t[1]}")
    )
    states.pipe(select(get_header)).subscribe(
        on_next=lambda header: print(f"header: {header}")
    )
    states.pipe(select(get_todo_text, {"todo_id": 3})).subscribe(
        on_next=lambda text: print(f"todo #3: {text}")
    )

    print("\n==== initial ====")
    state = initial_state
    states.on_next(state)

    print("\n==== owner changed (visible todos cached) ====")
    state = set_owner(state, "grace")
    states.on_next(state)

    print("\n==== filter: active ====")
    state = set_filter(state, "active")
    states.on_next(state)

    print("\n==== toggle #1 ====")
    state = toggle(state, 1)
    states.on_next(state)

    print("\n==== stats ====")
    print(f"visible todos recomputations: {get_visible_todos.recomputations()}")
    print(f"visible todos cache: {get_visible_todos.cache_info()}")
