"""
CacheEntry 與 default_memoize。
"""

import pytest

from pyreselect import CacheEntry, SelectorError, deep_equal, default_memoize


class TestCacheEntry:

    def test_starts_empty(self):
        entry = CacheEntry()

        assert entry.is_empty
        assert entry.last_inputs is None
        assert not entry.matches(())
        with pytest.raises(LookupError):
            entry.last_result

    def test_store_replaces_previous_pair(self):
        entry = CacheEntry()
        first, second = object(), object()

        entry.store([first], "a")
        entry.store([second], "b")

        assert entry.last_inputs == (second,)
        assert entry.last_result == "b"
        assert entry.matches((second,))
        assert not entry.matches((first,))

    def test_clear(self):
        entry = CacheEntry()
        entry.store((1,), 1)
        entry.clear()

        assert entry.is_empty
        assert repr(entry) == "CacheEntry(empty)"


class TestDefaultMemoize:

    def test_single_slot(self, counted):
        add = counted(lambda a, b: a + b)
        memoized = default_memoize(add)

        assert memoized(1, 2) == 3
        assert memoized(1, 2) == 3
        assert memoized(2, 2) == 4
        assert memoized(1, 2) == 3

        assert add.calls == 3
        assert memoized.cache_info() == (1, 3, 1, 1)

    def test_argument_count_is_part_of_the_key(self, counted):
        total = counted(lambda *xs: sum(xs))
        memoized = default_memoize(total)

        memoized(1, 2)
        memoized(1, 2, 0)

        assert total.calls == 2

    def test_failure_leaves_entry_untouched(self):
        def invert(x):
            return 1 / x

        memoized = default_memoize(invert)
        memoized(2)

        with pytest.raises(ZeroDivisionError):
            memoized(0)

        assert memoized.last_result() == 0.5
        assert memoized.cache_entry.last_inputs == (2,)

    def test_custom_equality_check(self, counted):
        total = counted(lambda items: sum(items))
        memoized = default_memoize(total, equality_check=deep_equal)

        memoized([1, 2, 3])
        memoized([1, 2, 3])

        assert total.calls == 1

    def test_cache_clear_and_last_result(self):
        memoized = default_memoize(lambda x: x * 10)

        with pytest.raises(SelectorError):
            memoized.last_result()

        memoized(1)
        memoized.cache_clear()

        assert memoized.cache_info() == (0, 0, 1, 0)
        with pytest.raises(SelectorError):
            memoized.last_result()

    def test_wraps_function(self):
        def compute(x):
            """compute docs"""
            return x

        memoized = default_memoize(compute)

        assert memoized.__name__ == "compute"
        assert memoized.__wrapped__ is compute
