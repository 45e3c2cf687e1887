"""Tests for symbol interning."""

import pickle
import threading

import pytest

from sexpstream.symbols import SymbolName, intern, lookup, table_size


class TestInterning:
    """One handle per distinct text."""

    def test_same_text_same_handle(self) -> None:
        assert intern("alpha") is intern("alpha")

    def test_different_text_different_handle(self) -> None:
        assert intern("alpha") is not intern("beta")

    def test_handle_keeps_text(self) -> None:
        handle = intern("gamma")
        assert handle.text == "gamma"
        assert str(handle) == "gamma"
        assert repr(handle) == "SymbolName('gamma')"

    def test_lookup(self) -> None:
        assert lookup("never-interned-\x00-name") is None
        handle = intern("delta")
        assert lookup("delta") is handle

    def test_table_grows_once_per_name(self) -> None:
        intern("epsilon")
        size = table_size()
        intern("epsilon")
        assert table_size() == size

    def test_direct_construction_refused(self) -> None:
        with pytest.raises(TypeError):
            SymbolName("x")

    def test_immutable(self) -> None:
        with pytest.raises(AttributeError):
            intern("zeta").text = "eta"  # type: ignore[misc]

    def test_pickle_preserves_identity(self) -> None:
        handle = intern("theta")
        assert pickle.loads(pickle.dumps(handle)) is handle


class TestThreadSafety:
    """Concurrent interning agrees on handles."""

    def test_concurrent_intern(self) -> None:
        names = [f"concurrent-{i}" for i in range(200)]
        barrier = threading.Barrier(8)
        results: list[list[SymbolName]] = []
        lock = threading.Lock()

        def worker() -> None:
            barrier.wait()
            handles = [intern(name) for name in names]
            with lock:
                results.append(handles)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 8
        for handles in results[1:]:
            assert all(a is b for a, b in zip(handles, results[0], strict=True))
