import threading

from payslip_ledger.storage.locks import KeyLockRegistry


class TestKeyLockRegistry:
    def test_same_key_returns_same_lock(self) -> None:
        registry = KeyLockRegistry()
        assert registry.lock_for("payslips") is registry.lock_for("payslips")

    def test_different_keys_get_different_locks(self) -> None:
        registry = KeyLockRegistry()
        assert registry.lock_for("payslips") is not registry.lock_for("user_profile")

    def test_hold_is_reentrant(self) -> None:
        registry = KeyLockRegistry()
        with registry.hold("payslips"):
            with registry.hold("payslips", "user_profile"):
                pass

    def test_hold_blocks_other_threads_on_same_key(self) -> None:
        registry = KeyLockRegistry()
        acquired = threading.Event()

        def worker() -> None:
            with registry.hold("payslips"):
                acquired.set()

        with registry.hold("payslips"):
            thread = threading.Thread(target=worker)
            thread.start()
            assert not acquired.wait(0.1)
        thread.join(timeout=2)
        assert acquired.is_set()
