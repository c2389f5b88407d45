import threading

from washer.abort_signal import AbortSignal


def test_starts_clear():
    assert not AbortSignal().is_raised()


def test_raise_is_idempotent():
    signal = AbortSignal()
    signal.raise_()
    signal.raise_()
    assert signal.is_raised()

    signal.consume_and_reset()
    assert not signal.is_raised()


def test_raise_from_another_thread_is_visible():
    signal = AbortSignal()
    t = threading.Thread(target=signal.raise_)
    t.start()
    t.join()
    assert signal.is_raised()
