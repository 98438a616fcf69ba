from flipforge.services.feedback import CopyFeedback, copy_with_feedback


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def test_feedback_expires():
    clock = FakeClock()
    fb = CopyFeedback(ttl_s=1.2, clock=clock)

    fb.mark("offer")
    assert fb.is_active("offer")
    assert fb.label("offer", "Copy Offer $118,500") == "Copied ✓"

    clock.now += 1.2
    assert not fb.is_active("offer")
    assert fb.label("offer", "Copy Offer $118,500") == "Copy Offer $118,500"


def test_keys_are_independent():
    clock = FakeClock()
    fb = CopyFeedback(ttl_s=1.0, clock=clock)
    fb.mark("summary")
    fb.mark("net", ttl_s=0.5)

    clock.now += 0.6
    assert fb.is_active("summary")
    assert not fb.is_active("net")


def test_copy_success_marks_key():
    copied = []
    fb = CopyFeedback(ttl_s=1.0, clock=FakeClock())
    assert copy_with_feedback(copied.append, "118500", fb, "offer") is True
    assert copied == ["118500"]
    assert fb.is_active("offer")


def test_clipboard_failure_degrades_to_not_copied():
    def broken(_text):
        raise OSError("no clipboard")

    fb = CopyFeedback(ttl_s=1.0, clock=FakeClock())
    fb.mark("offer")
    assert copy_with_feedback(broken, "118500", fb, "offer") is False
    assert not fb.is_active("offer")
