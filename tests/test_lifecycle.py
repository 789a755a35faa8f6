from rowlink.lifecycle import OverlayLifecycle, SurfaceMode


class FakeSurfaceService:
    def __init__(self, fail_close: bool = False) -> None:
        self.calls: list = []
        self.live: set = set()
        self.fail_close = fail_close
        self._next = 0

    def open(self, mode: SurfaceMode) -> str:
        self._next += 1
        handle = f"s{self._next}"
        self.calls.append(("open", mode, handle))
        self.live.add(handle)
        return handle

    def close(self, handle: str) -> None:
        self.calls.append(("close", handle))
        if self.fail_close:
            raise RuntimeError("compositor went away")
        self.live.remove(handle)

    def refresh(self, handle: str) -> None:
        self.calls.append(("refresh", handle))


def test_ghost_surface_opened_on_construction() -> None:
    service = FakeSurfaceService()
    lifecycle = OverlayLifecycle(service)
    assert service.calls == [("open", SurfaceMode.GHOST, "s1")]
    assert lifecycle.handle == "s1"
    assert not lifecycle.interactive


def test_swap_opens_new_before_closing_old() -> None:
    service = FakeSurfaceService()
    lifecycle = OverlayLifecycle(service)

    lifecycle.show_interactive()
    lifecycle.show_ghost()

    assert service.calls[1:] == [
        ("open", SurfaceMode.INTERACTIVE, "s2"),
        ("close", "s1"),
        ("open", SurfaceMode.GHOST, "s3"),
        ("close", "s2"),
    ]
    assert service.live == {"s3"}
    assert lifecycle.handle == "s3"


def test_reactivation_replaces_interactive_surface() -> None:
    service = FakeSurfaceService()
    lifecycle = OverlayLifecycle(service)
    lifecycle.show_interactive()
    lifecycle.show_interactive()
    assert service.live == {"s3"}
    assert lifecycle.interactive


def test_invalidate_refreshes_live_surface() -> None:
    service = FakeSurfaceService()
    lifecycle = OverlayLifecycle(service)
    lifecycle.show_interactive()
    lifecycle.invalidate()
    assert service.calls[-1] == ("refresh", "s2")


def test_close_failure_keeps_new_handle(caplog) -> None:
    service = FakeSurfaceService(fail_close=True)
    lifecycle = OverlayLifecycle(service)
    lifecycle.show_interactive()
    assert lifecycle.handle == "s2"
    assert lifecycle.mode == SurfaceMode.INTERACTIVE
    assert "Closing surface s1 failed" in caplog.text


def test_open_failure_keeps_current_surface(caplog) -> None:
    service = FakeSurfaceService()
    lifecycle = OverlayLifecycle(service)
    lifecycle.show_interactive()

    def refuse(mode):
        raise RuntimeError("compositor refused surface")

    service.open = refuse
    lifecycle.show_ghost()

    assert lifecycle.handle == "s2"
    assert lifecycle.mode == SurfaceMode.INTERACTIVE
    assert service.live == {"s2"}
    assert "Opening ghost surface failed" in caplog.text
