import pytest


class FakeMatch:
    def __init__(self, bus, handler, kwargs):
        self.bus = bus
        self.handler = handler
        self.kwargs = kwargs
        self.removed = False

    def remove(self):
        self.removed = True
        self.bus.matches.remove(self)


class FakeBus:
    """In-memory stand-in for a dbus-python connection."""

    def __init__(self):
        self.calls = []
        self.matches = []

    def call_async(self, bus_name, object_path, interface, method, signature, args,
                   reply_handler, error_handler, **_kwargs):
        self.calls.append({
            "bus_name": bus_name,
            "path": object_path,
            "interface": interface,
            "method": method,
            "args": args,
            "reply": reply_handler,
            "error": error_handler,
        })

    def add_signal_receiver(self, handler, **kwargs):
        match = FakeMatch(self, handler, kwargs)
        self.matches.append(match)
        return match

    def pending(self, method, path=None):
        return [c for c in self.calls
                if c["method"] == method and (path is None or c["path"] == path)]

    def reply_get_all(self, path, properties, followed_by=()):
        """Dispatch a GetAll answer.

        ``followed_by`` are changes systemd emits right after answering;
        they only reach matches that were registered by then and are
        dispatched after the answer, in order.
        """
        call = self.pending("GetAll", path)[-1]
        deliveries = [([m for m in self.matches if m.kwargs.get("path") == path], changed)
                      for changed in followed_by]
        call["reply"](properties)
        for matches, changed in deliveries:
            for match in matches:
                if not match.removed:
                    match.handler("org.freedesktop.systemd1.Unit", changed, [])

    def fail_get_all(self, path, exc=None):
        call = self.pending("GetAll", path)[-1]
        call["error"](exc or RuntimeError("org.freedesktop.DBus.Error.AccessDenied"))

    def emit_changed(self, path, changed, invalidated=(),
                     interface="org.freedesktop.systemd1.Unit"):
        for match in list(self.matches):
            if match.kwargs.get("path") == path:
                match.handler(interface, changed, list(invalidated))


class FakeScheduler:
    """Manual replacement for GLib.timeout_add/source_remove."""

    def __init__(self):
        self.sources = {}
        self.next_id = 1
        self.added = []

    def timeout_add(self, interval, callback):
        source_id = self.next_id
        self.next_id += 1
        self.sources[source_id] = callback
        self.added.append((source_id, interval))
        return source_id

    def source_remove(self, source_id):
        del self.sources[source_id]
        return True

    def tick(self, count=1):
        for _ in range(count):
            for source_id, callback in list(self.sources.items()):
                if source_id in self.sources and not callback():
                    del self.sources[source_id]


class RecordingIndicator:
    def __init__(self):
        self.visible = False
        self.events = []
        self.opacities = []

    def show(self):
        self.visible = True
        self.events.append("show")

    def hide(self):
        self.visible = False
        self.events.append("hide")

    def set_opacity(self, value, duration_ms):
        self.opacities.append((value, duration_ms))


@pytest.fixture
def bus():
    return FakeBus()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def indicator():
    return RecordingIndicator()
