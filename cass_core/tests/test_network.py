from cass_core.providers.network import NetworkMonitor


def test_set_connected_updates_flag():
    monitor = NetworkMonitor(initially_connected=False)
    assert monitor.is_connected is False
    monitor.set_connected(True)
    assert monitor.is_connected is True


def test_probe_failure_marks_disconnected(monkeypatch):
    def refuse(*a, **kw):
        raise OSError("unreachable")

    monkeypatch.setattr("socket.create_connection", refuse)
    monitor = NetworkMonitor(interval=0.01)
    monitor.start()
    try:
        for _ in range(200):
            if not monitor.is_connected:
                break
            monitor._stop_event.wait(0.01)
    finally:
        monitor.stop()
    assert monitor.is_connected is False
