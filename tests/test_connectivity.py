"""Tests for the connectivity monitor.

Tests:
- Handlers fire only on real transitions
- Probe polling with TTL cache and exception handling
- bind_sync triggers once per transition to online, and at startup
"""

from unittest.mock import MagicMock

from spendsync.storage import ConnectivityMonitor


class TestTransitions:
    def test_handlers_fire_on_transition(self):
        monitor = ConnectivityMonitor(initial=False)
        seen = []
        monitor.subscribe(seen.append)

        monitor.set_reachable(True)
        monitor.set_reachable(True)
        monitor.set_reachable(False)

        assert seen == [True, False]

    def test_first_determination_is_not_a_transition(self):
        monitor = ConnectivityMonitor()
        handler = MagicMock()
        monitor.subscribe(handler)

        assert monitor.set_reachable(True) is True
        handler.assert_not_called()
        assert monitor.online

    def test_no_probe_defaults_offline(self):
        assert ConnectivityMonitor().online is False

    def test_unsubscribe(self):
        monitor = ConnectivityMonitor(initial=False)
        handler = MagicMock()
        unsubscribe = monitor.subscribe(handler)
        unsubscribe()

        monitor.set_reachable(True)

        handler.assert_not_called()

    def test_failing_handler_isolated(self):
        monitor = ConnectivityMonitor(initial=False)
        good = MagicMock()
        monitor.subscribe(MagicMock(side_effect=RuntimeError("boom")))
        monitor.subscribe(good)

        monitor.set_reachable(True)

        good.assert_called_once_with(True)


class TestProbe:
    def test_lazy_probe_on_first_read(self):
        probe = MagicMock(return_value=True)
        monitor = ConnectivityMonitor(probe=probe)
        assert monitor.online
        probe.assert_called_once()

    def test_refresh_uses_cache(self):
        probe = MagicMock(return_value=True)
        monitor = ConnectivityMonitor(probe=probe, cache_ttl=60)

        monitor.refresh()
        monitor.refresh()

        assert probe.call_count == 1

    def test_force_refresh_bypasses_cache(self):
        probe = MagicMock(side_effect=[True, False])
        monitor = ConnectivityMonitor(probe=probe, cache_ttl=60)

        assert monitor.refresh() is True
        assert monitor.refresh(force=True) is False
        assert not monitor.online

    def test_probe_exception_is_unreachable(self):
        probe = MagicMock(side_effect=OSError("no network"))
        monitor = ConnectivityMonitor(probe=probe, initial=True)
        handler = MagicMock()
        monitor.subscribe(handler)

        assert monitor.refresh(force=True) is False
        handler.assert_called_once_with(False)


class TestBindSync:
    def test_triggers_once_per_online_transition(self):
        monitor = ConnectivityMonitor(initial=False)
        driver = MagicMock()
        monitor.bind_sync(driver)

        monitor.set_reachable(True)
        monitor.set_reachable(True)
        monitor.set_reachable(False)
        monitor.set_reachable(True)

        assert driver.trigger.call_count == 2

    def test_startup_trigger_when_already_online(self):
        monitor = ConnectivityMonitor(initial=True)
        driver = MagicMock()

        monitor.bind_sync(driver)

        driver.trigger.assert_called_once()

    def test_startup_probe_online_triggers_once(self):
        monitor = ConnectivityMonitor(probe=lambda: True)
        driver = MagicMock()

        monitor.bind_sync(driver)

        driver.trigger.assert_called_once()

    def test_unbind(self):
        monitor = ConnectivityMonitor(initial=False)
        driver = MagicMock()
        unbind = monitor.bind_sync(driver)
        unbind()

        monitor.set_reachable(True)

        driver.trigger.assert_not_called()
