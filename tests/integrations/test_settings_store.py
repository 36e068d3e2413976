# tests/integrations/test_settings_store.py

from integrations.settings_store import DEFAULT_SETTINGS, InMemorySettingsStore


def test_subscribe_delivers_current_values_immediately():
    store = InMemorySettingsStore({"showWeather": True})
    received = []

    store.subscribe(received.append)

    assert received == [{**DEFAULT_SETTINGS, "showWeather": True}]


def test_set_notifies_subscribers_last_write_wins():
    store = InMemorySettingsStore()
    received = []
    store.subscribe(received.append)

    store.set("autoRefresh", True)
    store.set("autoRefresh", False)

    assert [snapshot["autoRefresh"] for snapshot in received] == [False, True, False]
    assert store.get("autoRefresh") is False


def test_unsubscribe_stops_updates():
    store = InMemorySettingsStore()
    received = []
    unsubscribe = store.subscribe(received.append)

    unsubscribe()
    store.set("notificationsEnabled", True)

    assert len(received) == 1
    assert store.snapshot()["notificationsEnabled"] is True
