import asyncio
from types import SimpleNamespace

from ddbot.event_hooks import ready_hook


def _client():
    return SimpleNamespace(user=SimpleNamespace(name="ddbot", id=1), guilds=[object(), object()])


def test_ready_starts_watcher_once(monkeypatch):
    started = []
    state = {"running": False}

    async def fake_start(client, interval):
        started.append((client, interval))
        state["running"] = True

    monkeypatch.setattr(ready_hook.watcher, "start", fake_start)
    monkeypatch.setattr(ready_hook.watcher, "is_running", lambda: state["running"])
    monkeypatch.setattr(ready_hook.reminders_cfg, "POLL_INTERVAL", 5.0)

    client = _client()

    async def run():
        await ready_hook.handle(client)
        await ready_hook.handle(client)

    asyncio.run(run())

    assert started == [(client, 5.0)]
