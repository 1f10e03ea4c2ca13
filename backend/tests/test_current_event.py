import json
import uuid

import pytest

from conftest import make_event
from demonight.errors import NoCurrentEvent
from demonight.schemas.event import display_name


@pytest.mark.asyncio
async def test_nothing_live_by_default(client):
    r = await client.get("/events/current")
    assert r.status_code == 200
    assert r.json() is None


@pytest.mark.asyncio
async def test_set_and_advance_current_event(client, seeded, admin_headers, redis):
    s = seeded
    r = await client.put("/events/current", headers=admin_headers, json={"eventId": s.event_id})
    assert r.status_code == 200, r.text
    assert r.json() == {
        "id": s.event_id,
        "name": "SF Demo Night",
        "phase": "pre",
        "currentDemoId": None,
        "currentAwardId": None,
        "isPitchNight": True,
        "phaseName": "Pre-Pitches",
    }
    # stored in the same camelCase shape the clients read
    assert json.loads(redis.data["currentEvent"])["isPitchNight"] is True

    demo = str(s.demo_ids[1])
    r = await client.patch("/events/current/state", headers=admin_headers, json={"phase": "demos", "currentDemoId": demo})
    assert r.status_code == 200
    assert r.json()["phase"] == "demos"
    assert r.json()["phaseName"] == "Pitches"
    assert r.json()["currentDemoId"] == demo

    award = str(s.award_id)
    r = await client.patch("/events/current/state", headers=admin_headers, json={"currentAwardId": award})
    body = r.json()
    assert (body["phase"], body["currentDemoId"], body["currentAwardId"]) == ("demos", demo, award)

    r = await client.patch("/events/current/state", headers=admin_headers, json={"phase": "voting", "currentDemoId": None})
    body = r.json()
    assert (body["phase"], body["currentDemoId"], body["currentAwardId"]) == ("voting", None, award)

    r = await client.get("/events/current")
    assert r.json() == body


@pytest.mark.asyncio
async def test_reselecting_live_event_keeps_its_state(client, seeded, admin_headers):
    s = seeded
    await client.put("/events/current", headers=admin_headers, json={"eventId": s.event_id})
    await client.patch("/events/current/state", headers=admin_headers, json={"phase": "results"})

    r = await client.put("/events/current", headers=admin_headers, json={"eventId": s.event_id})
    assert r.json()["phase"] == "results"


@pytest.mark.asyncio
async def test_switching_events_resets_phase(client, session, seeded, admin_headers):
    await client.put("/events/current", headers=admin_headers, json={"eventId": seeded.event_id})
    await client.patch("/events/current/state", headers=admin_headers, json={"phase": "recap"})

    other = await make_event(session, pitch_night=False)
    r = await client.put("/events/current", headers=admin_headers, json={"eventId": other.event_id})
    assert r.json()["id"] == other.event_id
    assert r.json()["phase"] == "pre"
    assert r.json()["isPitchNight"] is False


@pytest.mark.asyncio
async def test_clear_current_event(client, seeded, admin_headers):
    await client.put("/events/current", headers=admin_headers, json={"eventId": seeded.event_id})
    r = await client.put("/events/current", headers=admin_headers, json={"eventId": None})
    assert r.status_code == 200
    assert r.json() is None
    assert (await client.get("/events/current")).json() is None


@pytest.mark.asyncio
async def test_current_event_errors(client, admin_headers, user_headers):
    r = await client.put("/events/current", headers=admin_headers, json={"eventId": "nope"})
    assert r.status_code == 404
    assert r.json()["detail"]["code"] == "event_not_found"

    r = await client.patch("/events/current/state", headers=admin_headers, json={"phase": "voting"})
    assert r.status_code == 404
    assert r.json()["detail"]["code"] == "no_current_event"

    r = await client.patch("/events/current/state", headers=admin_headers, json={"phase": "intermission"})
    assert r.status_code == 422

    assert (await client.put("/events/current", json={"eventId": "nope"})).status_code == 401
    assert (await client.patch("/events/current/state", headers=user_headers, json={"phase": "demos"})).status_code == 403


@pytest.mark.asyncio
async def test_store_reads_payloads_without_pitch_flag(store, redis):
    redis.data[store.key] = json.dumps({"id": "sf-demo", "name": "SF", "phase": "voting"})
    ev = await store.get()
    assert ev.is_pitch_night is False
    assert ev.phase == "voting"

    demo = uuid.uuid4()
    ev = await store.update_state({"current_demo_id": demo})
    assert ev.phase == "voting"
    assert ev.current_demo_id == demo


@pytest.mark.asyncio
async def test_store_update_without_event(store):
    with pytest.raises(NoCurrentEvent):
        await store.update_state({"phase": "demos"})


@pytest.mark.parametrize("phase,demo_night,pitch_night", [
    ("pre", "Pre-Demos", "Pre-Pitches"),
    ("demos", "Demos", "Pitches"),
    ("voting", "Voting", "Investing"),
    ("results", "Results", "Results"),
    ("recap", "Recap", "Recap"),
])
def test_phase_display_names(phase, demo_night, pitch_night):
    assert display_name(phase) == demo_night
    assert display_name(phase, is_pitch_night=True) == pitch_night
