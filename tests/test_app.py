from __future__ import annotations

import json

import pytest

import app as chat_app
from chat.reveal import INSTANT

from conftest import FakeBackend


@pytest.fixture
def fake_backend(monkeypatch: pytest.MonkeyPatch) -> FakeBackend:
    backend = FakeBackend()
    monkeypatch.setattr(chat_app, "backend", backend)
    monkeypatch.setattr(chat_app.settings, "pacing", INSTANT)
    return backend


@pytest.fixture
def client(fake_backend: FakeBackend):
    chat_app.app.config["TESTING"] = True
    with chat_app.app.test_client() as client:
        yield client


def parse_events(body: str) -> list[dict]:
    return [
        json.loads(frame[len("data: "):])
        for frame in body.split("\n\n")
        if frame.startswith("data: ")
    ]


def test_index_renders_widget(client) -> None:
    response = client.get("/")
    html = response.get_data(as_text=True)

    assert response.status_code == 200
    for selector in ('id="user-input"', 'id="send-btn"', 'class="chat"', 'class="close"', 'class="voice-search"'):
        assert selector in html


def test_chat_returns_rendered_reply(client, fake_backend) -> None:
    response = client.post("/api/chat", json={"message": "why do I cough"})

    data = response.get_json()
    assert data["items"] == ["Symptom: persistent cough", "Drink water"]
    assert data["reply"].startswith("<ul><li><span class=\"highlight\">Symptom</span>: persistent")
    assert fake_backend.prompts == ["why do I cough"]


def test_chat_ignores_empty_message(client, fake_backend) -> None:
    response = client.post("/api/chat", json={"message": "   "})

    assert response.get_json() == {"reply": "", "items": []}
    assert fake_backend.prompts == []


def test_chat_tolerates_bad_body(client, fake_backend) -> None:
    response = client.post("/api/chat", data="not json", content_type="text/plain")

    assert response.get_json() == {"reply": "", "items": []}


def test_follow_up_is_tracked_per_browser_session(client, fake_backend) -> None:
    client.post("/api/chat", json={"message": "diabetes"})
    client.post("/api/chat", json={"message": "more info"})

    assert fake_backend.prompts == ["diabetes", "Give me more details about diabetes"]


def test_stream_emits_reveal_events_in_order(client) -> None:
    response = client.post("/api/chat/stream", json={"message": "why do I cough"})

    assert response.mimetype == "text/event-stream"
    events = parse_events(response.get_data(as_text=True))
    kinds = [event["type"] for event in events]

    assert kinds[:4] == ["user", "scroll", "placeholder", "scroll"]
    assert kinds[-1] == "done"
    assert events[0]["text"] == "why do I cough"

    words = [(e["slot"], e["word"], e["emphasized"]) for e in events if e["type"] == "word"]
    assert words == [
        (0, "Symptom: ", True),
        (0, "persistent ", False),
        (0, "cough ", False),
        (1, "Drink ", False),
        (1, "water ", False),
    ]
    assert kinds.index("clear") < kinds.index("slot")


def test_stream_search_query_links_out(client, fake_backend) -> None:
    response = client.post("/api/chat/stream", json={"message": "nearest clinic"})

    events = parse_events(response.get_data(as_text=True))
    words = [e["word"].strip() for e in events if e["type"] == "word"]

    assert words[-1] == "https://www.google.com/search?q=nearest%20clinic"
    assert fake_backend.prompts == []


def test_stream_ignores_empty_message(client, fake_backend) -> None:
    response = client.post("/api/chat/stream", json={"message": ""})

    assert response.status_code == 204
    assert fake_backend.prompts == []


def test_stream_closes_when_turn_crashes(client, monkeypatch: pytest.MonkeyPatch) -> None:
    class ExplodingBackend:
        def complete(self, prompt):
            raise RuntimeError("boom")

    monkeypatch.setattr(chat_app, "backend", ExplodingBackend())

    response = client.post("/api/chat/stream", json={"message": "why do I cough"})
    events = parse_events(response.get_data(as_text=True))

    assert events[-1] == {"type": "done"}


def test_widget_script_draws_user_and_bot_icons(client) -> None:
    response = client.get("/static/chat.js")
    script = response.get_data(as_text=True)

    assert response.status_code == 200
    assert 'icon("user-icon")' in script
    assert 'icon("bot-icon")' in script
