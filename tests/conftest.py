from __future__ import annotations

from types import SimpleNamespace

import pytest

from chat.conversation import ConversationSession
from chat.reveal import INSTANT, RevealRenderer
from chat.router import BackendResponder, QueryRouter
from session.context import SessionState


class FakeBackend:
    def __init__(self, reply: str = "Symptom: persistent cough\nDrink water"):
        self.reply = reply
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


def gemini_response(text):
    part = SimpleNamespace(text=text)
    candidate = SimpleNamespace(content=SimpleNamespace(parts=[part]))
    return SimpleNamespace(candidates=[candidate])


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def conversation(fake_backend: FakeBackend) -> ConversationSession:
    router = QueryRouter(backend_responder=BackendResponder(fake_backend))
    return ConversationSession(
        router=router,
        state=SessionState(),
        renderer=RevealRenderer(INSTANT),
    )
