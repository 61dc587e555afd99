# chat/conversation.py

import logging
from dataclasses import dataclass

from chat.formatter import MAX_ITEMS, format_response
from chat.prompts.prompt_loader import load_follow_up_template
from chat.reveal import INSTANT, RevealRenderer
from chat.router import BackendResponder
from session.context import SessionState

logger = logging.getLogger(__name__)

FOLLOW_UP_MARKER = "more info"


@dataclass
class Turn:
    user_text: str
    rendered: bool = False


def rewrite_follow_up(user_text: str, last_topic: str) -> tuple[str, str]:
    """
    Returns (prompt, new_last_topic).

    "more info" with a known topic asks about that topic again;
    anything else becomes the new topic.
    """
    if FOLLOW_UP_MARKER in user_text.lower() and last_topic:
        prompt = load_follow_up_template().format(topic=last_topic)
        return prompt, last_topic
    return user_text, user_text


class ConversationSession:
    def __init__(self, router, state=None, renderer=None, max_items=MAX_ITEMS):
        self.router = router
        self.state = state or SessionState()
        self.renderer = renderer or RevealRenderer()
        self.max_items = max_items

    def respond(self, user_text: str) -> str:
        responder = self.router.route(user_text)

        if isinstance(responder, BackendResponder):
            prompt, topic = rewrite_follow_up(user_text, self.state.last_topic)
            self.state.set_last_topic(topic)
            return responder.respond(prompt)

        return responder.respond(user_text)

    def run_turn(self, user_text, transcript, instant=False):
        """
        One submission end to end. Blank input is ignored and returns None.
        """
        text = (user_text or "").strip()
        if not text:
            return None

        turn = Turn(user_text=text)
        token = self.state.begin_turn()

        transcript.append_user(text)
        transcript.scroll_to_bottom()

        entry = transcript.append_placeholder()
        transcript.scroll_to_bottom()

        raw = self.respond(text)
        items = format_response(raw, self.max_items)

        turn.rendered = self.renderer.reveal(
            entry,
            items,
            is_current=lambda: self.state.is_current(token),
            pacing=INSTANT if instant else None,
        )
        transcript.scroll_to_bottom()

        return turn
