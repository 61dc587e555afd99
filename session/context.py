import threading


class SessionState:
    """
    Conversation-scoped state.
    Must persist across turns.
    """

    def __init__(self, last_topic=""):
        # Topic a "more info" follow-up refers back to
        self.last_topic = last_topic

        # Incremented by every new turn; older reveals stop when it moves on
        self.active_turn = 0

        self._lock = threading.Lock()

    def begin_turn(self) -> int:
        with self._lock:
            self.active_turn += 1
            return self.active_turn

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self.active_turn

    def set_last_topic(self, topic: str):
        with self._lock:
            self.last_topic = topic
