# chat/transcript.py
#
# Display surfaces a turn is rendered into.
# HtmlTranscript keeps everything in memory and renders HTML at the end.
# EventStreamTranscript forwards every change to the browser as it happens.

import json
import queue

from markupsafe import escape

PLACEHOLDER = "..."


def render_word(word: str) -> str:
    if word.startswith(("http://", "https://")):
        return f'<a href="{escape(word)}" target="_blank">{escape(word)}</a>'
    return str(escape(word))


def render_label(label_words) -> str:
    # the separator colon stays outside the highlight: "<span>Symptom</span>:"
    label = " ".join(label_words)
    colon = label.endswith(":")
    if colon:
        label = label[:-1]
    return f'<span class="highlight">{escape(label)}</span>' + (":" if colon else "")


class TranscriptEntry:
    """
    The model's reply area. Starts out as a "..." placeholder.
    """

    def __init__(self, transcript=None):
        self.slots = [[(PLACEHOLDER, False)]]
        self._transcript = transcript

    def clear(self):
        self.slots = []

    def open_slot(self):
        self.slots.append([])
        return len(self.slots) - 1

    def append_word(self, slot, word, emphasized=False):
        self.slots[slot].append((word, emphasized))

    def scroll_to_bottom(self):
        if self._transcript is not None:
            self._transcript.scroll_to_bottom()

    def slot_texts(self) -> list[str]:
        return ["".join(word for word, _ in slot).strip() for slot in self.slots]

    def to_html(self) -> str:
        items = []
        for slot in self.slots:
            # emphasized words always lead the slot
            label = [word.strip() for word, emphasized in slot if emphasized]
            parts = [render_label(label)] if label else []
            parts.extend(render_word(word.strip()) for word, emphasized in slot if not emphasized)
            items.append("<li>" + " ".join(parts).strip() + "</li>")
        return "<ul>" + "".join(items) + "</ul>"


class HtmlTranscript:
    def __init__(self):
        # ("user", text) | ("model", TranscriptEntry)
        self.messages = []
        self.scrolls = 0

    def append_user(self, text):
        self.messages.append(("user", text))

    def append_placeholder(self):
        entry = TranscriptEntry(self)
        self.messages.append(("model", entry))
        return entry

    def scroll_to_bottom(self):
        self.scrolls += 1

    def last_reply(self):
        for role, content in reversed(self.messages):
            if role == "model":
                return content
        return None


class StreamedEntry:
    def __init__(self, transcript, entry_id):
        self._transcript = transcript
        self.entry_id = entry_id
        self._slots = 0

    def clear(self):
        self._slots = 0
        self._transcript.emit("clear", entry=self.entry_id)

    def open_slot(self):
        slot = self._slots
        self._slots += 1
        self._transcript.emit("slot", entry=self.entry_id, slot=slot)
        return slot

    def append_word(self, slot, word, emphasized=False):
        self._transcript.emit(
            "word",
            entry=self.entry_id,
            slot=slot,
            word=word,
            emphasized=emphasized,
        )

    def scroll_to_bottom(self):
        self._transcript.scroll_to_bottom()


_CLOSED = object()


class EventStreamTranscript:
    """
    Queue-backed transcript: a worker thread writes, the HTTP response
    reads through stream() until close() is called.
    """

    def __init__(self):
        self._events = queue.Queue()
        self._entries = 0

    def emit(self, event_type, **payload):
        self._events.put({"type": event_type, **payload})

    def append_user(self, text):
        self.emit("user", text=text)

    def append_placeholder(self):
        entry = StreamedEntry(self, self._entries)
        self._entries += 1
        self.emit("placeholder", entry=entry.entry_id, text=PLACEHOLDER)
        return entry

    def scroll_to_bottom(self):
        self.emit("scroll")

    def close(self):
        self.emit("done")
        self._events.put(_CLOSED)

    def stream(self):
        while True:
            event = self._events.get()
            if event is _CLOSED:
                return
            yield f"data: {json.dumps(event)}\n\n"
