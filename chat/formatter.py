# chat/formatter.py

from dataclasses import dataclass

MAX_ITEMS = 10


@dataclass(frozen=True)
class ResponseItem:
    """
    One displayable line of a reply.

    A line like "Symptom: persistent cough" becomes
    label="Symptom", body="persistent cough".
    """
    body: str
    label: str | None = None

    @property
    def text(self) -> str:
        if self.label is None:
            return self.body
        return f"{self.label}: {self.body}"

    @property
    def label_word_count(self) -> int:
        if self.label is None:
            return 0
        return len(self.label.split(" "))

    def words(self) -> list[str]:
        return self.text.split(" ")


def _parse_line(line: str) -> ResponseItem:
    if ":" not in line:
        return ResponseItem(body=line.strip())

    head, *rest = line.split(":")
    return ResponseItem(label=head.strip(), body=":".join(rest).strip())


def format_response(raw_text, max_items: int = MAX_ITEMS) -> list[ResponseItem]:
    """
    Turn free model text into at most `max_items` items.

    - blank lines are dropped
    - extra lines past the cap are discarded
    - text before the first colon is the label, everything after is the body
    """
    if not raw_text:
        return []

    lines = [line for line in raw_text.split("\n") if line.strip()]
    return [_parse_line(line) for line in lines[:max(0, max_items)]]
