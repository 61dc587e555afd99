# chat/reveal.py

import logging
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RevealPacing:
    """
    Delays (seconds) used to imitate live typing.
    """
    word_interval: float = 0.03
    item_interval: float = 0.3


INSTANT = RevealPacing(word_interval=0.0, item_interval=0.0)


@dataclass(frozen=True)
class RevealStep:
    kind: str  # "slot" | "word" | "pause"
    index: int
    delay: float = 0.0
    word: str = ""
    emphasized: bool = False


def reveal_schedule(items, pacing: RevealPacing):
    """
    Pure description of a reveal: which step happens after which delay.

    Per item: open a slot, one step per word, then hold before the next item.
    Nothing follows the last item's final word.
    """
    for index, item in enumerate(items):
        if index > 0:
            yield RevealStep(kind="pause", index=index - 1, delay=pacing.item_interval)

        yield RevealStep(kind="slot", index=index)

        label_words = item.label_word_count
        for position, word in enumerate(item.words()):
            yield RevealStep(
                kind="word",
                index=index,
                delay=pacing.word_interval,
                word=word,
                emphasized=position < label_words,
            )


class RevealRenderer:
    """
    Plays a reveal schedule against a display surface.

    The surface needs clear(), open_slot(), append_word(slot, word, emphasized)
    and scroll_to_bottom().
    """

    def __init__(self, pacing: RevealPacing | None = None, sleep=time.sleep):
        self.pacing = pacing or RevealPacing()
        self._sleep = sleep

    def reveal(self, surface, items, is_current=None, pacing=None) -> bool:
        """
        Returns True once every word has been appended, False if a newer
        turn took over first.
        """
        surface.clear()
        slot = None

        for step in reveal_schedule(items, pacing or self.pacing):
            if step.delay > 0:
                self._sleep(step.delay)

            if is_current is not None and not is_current():
                logger.info("Reveal superseded at item %d", step.index)
                return False

            if step.kind == "slot":
                slot = surface.open_slot()
                surface.scroll_to_bottom()
            elif step.kind == "word":
                surface.append_word(slot, step.word + " ", step.emphasized)
                surface.scroll_to_bottom()

        return True
