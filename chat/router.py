# chat/router.py

import logging
import re
from urllib.parse import quote

from chat.prompts.prompt_loader import load_search_results_template
from chat.settings import DEFAULT_SEARCH_URL

logger = logging.getLogger(__name__)

DOCTOR_KEYWORDS = ("doctor", "specialist", "hospital", "clinic", "treatment")

# cardiologist, psychiatrist, pediatrician, ...
SPECIALIST_PATTERN = r"[a-z]+(?:ologist|iatrist|iatrician)s?\b|surgeon|dentist"


def encode_query(text: str) -> str:
    # same character set as JavaScript's encodeURIComponent
    return quote(text, safe="!~*'()")


class SearchLinkResponder:
    """
    Answers with a single line holding a search-engine link.
    No request is made; the user opens the link.
    """

    def __init__(self, search_url=DEFAULT_SEARCH_URL):
        self.search_url = search_url

    def search_link(self, user_text: str) -> str:
        return self.search_url + encode_query(user_text)

    def respond(self, user_text: str) -> str:
        template = load_search_results_template()
        return template.format(url=self.search_link(user_text))


class BackendResponder:
    def __init__(self, backend):
        self.backend = backend

    def respond(self, prompt: str) -> str:
        return self.backend.complete(prompt)


class QueryRouter:
    def __init__(
        self,
        backend_responder,
        search_responder=None,
        keywords=DOCTOR_KEYWORDS,
        specialist_pattern=SPECIALIST_PATTERN,
    ):
        self.backend_responder = backend_responder
        self.search_responder = search_responder or SearchLinkResponder()

        alternatives = [re.escape(k) for k in keywords]
        if specialist_pattern:
            alternatives.append(specialist_pattern)
        self._pattern = re.compile("|".join(alternatives), re.IGNORECASE)

    def is_search_query(self, user_text: str) -> bool:
        return bool(self._pattern.search(user_text))

    def route(self, user_text: str):
        if self.is_search_query(user_text):
            logger.info("Routing to search link")
            return self.search_responder
        return self.backend_responder
