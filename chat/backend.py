# chat/backend.py

import logging

import httpx
from google import genai
from google.genai import errors as genai_errors

from chat.settings import DEFAULT_MODEL, read_api_key

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, I couldn't generate a response."


class BackendError(Exception):
    """
    The model could not be reached or answered with an unusable payload.
    """


def extract_candidate_text(response) -> str:
    """
    Pull candidates[0].content.parts[0].text out of a generate_content reply.
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        raise BackendError("response has no candidates")

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None)
    if not parts:
        raise BackendError("first candidate has no content parts")

    text = getattr(parts[0], "text", None)
    if text is None:
        raise BackendError("first content part has no text")
    return text


class GeminiBackend:
    def __init__(
        self,
        model=DEFAULT_MODEL,
        generation_config=None,
        *,
        api_key_fn=read_api_key,
        client_factory=genai.Client,
        fallback=FALLBACK_REPLY,
    ):
        self.model = model
        self.generation_config = generation_config or {
            "temperature": 0.7,
            "max_output_tokens": 400,
            "top_k": 40,
        }
        self.fallback = fallback
        self._api_key_fn = api_key_fn
        self._client_factory = client_factory

    def generate(self, prompt: str) -> str:
        try:
            client = self._client_factory(api_key=self._api_key_fn())
        except ValueError as exc:
            # genai.Client refuses to start without a key
            raise BackendError(f"client setup failed: {exc}") from exc

        try:
            response = client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=self.generation_config,
            )
        except genai_errors.APIError as exc:
            raise BackendError(f"backend returned status {exc.code}") from exc
        except httpx.HTTPError as exc:
            raise BackendError(f"network failure: {exc}") from exc

        text = extract_candidate_text(response)
        logger.debug("Gemini reply: %s", text)
        return text

    def complete(self, prompt: str) -> str:
        """
        Same as generate(), but every failure collapses to the fallback line.
        """
        try:
            return self.generate(prompt)
        except BackendError as exc:
            logger.warning("Gemini call failed: %s", exc)
            return self.fallback
