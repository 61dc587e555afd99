from flask import Flask, Response, render_template, request, jsonify, session, stream_with_context
from dotenv import load_dotenv
import logging
import os
import threading
import uuid
from pathlib import Path

from chat.backend import GeminiBackend
from chat.conversation import ConversationSession
from chat.reveal import RevealRenderer
from chat.router import BackendResponder, QueryRouter, SearchLinkResponder
from chat.settings import load_settings
from chat.transcript import EventStreamTranscript, HtmlTranscript
from session.context import SessionState


# -------------------------------------------------
# Setup
# -------------------------------------------------

load_dotenv()
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

settings = load_settings()

backend = GeminiBackend(
    model=settings.model,
    generation_config=settings.generation_config,
)

ROOT_DIR = Path(__file__).resolve().parent

app = Flask(
    __name__,
    template_folder=str(ROOT_DIR / "templates"),
    static_folder=str(ROOT_DIR / "static"),
)
app.secret_key = os.getenv("FLASK_SECRET_KEY", "dev-secret")

SESSION_CONTEXTS = {}


# -------------------------------------------------
# Helpers: session + conversation
# -------------------------------------------------

def get_session_state():
    if "session_id" not in session:
        session["session_id"] = str(uuid.uuid4())

    sid = session["session_id"]
    if sid not in SESSION_CONTEXTS:
        SESSION_CONTEXTS[sid] = SessionState()
    return SESSION_CONTEXTS[sid]


def build_conversation(state):
    router = QueryRouter(
        backend_responder=BackendResponder(backend),
        search_responder=SearchLinkResponder(settings.search_url),
    )
    return ConversationSession(
        router=router,
        state=state,
        renderer=RevealRenderer(settings.pacing),
        max_items=settings.max_items,
    )


def get_message() -> str:
    return ((request.get_json(silent=True) or {}).get("message") or "").strip()


def run_streamed_turn(conversation, message, transcript):
    try:
        conversation.run_turn(message, transcript)
    except Exception:
        logger.exception("Chat turn failed")
    finally:
        transcript.close()


# -------------------------------------------------
# Routes
# -------------------------------------------------

@app.route("/")
def index():
    return render_template("index.html")


@app.route("/api/chat", methods=["POST"])
def chat():
    user_message = get_message()
    if not user_message:
        return jsonify({"reply": "", "items": []})

    conversation = build_conversation(get_session_state())
    transcript = HtmlTranscript()
    conversation.run_turn(user_message, transcript, instant=True)

    entry = transcript.last_reply()
    return jsonify({
        "reply": entry.to_html(),
        "items": entry.slot_texts(),
    })


@app.route("/api/chat/stream", methods=["POST"])
def chat_stream():
    user_message = get_message()
    if not user_message:
        return "", 204

    conversation = build_conversation(get_session_state())
    transcript = EventStreamTranscript()

    worker = threading.Thread(
        target=run_streamed_turn,
        args=(conversation, user_message, transcript),
        daemon=True,
    )
    worker.start()

    return Response(
        stream_with_context(transcript.stream()),
        mimetype="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )


if __name__ == "__main__":
    app.run(debug=True, threaded=True)
