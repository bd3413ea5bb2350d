# webui/app.py

import logging
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, render_template_string, request

from agent import MemoryAgent
from config import Settings, load_settings
from memory import JsonFileStore, Store, StoreError
from memory.search import DEFAULT_SEARCH_LIMIT, RECENT_LIMIT
from memory.summary import WeeklyDigest
from raindrop import RAINDROP_NOT_CONFIGURED, Failed, RaindropClient, RemoteResult

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Small self-contained capture page for trying the API from a browser.
HTML_PAGE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <title>Memory Amigo</title>
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <style>
    body {
      margin: 0;
      font-family: system-ui, -apple-system, "Segoe UI", sans-serif;
      background: #0f172a;
      color: #e5e7eb;
      display: flex;
      justify-content: center;
    }
    .card {
      width: 100%;
      max-width: 720px;
      margin: 16px;
      padding: 16px;
      border-radius: 16px;
      border: 1px solid #1e293b;
      background: #020617;
    }
    textarea, input {
      width: 100%;
      box-sizing: border-box;
      margin-bottom: 8px;
      padding: 8px;
      border-radius: 8px;
      border: 1px solid #1f2937;
      background: #020617;
      color: #e5e7eb;
    }
    button {
      padding: 8px 14px;
      border-radius: 999px;
      border: none;
      background: linear-gradient(135deg, #22c55e, #16a34a);
      color: white;
      cursor: pointer;
    }
    pre {
      white-space: pre-wrap;
      font-size: 0.8rem;
      color: #9ca3af;
    }
  </style>
</head>
<body>
  <div class="card">
    <h3>Memory Amigo</h3>
    <textarea id="content" rows="4" placeholder="What happened today?"></textarea>
    <input id="mood" type="text" placeholder="Mood (optional)" />
    <input id="categories" type="text" placeholder="Categories, comma separated" />
    <button onclick="saveMemory()">Save</button>
    <button onclick="weeklySummary()">Weekly summary</button>
    <pre id="output"></pre>
  </div>
<script>
  async function post(path, body) {
    const resp = await fetch(path, {
      method: "POST",
      headers: { "Content-Type": "application/json" },
      body: JSON.stringify(body),
    });
    return resp.json();
  }

  async function saveMemory() {
    const content = document.getElementById("content").value.trim();
    if (!content) return;
    const categories = document.getElementById("categories").value
      .split(",").map(c => c.trim()).filter(Boolean);
    const data = await post("/api/save", {
      content: content,
      mood: document.getElementById("mood").value.trim() || null,
      categories: categories,
    });
    document.getElementById("output").textContent = JSON.stringify(data, null, 2);
  }

  async function weeklySummary() {
    const data = await post("/api/smartmemory/infer", { mode: "weekly_summary" });
    document.getElementById("output").textContent = JSON.stringify(data, null, 2);
  }
</script>
</body>
</html>
"""


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _limit(value: Any, default: int) -> int:
    """Parse a `limit` field. Missing or non-numeric values use `default`;
    0 is honored and yields nothing; negative values raise ValueError."""
    if value is None or isinstance(value, bool):
        return default
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return default
    if limit < 0:
        raise ValueError("limit must not be negative")
    return limit


def _query_text(value: Any) -> str:
    return "" if value is None else str(value)


def _remote_response(result: RemoteResult) -> Tuple[Any, int]:
    """Map a remote result onto an HTTP response for the remote-only routes."""
    if isinstance(result, Failed):
        status = 503 if result.error == RAINDROP_NOT_CONFIGURED else 502
        return jsonify(result.to_envelope()), status

    envelope = result.to_envelope()
    if not result.http_ok:
        return jsonify(envelope), 502
    return jsonify(envelope), 200


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[Store] = None,
    client: Optional[RaindropClient] = None,
) -> Flask:
    """Build the Flask app around a single shared MemoryAgent."""
    settings = settings or load_settings()
    store = store or JsonFileStore(settings.store_path)

    missing = settings.missing_env()
    if missing:
        logger.warning(
            "Raindrop not fully configured (missing %s); saves use the local store",
            ", ".join(missing),
        )

    memory_agent = MemoryAgent(settings, store, client=client)

    app = Flask(__name__)
    app.config["MEMORY_AGENT"] = memory_agent

    @app.route("/")
    def index():
        return render_template_string(HTML_PAGE)

    @app.route("/health")
    def health():
        return jsonify(
            {
                "ok": True,
                "raindrop_configured": memory_agent.remote_configured("memory"),
                "store_path": str(settings.store_path),
            }
        )

    # ------------------------------------------------------------------
    # Unified save plus remote-only passthroughs
    # ------------------------------------------------------------------

    @app.route("/api/save", methods=["POST"])
    def save():
        try:
            outcome = memory_agent.save(_json_body())
        except StoreError as e:
            logger.exception("Local fallback write failed")
            return jsonify({"ok": False, "error": str(e)}), 500
        return jsonify(outcome.to_response())

    @app.route("/api/search", methods=["GET"])
    def search():
        query = request.args.get("q", "")
        return _remote_response(memory_agent.search_remote(query))

    @app.route("/api/recent", methods=["GET"])
    def recent():
        return _remote_response(memory_agent.recent_remote())

    @app.route("/api/infer", methods=["POST"])
    def infer():
        data = _json_body()
        entries = data.get("contextEntries") or []
        if not isinstance(entries, list):
            return jsonify({"ok": False, "error": "contextEntries must be a list."}), 400

        try:
            result = memory_agent.infer_remote(
                data.get("mode"), entries, _query_text(data.get("query"))
            )
        except ValueError as e:
            return jsonify({"ok": False, "error": str(e)}), 400
        return _remote_response(result)

    # ------------------------------------------------------------------
    # Local store routes
    # ------------------------------------------------------------------

    @app.route("/api/smartmemory/save", methods=["POST"])
    def smartmemory_save():
        try:
            outcome = memory_agent.save_local(_json_body())
        except StoreError as e:
            logger.exception("Local save failed")
            return jsonify({"ok": False, "error": str(e)}), 500
        return jsonify({"ok": True, "result": outcome.result, "mock": True})

    @app.route("/api/smartmemory/list", methods=["POST"])
    def smartmemory_list():
        data = _json_body()
        try:
            limit = _limit(data.get("limit"), RECENT_LIMIT)
        except ValueError as e:
            return jsonify({"ok": False, "error": str(e)}), 400
        items = memory_agent.list_local(limit)
        return jsonify({"ok": True, "items": [item.to_dict() for item in items]})

    @app.route("/api/smartmemory/query", methods=["POST"])
    def smartmemory_query():
        data = _json_body()
        try:
            limit = _limit(data.get("limit"), DEFAULT_SEARCH_LIMIT)
        except ValueError as e:
            return jsonify({"ok": False, "error": str(e)}), 400
        items = memory_agent.query_local(_query_text(data.get("query")), limit)
        return jsonify({"ok": True, "items": [item.to_dict() for item in items]})

    @app.route("/api/smartmemory/infer", methods=["POST"])
    def smartmemory_infer():
        data = _json_body()
        mode = data.get("mode")
        result = memory_agent.infer_local(mode, _query_text(data.get("query")))
        if isinstance(result, WeeklyDigest):
            result = result.to_dict()
        return jsonify({"ok": True, "mode": mode, "result": result})

    return app


def main(settings: Optional[Settings] = None):
    """Start the Flask web server.

    Host and port come from amigo.yaml or AMIGO_WEB_HOST / AMIGO_WEB_PORT
    (default 0.0.0.0:5000).
    """
    settings = settings or load_settings()
    web_app = create_app(settings)
    logger.info("Memory Amigo server running on %s:%s", settings.host, settings.port)
    web_app.run(host=settings.host, port=settings.port, debug=False)


if __name__ == "__main__":
    main()
