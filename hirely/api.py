"""HTTP API: job search adapters, aggregated listings, AI endpoints and health."""
from __future__ import annotations

import os
from datetime import datetime, timezone

from flask import Flask, jsonify, request
from flask_cors import CORS

from hirely import assistant
from hirely.aggregator import ALL, Aggregator
from hirely.config import get_env, load_settings
from hirely.errors import ProviderError, ValidationError
from hirely.log import get_logger
from hirely.profiles import candidates
from hirely.sources import get_sources
from hirely.store import Store, open_store

log = get_logger(__name__)


def _int_arg(name: str, default: int) -> int:
    try:
        return int(request.args.get(name, default))
    except (TypeError, ValueError):
        return default


def _json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def create_app(store: Store | None = None, sources=None) -> Flask:
    store = store or open_store(load_settings())
    serp, adzuna = sources or get_sources(store.settings, get_env)
    aggregator = Aggregator.from_store(store, (serp, adzuna))

    app = Flask(__name__)
    CORS(app, resources={r"/api/*": {"origins": os.environ.get("ALLOWED_ORIGINS", "*")}})
    app.extensions["hirely.store"] = store

    @app.errorhandler(ValidationError)
    def _validation_error(exc: ValidationError):
        return jsonify({"error": str(exc)}), 400

    @app.get("/api/jobs/search")
    def jobs_search():
        query = request.args.get("q", "")
        location = request.args.get("location", "")
        pages = _int_arg("pages", 1)
        try:
            return jsonify(serp.fetch(query, location, pages))
        except ProviderError as exc:
            log.error("Error fetching jobs from SerpAPI: %s", exc)
            return jsonify({"success": False, "error": "Failed to fetch jobs", "message": str(exc)}), 500

    @app.get("/api/jobs/adzuna")
    def jobs_adzuna():
        if not adzuna.configured:
            return jsonify({"success": False, "error": "Adzuna API credentials not configured"}), 500
        try:
            return jsonify(adzuna.fetch(
                request.args.get("q", ""),
                request.args.get("location", ""),
                _int_arg("page", 1),
                _int_arg("results_per_page", 20),
            ))
        except ProviderError as exc:
            log.error("Adzuna fetch error: %s", exc)
            status = exc.status if exc.status and exc.status >= 400 else 500
            return jsonify({"success": False, "error": "Failed to fetch from Adzuna", "message": str(exc)}), status

    @app.get("/api/jobs")
    def jobs_aggregated():
        jobs = aggregator.get_jobs_for_display(
            request.args.get("q", ""), request.args.get("category", ALL)
        )
        return jsonify({"success": True, "count": len(jobs), "jobs": [j.to_dict() for j in jobs]})

    @app.post("/api/chat")
    def chat():
        message = _json_body().get("message", "")
        try:
            return jsonify({"reply": assistant.chat_reply(message)})
        except ValidationError:
            raise
        except Exception as exc:
            log.error("Error in AI chatbot: %s", exc)
            return jsonify({"error": "Failed to process chat message"}), 500

    @app.post("/api/voice-chat")
    def voice_chat():
        body = _json_body()
        try:
            reply = assistant.interview_reply(
                body.get("message", ""), body.get("mode") or "technical", body.get("history") or []
            )
            return jsonify({"reply": reply})
        except ValidationError:
            raise
        except Exception as exc:
            log.error("Voice chat error: %s", exc)
            return jsonify({"error": "Failed to process voice chat"}), 500

    @app.post("/api/headhunter")
    def headhunter():
        prompt = _json_body().get("prompt", "")
        try:
            results = assistant.find_candidates(prompt, candidates(store))
            return jsonify({"results": results})
        except ValidationError:
            raise
        except Exception as exc:
            log.error("Headhunter error: %s", exc)
            return jsonify({"error": "AI sourcing failed"}), 500

    @app.get("/api/health")
    def health():
        return jsonify({
            "status": "ok",
            "serpApiConfigured": serp.configured,
            "adzunaConfigured": adzuna.configured,
            "aiConfigured": assistant.configured(),
            "remoteStore": store.settings.store_url,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    return app


def main() -> None:
    port = int(get_env("PORT", "3001") or 3001)
    with open_store(load_settings()) as store:
        app = create_app(store)
        log.info("Hirely API running at http://localhost:%d", port)
        log.info("SerpAPI endpoint: http://localhost:%d/api/jobs/search?q=developer&location=India", port)
        log.info("Adzuna endpoint: http://localhost:%d/api/jobs/adzuna?q=developer", port)
        log.info("Health check: http://localhost:%d/api/health", port)
        app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
