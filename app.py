# app.py - Flask entrypoint: knowledge graph proxy, audit endpoint and the page
import logging

from flask import Flask, jsonify, render_template, request
from werkzeug.exceptions import HTTPException

from config import settings
from search.errors import InvalidInput, SearchError, Unauthorized
from search.knowledge_graph import search_entity
from search.presentation import build_view, error_view
from search.scoring import ScoringConfig

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

app = Flask(__name__, template_folder="templates")
SCORING = ScoringConfig.from_settings()


@app.after_request
def add_cors_headers(response):
    if request.path.startswith("/api/"):
        response.headers.update(CORS_HEADERS)
    return response


@app.errorhandler(SearchError)
def handle_search_error(e: SearchError):
    return jsonify({"error": e.message}), e.http_status


@app.errorhandler(Exception)
def handle_unexpected(e: Exception):
    if isinstance(e, HTTPException):
        return e
    logger.exception(f"Unhandled error while serving {request.path}")
    return jsonify({"error": "An unexpected error occurred"}), 500


def _check_token():
    token = settings.PROXY_TOKEN
    if not token:
        return
    if request.headers.get("Authorization", "") != f"Bearer {token}":
        raise Unauthorized("Missing or invalid bearer token")


def _read_query():
    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        raise InvalidInput("Brand name is required")
    return body.get("query")


@app.route('/')
def index():
    return render_template(
        'index.html',
        proxy_base_url=settings.PROXY_BASE_URL.rstrip("/"),
        proxy_token=settings.PROXY_TOKEN,
    )


@app.route('/api/search', methods=['POST', 'OPTIONS'])
def api_search():
    if request.method == 'OPTIONS':
        return app.response_class(status=200)
    _check_token()
    outcome = search_entity(_read_query())
    return jsonify(outcome.to_payload())


@app.route('/api/audit', methods=['POST', 'OPTIONS'])
def api_audit():
    if request.method == 'OPTIONS':
        return app.response_class(status=200)
    _check_token()
    query = ""
    try:
        query = _read_query()
        outcome = search_entity(query)
    except SearchError as e:
        view = error_view(e.message, query=query if isinstance(query, str) else "")
        return jsonify(view.to_payload()), e.http_status
    return jsonify(build_view(outcome, SCORING).to_payload())


if __name__ == '__main__':
    logging.basicConfig(level=settings.LOG_LEVEL)
    app.run(host=settings.HOST, port=settings.PORT)
