import logging
import time

import requests
from flask import Flask, request, jsonify
from flask_cors import CORS

from config import Settings, settings
from remote.config import MOCK_RESULT, MOCK_MODEL_FALLBACK, MOCK_MODEL_PLACEHOLDER
from remote.sanitize import normalize_result, estimate_decoded_size
from remote.upstream import request_model_verdict
from utils.logging import setup_logging

logger = logging.getLogger(__name__)


def _error(status, message, **extra):
    body = {"error": message}
    body.update(extra)
    return jsonify(body), status


def create_app(cfg: Settings = settings) -> Flask:
    app = Flask(__name__)
    CORS(app)  # Allow the scanner UI to call the API
    app.config["SETTINGS"] = cfg

    @app.route('/api/analyze', methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE'])
    def analyze():
        cfg = app.config["SETTINGS"]
        try:
            if request.method != 'POST':
                resp, status = _error(405, 'Use POST')
                resp.headers['Allow'] = 'POST'
                return resp, status

            body = request.get_json(silent=True)
            if not isinstance(body, dict):
                body = {}
            image_base64 = body.get('image_base64')
            if not isinstance(image_base64, str):
                image_base64 = None
            barcode = body.get('barcode')
            use_model = bool(body.get('use_model'))

            if image_base64 and estimate_decoded_size(image_base64) > cfg.max_image_bytes:
                return _error(413, 'Image too large', max_bytes=cfg.max_image_bytes)

            if not cfg.openai_api_key:
                return _error(500, 'Missing OPENAI_API_KEY env var')

            final = None
            model_tried = False

            if use_model and image_base64 and cfg.upstream_enabled:
                model_tried = True
                try:
                    verdict = request_model_verdict(
                        image_base64,
                        api_key=cfg.openai_api_key,
                        url=cfg.upstream_url,
                        model=cfg.upstream_model,
                        timeout=cfg.upstream_timeout,
                    )
                    if verdict is not None:
                        verdict.setdefault('model', cfg.upstream_model)
                        final = normalize_result(verdict)
                except (requests.RequestException, ValueError) as e:
                    # Mock fallback below
                    logger.warning("Upstream model call failed: %s", e)

            if final is None:
                mock = dict(MOCK_RESULT)
                mock['model'] = MOCK_MODEL_FALLBACK if model_tried else MOCK_MODEL_PLACEHOLDER
                final = normalize_result(mock)

            final['barcode'] = barcode if isinstance(barcode, str) and barcode else None
            final['ts'] = int(time.time() * 1000)
            return jsonify(final)

        except Exception as e:
            logger.exception("Inference failed")
            return _error(500, 'Inference failed', detail=str(e))

    @app.route('/api/health', methods=['GET'])
    def health():
        return jsonify({'status': 'ok'})

    return app


app = create_app()

if __name__ == '__main__':
    setup_logging(level=settings.log_level)
    app.run(host=settings.api_host, port=settings.api_port, debug=False)
