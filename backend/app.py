"""
Main Flask app. Builds the app, registers blueprints and wires the Google
clients into app.extensions.
Run this file from the backend directory:
    cd backend
    python app.py
"""

import logging
import sys

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import ConfigError, load_config
from services.storage_service import ensure_upload_folder


def create_app(config=None, recognizer=None, generator=None):
    """
    config defaults to load_config(); recognizer/generator default to the
    Google Speech and Gemini adapters. Raises ConfigError without an API key.
    """
    config = config or load_config()
    config.require_api_key()

    app = Flask(__name__)
    app.config["RELAY"] = config
    CORS(app, origins=config.cors_origins)

    ensure_upload_folder(config)
    app.logger.info("Uploads directory is ready.")

    if recognizer is None:
        from services.speech_service import GoogleSpeechRecognizer
        recognizer = GoogleSpeechRecognizer()
    if generator is None:
        from services.gemini_service import GeminiGenerator
        generator = GeminiGenerator(config.api_key, config.gemini_model)
    app.extensions["recognizer"] = recognizer
    app.extensions["generator"] = generator

    # Register modular routes (blueprints)
    from routes.audio import audio_bp
    from routes.podcast import podcast_bp

    app.register_blueprint(audio_bp)
    app.register_blueprint(podcast_bp)

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def unhandled_error(e):
        app.logger.exception("Unhandled error")
        return jsonify({"error": "Internal server error."}), 500

    return app


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        config = load_config()
        app = create_app(config)
    except ConfigError as e:
        logging.getLogger(__name__).error("%s. Exiting...", e)
        sys.exit(1)

    app.run(host=config.host, port=config.port)


if __name__ == "__main__":
    main()
