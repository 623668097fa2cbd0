# backend/routes/podcast.py
from flask import Blueprint, current_app, jsonify, request

from services.gemini_service import GenerationError, UnexpectedResponseError, generate_podcast

podcast_bp = Blueprint("podcast", __name__)


@podcast_bp.route("/generate-podcast", methods=["POST"])
async def generate_podcast_route():
    """
    POST /generate-podcast
    JSON: { "prompt": "coffee brewing" }
    Returns: { success: true, generatedText: "..." }
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    prompt = data.get("prompt")

    if not prompt or not isinstance(prompt, str) or not prompt.strip():
        return jsonify({"error": "Invalid or missing 'prompt' field."}), 400

    try:
        result = await generate_podcast(prompt, current_app.extensions["generator"])
    except UnexpectedResponseError:
        current_app.logger.exception("Unexpected response from AI model")
        return jsonify({"error": "Unexpected response from AI model."}), 500
    except GenerationError:
        current_app.logger.exception("Error generating content")
        return jsonify({"error": "Failed to generate podcast content."}), 500

    return jsonify({"success": True, "generatedText": result.dialogue_text})
