# backend/routes/audio.py
"""
Routes for audio upload and transcription.

POST /upload-audio      multipart/form-data, file field 'audioFile'
POST /transcribe-audio  JSON { "filePath": "<path returned by /upload-audio>" }
"""

import os

from flask import Blueprint, current_app, jsonify, request

from services.speech_service import AudioNotFoundError, TranscriptionError, transcribe_file
from services.storage_service import UploadRejected, save_upload

audio_bp = Blueprint("audio", __name__)


def _inside(folder, path):
    folder = os.path.realpath(folder)
    return os.path.commonpath([folder, os.path.realpath(path)]) == folder


@audio_bp.route("/upload-audio", methods=["POST"])
def upload_audio():
    config = current_app.config["RELAY"]
    try:
        uploaded = save_upload(request.files.get("audioFile"), config)
    except UploadRejected as e:
        return jsonify({"error": str(e)}), 400
    except OSError:
        current_app.logger.exception("Failed to store upload")
        return jsonify({"error": "Failed to store uploaded file."}), 500

    return jsonify({"message": "File uploaded successfully", "filePath": uploaded.stored_path})


@audio_bp.route("/transcribe-audio", methods=["POST"])
async def transcribe_audio():
    config = current_app.config["RELAY"]
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    file_path = data.get("filePath")

    if not file_path or not isinstance(file_path, str):
        return jsonify({"error": "Missing 'filePath' field."}), 400
    if not _inside(config.upload_folder, file_path):
        return jsonify({"error": "'filePath' must point to an uploaded file."}), 400

    try:
        result = await transcribe_file(file_path, config, current_app.extensions["recognizer"])
    except AudioNotFoundError:
        return jsonify({"error": "Audio file not found."}), 404
    except TranscriptionError:
        current_app.logger.exception("Error transcribing audio")
        return jsonify({"error": "Failed to transcribe audio."}), 500

    return jsonify({"success": True, "transcription": result.transcript})
