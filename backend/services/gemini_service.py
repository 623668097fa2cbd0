"""
Gemini AI integration for:
- generate_podcast(topic): returns the two-host dialogue text for a topic

We use google-generativeai SDK.
"""

import asyncio
import logging
from dataclasses import dataclass

import google.generativeai as genai

logger = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    pass


class UnexpectedResponseError(GenerationError):
    pass


@dataclass(frozen=True)
class GenerationResult:
    topic: str
    dialogue_text: str


class GeminiGenerator:
    """Binds the SDK to one API key and one model name."""

    def __init__(self, api_key, model_name):
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name)

    def generate(self, prompt):
        return self.model.generate_content(prompt)


def build_podcast_prompt(topic):
    return (
        "Write a podcast where two hosts (you can name the hosts) discuss the following "
        f'topic: "{topic}". One of the hosts should be curious asking questions, and the '
        "other should be knowledgeable when answering. The conversation should feel "
        "natural and engaging. Do not include any asterisk."
    )


def extract_text(response):
    """
    Pull the text parts of the first candidate, joined by newlines.
    Raises UnexpectedResponseError if the response doesn't have that shape.
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        raise UnexpectedResponseError("response has no candidates")

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None)
    if not parts:
        raise UnexpectedResponseError("first candidate has no content parts")

    texts = [getattr(p, "text", None) for p in parts]
    if not all(isinstance(t, str) for t in texts):
        raise UnexpectedResponseError("content part without text")
    return "\n".join(texts)


async def generate_podcast(topic, generator):
    """
    Ask the model for a podcast dialogue about topic.
    Service failures raise GenerationError; a response we can't read raises
    UnexpectedResponseError.
    """
    prompt = build_podcast_prompt(topic)
    try:
        response = await asyncio.to_thread(generator.generate, prompt)
    except Exception as exc:
        raise GenerationError(f"Gemini request failed: {exc}") from exc

    return GenerationResult(topic=topic, dialogue_text=extract_text(response))
