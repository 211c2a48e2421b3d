import logging
import os
import requests

from config import GEMINI_MODEL

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
DEFAULT_SYSTEM_PROMPT = "You are a helpful teaching assistant for GraamGyaan."
FALLBACK_REPLY = "Sorry, I couldn't answer that right now. Please try again in a moment."


class MissingApiKey(Exception):
    pass


def build_prompt(messages, system_prompt=None):
    history = "\n".join(f"{m['role'].upper()}: {m['content']}" for m in messages)
    return f"{system_prompt or DEFAULT_SYSTEM_PROMPT}\n\n{history}\nASSISTANT:"


def gemini_reply(messages, system_prompt=None, timeout=30):
    api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        raise MissingApiKey("Missing GEMINI_API_KEY")

    headers = {
        "x-goog-api-key": api_key,
        "Content-Type": "application/json"
    }

    payload = {
        "contents": [
            {"role": "user", "parts": [{"text": build_prompt(messages, system_prompt)}]}
        ]
    }

    response = requests.post(GEMINI_URL.format(model=GEMINI_MODEL), headers=headers, json=payload, timeout=timeout)

    try:
        response.raise_for_status()
    except requests.exceptions.HTTPError as e:
        logger.error("Gemini request failed: %s", e)
        logger.error("Response content: %s", response.text)
        raise

    parts = response.json()["candidates"][0]["content"]["parts"]
    return "".join(part.get("text", "") for part in parts)
