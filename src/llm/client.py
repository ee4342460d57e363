# File: src/llm/client.py
"""
LLM integration module for Second Brain.
Asks the Groq API for a short strategic insight about the user's protocols.

Nothing in this module raises to the caller: every failure path returns one
of the fixed fallback sentences.
"""

import datetime
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional

import pytz
import requests

from src.core.config_manager import Config
from src.llm.prompt_builder import SYSTEM_PROMPT, AdvicePromptBuilder
from src.models.api import AdviceResponse
from src.models.habits import Habit
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

OFFLINE_ADVICE = "Sistema Offline. Configure a API Key para análise tática."
CONNECTION_ADVICE = "Falha na conexão neural. Foque na execução manual."
NOMINAL_ADVICE = "Sistemas nominais. Continue a execução."

_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="advice")


def get_groq_api_key() -> Optional[str]:
    """
    Retrieve the Groq API key from configuration.

    Returns:
        API key string or None if not found
    """
    api_key = Config.GROQ_API_KEY

    if not api_key:
        logger.warning("GROQ_API_KEY not set in environment, advice is offline")
        return None

    logger.debug("Groq API key loaded successfully")
    return api_key


def _extract_text(data: dict) -> Optional[str]:
    """Pull the message text out of a chat completion payload."""
    choices = data.get("choices") if isinstance(data, dict) else None
    if not choices:
        return None
    message = choices[0].get("message") or {}
    content = message.get("content")
    if content and str(content).strip():
        return str(content).strip()
    return None


def get_advice_response(
    habits: List[Habit],
    today: Optional[datetime.date] = None,
    model_id: str = Config.MODEL_ID
) -> AdviceResponse:
    """
    Request advice and report where the text came from.

    Args:
        habits: Current habit list
        today: Local calendar day (defaults to today in the configured timezone)
        model_id: Model identifier to use

    Returns:
        AdviceResponse with status 'success' or 'fallback'
    """
    api_key = get_groq_api_key()
    if not api_key:
        return AdviceResponse(status="fallback", text=OFFLINE_ADVICE, message="Missing API key")

    today = today or datetime.datetime.now(pytz.timezone(Config.TARGET_TIMEZONE)).date()
    prompt = AdvicePromptBuilder().build(habits, today)

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json"
    }

    payload = {
        "model": model_id,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt}
        ],
        "temperature": 0.7,
        "max_completion_tokens": Config.ADVICE_MAX_TOKENS,
    }

    try:
        logger.info(f"Requesting advice from Groq ({model_id})")
        response = requests.post(
            Config.GROQ_API_URL,
            headers=headers,
            json=payload,
            timeout=Config.ADVICE_TIMEOUT_SECONDS
        )
        response.raise_for_status()
        data = response.json()

        text = _extract_text(data)
        if text is None:
            logger.warning("Model returned empty content")
            return AdviceResponse(status="fallback", text=NOMINAL_ADVICE, message="Empty response", raw=data)

        logger.info("Advice received")
        return AdviceResponse(status="success", text=text, raw=data)

    except requests.exceptions.Timeout:
        logger.error("Groq API request timed out")
        return AdviceResponse(status="fallback", text=CONNECTION_ADVICE, message="Request timed out")
    except requests.exceptions.RequestException as e:
        logger.error(f"Network error calling Groq: {e}", exc_info=True)
        return AdviceResponse(status="fallback", text=CONNECTION_ADVICE, message=str(e))
    except ValueError as e:
        logger.error(f"Invalid response from Groq: {e}", exc_info=True)
        return AdviceResponse(status="fallback", text=CONNECTION_ADVICE, message=str(e))
    except Exception as e:
        logger.error(f"Unexpected error requesting advice: {e}", exc_info=True)
        return AdviceResponse(status="fallback", text=CONNECTION_ADVICE, message=str(e))


def get_advice(habits: List[Habit], today: Optional[datetime.date] = None) -> str:
    """Return a short insight, or a fallback sentence on any failure."""
    return get_advice_response(habits, today).text


def request_advice_async(
    habits: List[Habit],
    today: Optional[datetime.date] = None,
    callback: Optional[Callable[[str], None]] = None
) -> Future:
    """
    Fetch advice on a background worker.

    The returned future always resolves to a string. The callback, if any,
    is called with that string from the worker thread.
    """
    def _task() -> str:
        text = get_advice(habits, today)
        if callback is not None:
            try:
                callback(text)
            except Exception as e:
                logger.error(f"Advice callback failed: {e}", exc_info=True)
        return text

    return _executor.submit(_task)
