"""Round-robin dispatch of prompts to an OpenAI-compatible completion API.

The dispatcher owns an ordered pool of API keys. Every attempt takes the
next key (the cursor advances on every call, not only on failure), so
concurrent requests spread across the pool. Only 401 and 429 responses move
on to another key; anything else ends the dispatch at once.
"""

from __future__ import annotations

import enum
import json
import logging
import re
import threading
from typing import Any, Callable, List, Optional

import openai

from app.errors import ConfigurationError, ExternalServiceError

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = frozenset({401, 429})

SYSTEM_PROMPT = (
    "You are Dr. Luna, a compassionate AI therapist and journaling assistant. "
    "You always respond in the format requested by the user. If the user requests JSON, "
    "you MUST ONLY output a valid JSON object with no extra text or markdown."
)

_FENCED_BLOCK = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)


class ResponseMode(enum.Enum):
    STRUCTURED = 'structured'
    FREE_TEXT = 'free_text'


def parse_structured_response(text: str) -> Optional[dict]:
    """Decode a JSON object from model output.

    Tries the whole text first, then the first fenced code block. Returns
    None when neither yields a JSON object.
    """
    if not text:
        return None
    candidates = [text.strip()]
    match = _FENCED_BLOCK.search(text)
    if match:
        candidates.append(match.group(1).strip())
    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except (json.JSONDecodeError, TypeError):
            continue
        if isinstance(data, dict):
            return data
    logger.error("Could not parse model response as JSON: %.200s", text)
    return None


def _default_client_factory(api_key: str, base_url: str, timeout: float):
    return openai.OpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)


class AIRequestDispatcher:
    """Send prompts with credential rotation and typed failure handling."""

    def __init__(
        self,
        api_keys: List[str],
        base_url: str = 'https://api.groq.com/openai/v1',
        model: str = 'llama3-8b-8192',
        timeout: float = 30.0,
        temperature: float = 0.7,
        max_tokens: int = 1500,
        system_prompt: str = SYSTEM_PROMPT,
        client_factory: Optional[Callable[[str, str, float], Any]] = None,
    ):
        self.api_keys = [key for key in api_keys or [] if key]
        if not self.api_keys:
            raise ConfigurationError('AIRequestDispatcher needs at least one API key')
        self.base_url = base_url
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.system_prompt = system_prompt
        self.client_factory = client_factory or _default_client_factory
        self._clients = {}
        self._cursor = 0
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, app_config, **overrides):
        options = dict(
            api_keys=app_config.get('AI_API_KEYS', []),
            base_url=app_config.get('AI_BASE_URL', 'https://api.groq.com/openai/v1'),
            model=app_config.get('AI_MODEL', 'llama3-8b-8192'),
            timeout=app_config.get('AI_TIMEOUT', 30.0),
            temperature=app_config.get('AI_TEMPERATURE', 0.7),
            max_tokens=app_config.get('AI_MAX_TOKENS', 1500),
        )
        options.update(overrides)
        return cls(**options)

    @property
    def pool_size(self) -> int:
        return len(self.api_keys)

    @property
    def cursor(self) -> int:
        return self._cursor

    def next_api_key(self):
        """Return (index, key) for the current slot and advance the cursor."""
        with self._lock:
            index = self._cursor
            self._cursor = (self._cursor + 1) % len(self.api_keys)
        return index, self.api_keys[index]

    def client_for(self, api_key: str):
        """The client bound to *api_key*, built on first use and reused after."""
        with self._lock:
            client = self._clients.get(api_key)
            if client is None:
                client = self.client_factory(api_key, self.base_url, self.timeout)
                self._clients[api_key] = client
        return client

    def _request(self, api_key: str, prompt: str, mode: ResponseMode) -> str:
        client = self.client_for(api_key)
        params = dict(
            model=self.model,
            messages=[
                {'role': 'system', 'content': self.system_prompt},
                {'role': 'user', 'content': prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        if mode is ResponseMode.STRUCTURED:
            params['response_format'] = {'type': 'json_object'}
        response = client.chat.completions.create(**params)
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            raise ExternalServiceError('Unexpected response shape from the AI service') from exc
        if not content:
            raise ExternalServiceError('Received empty content from the AI service')
        return content

    def dispatch(self, prompt: str, mode: ResponseMode = ResponseMode.FREE_TEXT):
        """Run *prompt* against the pool.

        Returns the reply text (free-text mode), a dict (structured mode) or
        None when a structured reply could not be parsed. Raises
        ExternalServiceError when every key was rejected or a non-retryable
        error occurred.
        """
        attempts = len(self.api_keys)
        for attempt in range(attempts):
            index, api_key = self.next_api_key()
            try:
                content = self._request(api_key, prompt, mode)
            except openai.APIStatusError as exc:
                status = exc.status_code
                logger.warning('AI request with key #%d failed with status %s: %s', index, status, exc)
                if status in RETRYABLE_STATUSES and attempt < attempts - 1:
                    logger.info('Trying next API key')
                    continue
                if status in RETRYABLE_STATUSES:
                    break
                raise ExternalServiceError(f'AI service returned status {status}', status=status) from exc
            except openai.APIError as exc:
                # Timeouts and connection failures carry no status and are not retried
                logger.error('AI request with key #%d failed: %s', index, exc)
                raise ExternalServiceError(str(exc)) from exc
            except openai.OpenAIError as exc:
                logger.error('AI client error with key #%d: %s', index, exc)
                raise ExternalServiceError(str(exc)) from exc

            if mode is ResponseMode.STRUCTURED:
                return parse_structured_response(content)
            return content

        raise ExternalServiceError('All AI API keys failed')
