# resumeforge/services/common/llm_client.py
"""Unified LLM client supporting both Ollama and OpenAI: structured JSON responses,
prompt loading, and provider abstraction for resume extraction, job-spec extraction
and tailoring."""
from __future__ import annotations
import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
from openai import OpenAI, APIConnectionError, APIStatusError, APITimeoutError

from resumeforge.core.config import settings

logger = logging.getLogger("ai.llm")

LLM_ERROR_KEY = "__llm_error__"


@dataclass
class _JSONResponse:
    """Small wrapper to match `.data` access pattern used in the codebase."""
    data: Dict[str, Any]

    @property
    def error(self) -> Optional[str]:
        """Provider/decoding failure message, or None when the call produced JSON."""
        err = self.data.get(LLM_ERROR_KEY) if isinstance(self.data, dict) else None
        return str(err) if err else None


# Default Ollama chat options
DEFAULT_CHAT_OPTIONS: Dict[str, Any] = {
    "temperature": 0,
    "seed": 7,
    "repeat_penalty": 1.05,
    "num_ctx": 8192,
    "num_predict": 2048,
}


def _build_ollama_chat_url() -> str:
    """Build the Ollama chat endpoint URL."""
    if not settings.OLLAMA_BASE_URL:
        raise ValueError("OLLAMA_BASE_URL is not set. Please add it to your environment or .env file.")
    return f"{settings.OLLAMA_BASE_URL.rstrip('/')}/api/chat"


def load_prompt(relative_path: str) -> str:
    """
    Load a prompt file from resumeforge/prompts/<relative_path>.
    If the exact relative path is not found, also try by basename under resumeforge/prompts/.
    """
    base = Path(__file__).resolve().parents[2] / "prompts"  # points to resumeforge/prompts
    path = base / relative_path
    if path.exists():
        text = path.read_text(encoding="utf-8")
        logger.debug("Loaded prompt: %s (%d chars)", relative_path, len(text))
        return text
    alt = base / Path(relative_path).name
    if alt.exists():
        text = alt.read_text(encoding="utf-8")
        logger.debug("Loaded prompt by basename fallback: %s (%d chars)", alt.name, len(text))
        return text
    raise FileNotFoundError(f"Prompt file not found. Tried: {path} and {alt}")


class LLMClient:
    """
    Unified wrapper supporting both Ollama and OpenAI:
      - chat_json: strict JSON output (.data dict), used by pipelines.

    Provider selection:
      - If LLM_CHAT_MODEL is set → use Ollama
      - If OPENAI_MODEL is set and LLM_CHAT_MODEL is not → use OpenAI
      - Otherwise the client is disabled and every call returns an error payload
    """

    def __init__(self, model: Optional[str] = None, provider: Optional[str] = None):
        self._openai: Optional[OpenAI] = None

        if provider:
            self.provider = provider.lower()
        elif settings.LLM_CHAT_MODEL:
            self.provider = "ollama"
        elif settings.OPENAI_MODEL:
            self.provider = "openai"
        else:
            self.provider = "disabled"
            logger.warning("No LLM provider configured; AI extraction and tailoring are unavailable")

        if self.provider == "ollama":
            self.model = model or settings.LLM_CHAT_MODEL or "llama3.2"
            self.chat_url = _build_ollama_chat_url()
            self.default_options = DEFAULT_CHAT_OPTIONS.copy()
            logger.info("LLM Client initialized with Ollama: %s @ %s", self.model, settings.OLLAMA_BASE_URL)
        elif self.provider == "openai":
            if not settings.OPENAI_API_KEY:
                raise ValueError("OPENAI_API_KEY is not set. Please add it to your environment or .env file.")
            self.model = model or settings.OPENAI_MODEL
            logger.info("LLM Client initialized with OpenAI: %s", self.model)
        elif self.provider == "disabled":
            self.model = None
        else:
            raise ValueError(f"Unknown provider: {self.provider}")

    @property
    def enabled(self) -> bool:
        return self.provider != "disabled"

    def chat_json(
        self,
        messages: List[Dict[str, str]],
        timeout: int = 90,
        *,
        options: Optional[Dict[str, Any]] = None,
        max_tokens: Optional[int] = None,
    ) -> _JSONResponse:
        """
        Run a chat completion that MUST return valid JSON.
        Failures never raise; they come back as ``{"__llm_error__": "..."}``.
        """
        if self.provider == "ollama":
            return self._chat_json_ollama(messages, timeout, options=options)
        if self.provider == "openai":
            return self._chat_json_openai(messages, timeout, max_tokens=max_tokens)
        return _JSONResponse(data={LLM_ERROR_KEY: "llm_disabled: no provider configured"})

    # ===== Ollama Implementation =====
    def _chat_json_ollama(self, messages: List[Dict[str, str]], timeout: int, *, options: Optional[Dict[str, Any]] = None) -> _JSONResponse:
        try:
            merged_options = self.default_options.copy()
            if options:
                merged_options.update(options)
            payload = {
                "model": self.model,
                "messages": messages,
                "format": "json",
                "stream": False,
                "options": merged_options,
                "keep_alive": "30m",
            }
            response = requests.post(self.chat_url, json=payload, timeout=timeout)
            response.raise_for_status()

            raw = response.json().get("message", {}).get("content", "").strip()
            data = self._decode(raw)
            logger.debug("Ollama chat_json parsed keys: %s", list(data.keys()))
            return _JSONResponse(data=data)
        except requests.RequestException as e:
            logger.error("Ollama chat_json error: %s", e)
            return _JSONResponse(data={LLM_ERROR_KEY: str(e)})

    # ===== OpenAI Implementation =====
    def _get_openai_client(self) -> OpenAI:
        if self._openai is None:
            self._openai = OpenAI(api_key=settings.OPENAI_API_KEY)
            logger.info("OpenAI client initialized")
        return self._openai

    def _chat_json_openai(self, messages: List[Dict[str, str]], timeout: int, *, max_tokens: Optional[int] = None) -> _JSONResponse:
        try:
            client = self._get_openai_client()
            kwargs: Dict[str, Any] = {
                "model": self.model,
                "messages": messages,
                "response_format": {"type": "json_object"},
                "timeout": timeout,
            }
            if max_tokens is not None:
                kwargs["max_tokens"] = max_tokens
            resp = client.chat.completions.create(**kwargs)
            raw = (resp.choices[0].message.content or "").strip()
            data = self._decode(raw)
            logger.debug("OpenAI chat_json parsed keys: %s", list(data.keys()))
            return _JSONResponse(data=data)
        except APIStatusError as e:
            logger.error("OpenAI API error in chat_json (status %s): %s", e.status_code, e)
            return _JSONResponse(data={LLM_ERROR_KEY: f"{e.status_code}: {e}"})
        except (APIConnectionError, APITimeoutError) as e:
            logger.error("OpenAI connection error in chat_json: %s", e)
            return _JSONResponse(data={LLM_ERROR_KEY: str(e)})

    def _decode(self, raw: str) -> Dict[str, Any]:
        try:
            return self._coerce_json(raw) if raw else {LLM_ERROR_KEY: "empty_response"}
        except json.JSONDecodeError as je:
            logger.error("JSON decode failed; returning error payload")
            return {LLM_ERROR_KEY: f"json_decode_error: {je}", "__raw_preview__": raw[:1200]}

    @staticmethod
    def _coerce_json(text: str) -> Dict[str, Any]:
        """Best-effort JSON object parser for LLM responses.

        Handles common failure modes:
        - Markdown code fences (```json ... ```)
        - Extra commentary before/after JSON
        - JSON embedded inside a larger string
        """

        def strip_code_fences(s: str) -> str:
            s = s.strip()
            s = re.sub(r"^\s*```(?:json)?\s*", "", s, flags=re.IGNORECASE)
            s = re.sub(r"\s*```\s*$", "", s)
            return s.strip()

        def extract_first_json_object(s: str) -> Optional[str]:
            # First balanced {...}; braces inside strings are ignored.
            start = s.find("{")
            if start == -1:
                return None
            depth = 0
            in_string = False
            escape = False
            for i in range(start, len(s)):
                ch = s[i]
                if in_string:
                    if escape:
                        escape = False
                    elif ch == "\\":
                        escape = True
                    elif ch == '"':
                        in_string = False
                    continue
                if ch == '"':
                    in_string = True
                elif ch == "{":
                    depth += 1
                elif ch == "}":
                    depth -= 1
                    if depth == 0:
                        return s[start : i + 1]
            return None

        stripped = strip_code_fences(text or "")
        if not stripped:
            return {}

        try:
            obj = json.loads(stripped)
            if isinstance(obj, dict):
                return obj
            # Sometimes a model returns a single-element list with a dict.
            if isinstance(obj, list) and len(obj) == 1 and isinstance(obj[0], dict):
                return obj[0]
        except json.JSONDecodeError:
            pass

        candidate = extract_first_json_object(stripped)
        if candidate:
            obj = json.loads(candidate)
            if isinstance(obj, dict):
                return obj

        obj = json.loads(stripped)
        if not isinstance(obj, dict):
            raise json.JSONDecodeError("Expected JSON object", stripped, 0)
        return obj
