"""OpenRouter provider — short company overviews from an OpenAI-compatible chat completion API."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel

from quoteboard.core.errors import UpstreamError
from quoteboard.core.providers.base import HttpClient, Provider

SYSTEM_PROMPT = (
    "You are a financial analyst providing detailed, factual company summaries for investors. "
    "Focus on business operations, market position, and key strategic facts. "
    "Avoid speculation or investment advice. Write in a clear, professional tone."
)

QUOTA_MESSAGE = "AI summary temporarily unavailable. Please check OpenAI API quota and billing."
QUOTA_STATUSES = {402, 429}
QUOTA_MARKERS = ("quota", "429", "billing")


class QuotaExceeded(UpstreamError):
    """The completion API refused for quota or billing reasons; surfaced as 503."""

    def __init__(self, message: str = QUOTA_MESSAGE):
        super().__init__(message, status=503)


class ChatMessage(BaseModel):
    role: str | None = None
    content: str | None = None


class ChatChoice(BaseModel):
    message: ChatMessage


class ChatCompletion(BaseModel):
    choices: list[ChatChoice]


def _subject(symbol: str, company_name: str | None) -> str:
    return company_name or symbol


def build_prompt(symbol: str, company_name: str | None = None,
                 industry: str | None = None, sector: str | None = None) -> str:
    industry_part = f" ({industry})" if industry else ""
    sector_part = f" in the {sector} sector" if sector else ""
    return (
        f"Provide a comprehensive, informative 4-5 sentence overview of "
        f"{_subject(symbol, company_name)}{industry_part}{sector_part}. Include: \n"
        "1. What the company does, its primary products/services, and target markets\n"
        "2. Its market position, scale, or competitive advantages\n"
        "3. Key business segments or revenue drivers\n"
        "4. Recent strategic initiatives, growth areas, or notable developments\n"
        "5. Any relevant operational highlights or market dynamics\n\n"
        "Keep it factual, professional, and informative for investors. Aim for 120-150 words."
    )


def is_quota_error(error: UpstreamError) -> bool:
    if error.status in QUOTA_STATUSES:
        return True
    message = error.message.lower()
    return any(marker in message for marker in QUOTA_MARKERS)


class OpenRouterProvider(Provider):

    requires_key = True

    def __init__(
        self,
        api_key: str = "",
        http: HttpClient | None = None,
        base_url: str = "https://openrouter.ai/api/v1",
        model: str = "openai/gpt-4o-mini",
    ):
        super().__init__(http, api_key)
        self._base_url = base_url.rstrip("/")
        self._model = model

    @property
    def name(self) -> str:
        return "OpenRouter"

    async def complete(self, prompt: str) -> dict:
        try:
            return await self._http.post_json(
                f"{self._base_url}/chat/completions",
                {
                    "model": self._model,
                    "messages": [
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    "temperature": 0.3,
                    "max_tokens": 350,
                },
                headers={"Authorization": f"Bearer {self._api_key}", "Content-Type": "application/json"},
            )
        except UpstreamError as e:
            if is_quota_error(e):
                raise QuotaExceeded() from e
            raise


# ── Normalisation ───────────────────────────────────────────────────────


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def completion_soft_error(payload: Any) -> str | None:
    if isinstance(payload, dict) and payload.get("error"):
        error = payload["error"]
        return error.get("message", "Completion failed") if isinstance(error, dict) else str(error)
    return None


def normalize_summary(payload: Any, symbol: str) -> dict:
    completion = ChatCompletion.model_validate(payload)
    content = (completion.choices[0].message.content or "").strip()
    if not content:
        raise UpstreamError("Empty completion")
    return {"symbol": symbol, "summary": content, "generatedAt": _now_iso()}


def fallback_summary(symbol: str, company_name: str | None = None,
                     industry: str | None = None, sector: str | None = None) -> dict:
    sector_part = f" operating in the {sector} sector" if sector else ""
    return {
        "symbol": symbol,
        "summary": (
            f"{_subject(symbol, company_name)} is a {industry or 'publicly traded company'}{sector_part}. "
            "For detailed information, please refer to the company's official investor relations materials."
        ),
        "generatedAt": _now_iso(),
        "fallback": True,
    }
