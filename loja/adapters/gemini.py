"""Async HTTP client for the text-generation service used by the insights panel.

Only one call is needed: send a prompt, get free text back. The response body
is treated as opaque apart from locating the first text part.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from loja.config import DEFAULTS, api_key_insights

BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class ErroServicoTexto(RuntimeError):
    """Falha na chamada ao serviço de geração de texto."""


def extrair_texto(corpo: Any) -> str:
    """Return ``candidates[0].content.parts[*].text`` joined, or ``""``."""
    try:
        partes = corpo["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    return "".join(p.get("text", "") for p in partes if isinstance(p, dict))


class ClienteGemini:
    """Thin wrapper around ``models/{model}:generateContent``.

    Args:
        api_key: Service key. Read from the environment when omitted.
        modelo: Model name.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        modelo: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else api_key_insights()
        self.modelo = modelo or DEFAULTS.modelo_insights
        self.timeout = timeout if timeout is not None else DEFAULTS.timeout_insights
        self.transport = transport

    async def gerar_texto(self, prompt: str, temperatura: float = 0.7) -> str:
        """Send ``prompt`` and return the generated text.

        Raises:
            ErroServicoTexto: missing key, transport error or non-2xx status.
        """
        if not self.api_key:
            raise ErroServicoTexto("chave da API não configurada (GEMINI_API_KEY)")

        url = f"{BASE_URL}/models/{self.modelo}:generateContent"
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperatura,
                "thinkingConfig": {"thinkingBudget": 0},
            },
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, params={"key": self.api_key}, json=payload)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise ErroServicoTexto(str(e)) from e
        try:
            corpo = response.json()
        except ValueError as e:
            raise ErroServicoTexto("resposta não é JSON") from e
        return extrair_texto(corpo)
