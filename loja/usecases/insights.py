"""
UC: Análise de estoque por IA.

Envia um retrato do catálogo (nome, quantidade, limiar, preço) com um prompt
fixo e devolve texto livre. Nunca altera o estado: qualquer falha vira uma
mensagem padrão.

``PainelInsights`` guarda só a resposta da requisição mais recente; respostas
de requisições antigas que chegam depois são descartadas.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional, Protocol

from loja.domain.models import Produto
from loja.infra.logger import log_system_event


MSG_SEM_RESPOSTA = "Impossible d'obtenir des analyses pour le moment."
MSG_ERRO = "Erreur lors de la génération des insights par l'IA."

PROMPT = (
    "Analyse les données d'inventaire suivantes et fournis des recommandations stratégiques :\n"
    "{dados}\n\n"
    "Identifie les risques de rupture, les stocks dormants et suggère des optimisations de commande.\n"
    "Réponds de manière professionnelle et concise."
)


class ClienteTexto(Protocol):
    async def gerar_texto(self, prompt: str) -> str: ...


def montar_payload(produtos: Iterable[Produto]) -> List[Dict[str, Any]]:
    return [
        {"name": p.name, "quantity": p.quantity, "minThreshold": p.min_threshold, "price": p.price}
        for p in produtos
    ]


def montar_prompt(produtos: Iterable[Produto]) -> str:
    return PROMPT.format(dados=json.dumps(montar_payload(produtos), ensure_ascii=False))


async def gerar_insights(produtos: Iterable[Produto], cliente: Optional[ClienteTexto] = None) -> str:
    """Pede a análise ao serviço externo; devolve o texto ou a mensagem padrão."""
    produtos = list(produtos)
    if cliente is None:
        from loja.adapters.gemini import ClienteGemini
        cliente = ClienteGemini()

    log_system_event("insights_start", {"produtos": len(produtos)})
    try:
        texto = await cliente.gerar_texto(montar_prompt(produtos))
    except Exception as e:
        log_system_event("insights_error", {"error": str(e)}, level="warning")
        return MSG_ERRO
    if not texto:
        return MSG_SEM_RESPOSTA
    log_system_event("insights_success", {"caracteres": len(texto)})
    return texto


class PainelInsights:
    """Estado transitório da tela de insights (última requisição vence)."""

    def __init__(self, cliente: Optional[ClienteTexto] = None):
        self.cliente = cliente
        self.texto = ""
        self.carregando = False
        self._ultima = 0

    async def atualizar(self, produtos: Iterable[Produto]) -> Optional[str]:
        """Dispara uma nova análise.

        Returns:
            O texto exibido, ou ``None`` se uma requisição mais nova foi
            disparada enquanto esta aguardava (resposta descartada).
        """
        self._ultima += 1
        minha = self._ultima
        self.carregando = True
        texto = await gerar_insights(list(produtos), self.cliente)
        if minha != self._ultima:
            log_system_event("insights_descartado", {"requisicao": minha, "atual": self._ultima})
            return None
        self.texto = texto
        self.carregando = False
        return texto
