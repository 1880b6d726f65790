"""
Políticas e regras puras do razão de vendas e do estoque.

Este módulo contém funções que encapsulam regras de negócio de
classificação de status (pagamento e nível de estoque), a derivação de
movimentações a partir de ajustes de quantidade e pequenos utilitários de
arredondamento e identificação. Nenhuma função aqui altera estado externo.
"""

from __future__ import annotations

import re
import uuid
from typing import Optional, Tuple


# Status de pedido. Apenas os três últimos são produzidos pelo cálculo de pagamento.
STATUS_PEDIDO = ("draft", "confirmed", "shipped", "paid", "partially_paid", "unpaid")

STATUS_ENTREGA = ("preparing", "pending_shipment", "shipped", "delivered", "cancelled")
STATUS_ENTREGA_ATIVOS = ("preparing", "pending_shipment")

METODOS_PAGAMENTO = (
    "Orange Money",
    "MTN Money",
    "Moov Money",
    "Wave Money",
    "Virement Bancaire",
    "Transfert Bancaire",
    "Espèces",
)

TIPO_ENTRADA = "IN"
TIPO_SAIDA = "OUT"

# Rótulos usados quando uma referência aponta para um registro inexistente
PRODUTO_DESCONHECIDO = "Produto desconhecido"
CLIENTE_DESCONHECIDO = "Cliente desconhecido"


def arredonda_valor(x: float) -> float:
    """Arredonda um valor monetário para 2 casas decimais."""
    return round(float(x), 2)


def status_pagamento(pago: float, total: float) -> str:
    """Deriva o status de um pedido a partir do valor pago e do total.

    Regras:
        - ``pago >= total`` → ``'paid'``
        - ``0 < pago < total`` → ``'partially_paid'``
        - ``pago == 0`` → ``'unpaid'``

    Um pedido de total zero sem pagamento é ``'unpaid'`` (acabou de ser criado).
    """
    pago = arredonda_valor(pago)
    total = arredonda_valor(total)
    if pago <= 0:
        return "unpaid"
    if pago >= total:
        return "paid"
    return "partially_paid"


def derivar_movimentacao(qtd_anterior: int, qtd_nova: int) -> Optional[Tuple[str, int]]:
    """Deriva (tipo, quantidade) de uma mudança de quantidade de produto.

    ``IN`` se a nova quantidade for maior, ``OUT`` se for menor; a
    quantidade é o valor absoluto da diferença. Diferença zero não gera
    movimentação e retorna ``None``.
    """
    delta = int(qtd_nova) - int(qtd_anterior)
    if delta == 0:
        return None
    return (TIPO_ENTRADA if delta > 0 else TIPO_SAIDA, abs(delta))


def status_estoque(quantidade: int, limiar: int) -> str:
    """Classifica o nível de estoque: ``'ESGOTADO'``, ``'BAIXO'`` ou ``'OK'``."""
    if quantidade <= 0:
        return "ESGOTADO"
    if quantidade <= limiar:
        return "BAIXO"
    return "OK"


def pin_valido(pin: Optional[str]) -> bool:
    """O PIN da configuração tem exatamente 4 dígitos."""
    return pin is not None and re.fullmatch(r"[0-9]{4}", pin) is not None


def novo_id(prefixo: str) -> str:
    """Gera um identificador curto, ex.: ``ORD-3F9A1C``."""
    return f"{prefixo}-{uuid.uuid4().hex[:6].upper()}"
