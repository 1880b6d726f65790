"""
UC: Pedidos e pagamentos.

- registrar_pedido(): ponto de entrada único para incluir OU atualizar um
  pedido (mesmo id = substituição no lugar). Na inclusão baixa o estoque de
  cada linha, gerando uma movimentação OUT por linha.
- montar_carrinho() / criar_pedido_do_carrinho(): monta o carrinho com as
  checagens de disponibilidade e registra o pedido.
- registrar_pagamento(): aplica um pagamento (automático ou manual) sobre uma
  cópia do pedido, confere a reconciliação e grava pelo mesmo ponto de entrada.
"""

from __future__ import annotations

import copy
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from loja.config import DEFAULTS, POLITICA_CREDITO
from loja.domain.models import EstadoLoja, ItemPedido, Pedido
from loja.domain.pagamentos import ResultadoPagamento, aplicar_pagamento, verificar_reconciliacao
from loja.domain.pedidos import adicionar_ao_carrinho, criar_pedido
from loja.domain.policies import METODOS_PAGAMENTO
from loja.infra.logger import (
    log_pagamento, log_pedido, log_system_event, log_transaction
)
from loja.usecases.estoque import atualizar_estoque


def _conferir_estoque(estado: EstadoLoja, pedido: Pedido) -> None:
    """Recusa o pedido se alguma linha pede mais do que há na prateleira.

    O carrinho pode ter sido montado com um estoque que já mudou; a
    conferência é refeita aqui, antes de qualquer baixa.
    """
    faltas = []
    for item in pedido.items:
        produto = estado.produto(item.product_id)
        if produto is None:
            raise ValueError(f"Produto não encontrado: {item.product_id}")
        if item.quantity > produto.quantity:
            faltas.append(f"{produto.name} (pedido {item.quantity}, disponível {produto.quantity})")
    if faltas:
        log_system_event("estoque_insuficiente", {"pedido": pedido.id, "faltas": faltas}, level="warning")
        raise ValueError("Estoque insuficiente para " + "; ".join(faltas))


def _baixar_estoque(estado: EstadoLoja, pedido: Pedido, usuario: Optional[str]) -> None:
    for item in pedido.items:
        produto = estado.produto(item.product_id)
        atualizar_estoque(estado, item.product_id, produto.quantity - item.quantity, usuario, f"pedido {pedido.id}")


def registrar_pedido(estado: EstadoLoja, pedido: Pedido, usuario: Optional[str] = None) -> str:
    """Inclui ou substitui um pedido.

    Pedidos novos entram no início da lista (mais recentes primeiro) e
    baixam o estoque com uma movimentação OUT da quantidade cheia de cada
    linha.

    Returns:
        ``"criado"`` ou ``"atualizado"``.

    Raises:
        ValueError: na inclusão, produto inexistente ou estoque menor que a
            quantidade de alguma linha (nada é baixado).
    """
    for i, existente in enumerate(estado.pedidos):
        if existente.id == pedido.id:
            estado.pedidos[i] = pedido
            log_pedido("update", pedido.id, status=pedido.status, pago=pedido.paid_amount)
            return "atualizado"

    _conferir_estoque(estado, pedido)
    _baixar_estoque(estado, pedido, usuario)
    estado.pedidos.insert(0, pedido)
    log_pedido("create", pedido.id, cliente=pedido.client_id, total=pedido.total_amount,
               linhas=len(pedido.items))
    return "criado"


def montar_carrinho(estado: EstadoLoja, entradas: Sequence[Tuple[str, int]]) -> List[ItemPedido]:
    """Monta o carrinho a partir de pares (produto, quantidade).

    Raises:
        ValueError: produto inexistente ou sem estoque suficiente.
    """
    carrinho: List[ItemPedido] = []
    for product_id, quantidade in entradas:
        produto = estado.produto(product_id)
        if produto is None:
            raise ValueError(f"Produto não encontrado: {product_id}")
        if int(quantidade) <= 0:
            raise ValueError(f"Quantidade inválida para {product_id}: {quantidade}")
        if not adicionar_ao_carrinho(carrinho, produto, int(quantidade)):
            raise ValueError(
                f"Estoque insuficiente para {produto.name}: disponível {produto.quantity}"
            )
    return carrinho


def criar_pedido_do_carrinho(
    estado: EstadoLoja,
    client_id: str,
    carrinho: Iterable[ItemPedido],
    usuario: Optional[str] = None,
    pedido_id: Optional[str] = None,
) -> Pedido:
    log_system_event("criar_pedido_start", {"cliente": client_id})
    try:
        pedido = criar_pedido(client_id, list(carrinho), pedido_id=pedido_id)
        if estado.pedido(pedido.id) is not None:
            raise ValueError(f"Já existe pedido com id {pedido.id}.")
        registrar_pedido(estado, pedido, usuario)
    except ValueError as e:
        log_transaction("criar_pedido", {"cliente": client_id}, error=str(e))
        raise
    log_transaction("criar_pedido", {"cliente": client_id}, result={"id": pedido.id, "total": pedido.total_amount})
    return pedido


def registrar_pagamento(
    estado: EstadoLoja,
    order_id: str,
    valor: Optional[float] = None,
    *,
    distribuicao: Optional[Mapping[str, float]] = None,
    metodo: str = METODOS_PAGAMENTO[0],
    referencia: Optional[str] = None,
    nota: Optional[str] = None,
    politica: Optional[str] = None,
) -> Optional[ResultadoPagamento]:
    """Aplica um pagamento ao pedido ``order_id``.

    Returns:
        O resultado da aplicação, ou ``None`` se nada foi aplicado (valor
        não positivo, pedido quitado, distribuição vazia).

    Raises:
        ValueError: pedido inexistente, método inválido ou reconciliação
            quebrada (o estado fica como estava).
    """
    atual = estado.pedido(order_id)
    if atual is None:
        raise ValueError(f"Pedido não encontrado: {order_id}")

    politica = politica or DEFAULTS.politica_excedente
    pedido = copy.deepcopy(atual)
    resultado = aplicar_pagamento(
        pedido, valor, distribuicao=distribuicao, metodo=metodo,
        referencia=referencia, nota=nota, politica=politica,
    )
    if resultado is None:
        log_pagamento("rejected", order_id, valor if valor is not None else 0.0,
                      modo="manual" if distribuicao is not None else "auto")
        return None

    problemas = verificar_reconciliacao(pedido, permitir_credito=(politica == POLITICA_CREDITO))
    if problemas:
        log_system_event("reconciliacao_falhou", {"pedido": order_id, "problemas": problemas}, level="error")
        raise ValueError("Pagamento não aplicado: " + "; ".join(problemas))

    registrar_pedido(estado, pedido)
    log_pagamento("applied", order_id, resultado.pagamento.amount,
                  metodo=metodo, alocacoes=resultado.alocacoes, troco=resultado.troco,
                  status=pedido.status)
    return resultado
