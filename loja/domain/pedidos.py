"""
Montagem de carrinho, criação de pedidos e geração de entregas.

Funções puras: recebem os registros necessários e devolvem novos objetos
(ou alteram apenas o carrinho recebido). Baixa de estoque, gravação e log
ficam nos casos de uso.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from loja.config import DEFAULTS
from loja.domain.models import Entrega, ItemPedido, Pedido, Produto
from loja.domain.policies import arredonda_valor, novo_id


def adicionar_ao_carrinho(carrinho: List[ItemPedido], produto: Produto, quantidade: int = 1) -> bool:
    """Adiciona ``quantidade`` unidades de ``produto`` ao carrinho.

    Regras:
        - produto sem estoque não entra;
        - um produto ocupa no máximo uma linha (repetições somam quantidade);
        - a quantidade total da linha não pode passar do estoque disponível
          (conferida de novo em ``usecases.vendas.registrar_pedido``);
        - o preço unitário é congelado na primeira inclusão.

    Returns:
        ``True`` se o carrinho foi alterado.
    """
    if quantidade <= 0 or produto.quantity <= 0:
        return False
    for item in carrinho:
        if item.product_id == produto.id:
            if item.quantity + quantidade > produto.quantity:
                return False
            item.quantity += quantidade
            return True
    if quantidade > produto.quantity:
        return False
    carrinho.append(ItemPedido(product_id=produto.id, quantity=quantidade, unit_price=produto.price))
    return True


def criar_pedido(
    client_id: str,
    carrinho: Iterable[ItemPedido],
    pedido_id: Optional[str] = None,
    data: Optional[str] = None,
) -> Pedido:
    """Cria um pedido não pago a partir do carrinho.

    Cada linha vira um ``ItemPedido`` com ``paid_amount = 0``; o total é a
    soma de quantidade x preço unitário e não muda mais.

    Raises:
        ValueError: cliente não informado, carrinho vazio, quantidade
            não positiva ou produto repetido.
    """
    if not client_id:
        raise ValueError("Selecione um cliente para o pedido.")
    itens: List[ItemPedido] = []
    vistos = set()
    for linha in carrinho:
        if linha.quantity <= 0:
            raise ValueError(f"Quantidade inválida para {linha.product_id}: {linha.quantity}")
        if linha.product_id in vistos:
            raise ValueError(f"Produto repetido no carrinho: {linha.product_id}")
        vistos.add(linha.product_id)
        itens.append(ItemPedido(product_id=linha.product_id, quantity=int(linha.quantity),
                                unit_price=float(linha.unit_price), paid_amount=0.0))
    if not itens:
        raise ValueError("Carrinho vazio.")

    total = arredonda_valor(sum(i.quantity * i.unit_price for i in itens))
    return Pedido(
        id=pedido_id or novo_id("ORD"),
        client_id=client_id,
        items=itens,
        date=data or datetime.now().isoformat(timespec="seconds"),
        total_amount=total,
        paid_amount=0.0,
        payments=[],
        schedules=[],
    )


def gerar_entrega(
    pedido: Pedido,
    entregas: Iterable[Entrega],
    agora: Optional[datetime] = None,
    entrega_id: Optional[str] = None,
) -> Entrega:
    """Gera a entrega de um pedido, com previsão em ``prazo_entrega_dias``.

    Raises:
        ValueError: o pedido já possui uma entrega.
    """
    if any(e.order_id == pedido.id for e in entregas):
        raise ValueError(f"O pedido {pedido.id} já possui uma entrega.")
    agora = agora or datetime.now()
    previsao = (agora + timedelta(days=DEFAULTS.prazo_entrega_dias)).date().isoformat()
    return Entrega(
        id=entrega_id or novo_id("DLV"),
        order_id=pedido.id,
        carrier="",
        tracking_number="",
        status="pending_shipment",
        estimated_arrival=previsao,
    )


def entrega_atrasada(entrega: Entrega, hoje: Optional[date] = None) -> bool:
    """Previsão já passou e a entrega não foi concluída."""
    if entrega.status == "delivered" or not entrega.estimated_arrival:
        return False
    try:
        previsto = date.fromisoformat(entrega.estimated_arrival[:10])
    except ValueError:
        return False
    return previsto < (hoje or date.today())
