# loja/usecases/relatorios.py
"""
Relatórios e visões de leitura:
- estatísticas do painel (valor em estoque, itens, baixo estoque, esgotados)
- inventário filtrado/ordenado
- dívida por cliente
- diário de movimentações (listagem + totais IN/OUT)
- pedidos (listagem) e fatura de um pedido

Nenhuma função aqui altera o estado.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from loja.domain.models import EstadoLoja
from loja.domain.policies import (
    TIPO_ENTRADA,
    TIPO_SAIDA,
    arredonda_valor,
    status_estoque,
)
from loja.infra.logger import log_system_event
from loja.usecases.entregas import entregas_ativas


FILTROS_ESTOQUE = ("all", "low", "out")
ORDENACOES_ESTOQUE = ("name", "quantity", "price")


# ----------------------
# 1) Painel
# ----------------------

def estatisticas_estoque(estado: EstadoLoja) -> Dict[str, Any]:
    """totalValue, totalItems, lowStockCount, outOfStockCount."""
    return {
        "totalValue": arredonda_valor(sum(p.price * p.quantity for p in estado.produtos)),
        "totalItems": sum(p.quantity for p in estado.produtos),
        "lowStockCount": sum(1 for p in estado.produtos if 0 < p.quantity <= p.min_threshold),
        "outOfStockCount": sum(1 for p in estado.produtos if p.quantity <= 0),
    }


def resumo_painel(estado: EstadoLoja) -> Dict[str, Any]:
    stats = estatisticas_estoque(estado)
    stats["activeDeliveries"] = entregas_ativas(estado)
    stats["totalDebt"] = divida_total(estado)
    stats["totalOrders"] = len(estado.pedidos)
    return stats


# ----------------------
# 2) Inventário
# ----------------------

def listar_produtos(
    estado: EstadoLoja,
    filtro: str = "all",
    ordenar: str = "name",
    desc: bool = False,
) -> List[Dict[str, Any]]:
    """
    filtro:
        - all: todos
        - low: 0 < quantidade <= limiar
        - out: quantidade <= 0
    ordenar: name | quantity | price (nome sem diferenciar maiúsculas).
    """
    if filtro not in FILTROS_ESTOQUE:
        raise ValueError(f"Filtro inválido: {filtro} (use {', '.join(FILTROS_ESTOQUE)})")
    if ordenar not in ORDENACOES_ESTOQUE:
        raise ValueError(f"Ordenação inválida: {ordenar} (use {', '.join(ORDENACOES_ESTOQUE)})")

    produtos = estado.produtos
    if filtro == "low":
        produtos = [p for p in produtos if 0 < p.quantity <= p.min_threshold]
    elif filtro == "out":
        produtos = [p for p in produtos if p.quantity <= 0]

    if ordenar == "name":
        chave = lambda p: p.name.lower()
    elif ordenar == "quantity":
        chave = lambda p: p.quantity
    else:
        chave = lambda p: p.price
    produtos = sorted(produtos, key=chave, reverse=desc)

    return [
        {
            "id": p.id,
            "sku": p.sku,
            "nome": p.name,
            "categoria": p.category,
            "quantidade": p.quantity,
            "limiar": p.min_threshold,
            "preco": p.price,
            "fornecedor": p.supplier,
            "status": status_estoque(p.quantity, p.min_threshold),
        }
        for p in produtos
    ]


# ----------------------
# 3) Clientes
# ----------------------

def estatisticas_clientes(estado: EstadoLoja) -> List[Dict[str, Any]]:
    """Por cliente: debt (soma de total - pago), paidCount e totalOrders."""
    out: List[Dict[str, Any]] = []
    for c in estado.clientes:
        pedidos = [o for o in estado.pedidos if o.client_id == c.id]
        out.append({
            "id": c.id,
            "nome": c.name,
            "telefone": c.phone,
            "empresa": c.company or "",
            "debt": arredonda_valor(sum(o.total_amount - o.paid_amount for o in pedidos)),
            "paidCount": sum(1 for o in pedidos if o.status == "paid"),
            "totalOrders": len(pedidos),
        })
    return out


def divida_total(estado: EstadoLoja) -> float:
    return arredonda_valor(sum(o.saldo for o in estado.pedidos))


# ----------------------
# 4) Movimentações
# ----------------------

def listar_movimentacoes(
    estado: EstadoLoja,
    tipo: Optional[str] = None,
    product_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    if tipo and tipo not in (TIPO_ENTRADA, TIPO_SAIDA):
        raise ValueError(f"Tipo inválido: {tipo} (use IN ou OUT)")
    out: List[Dict[str, Any]] = []
    for m in estado.movimentacoes:
        if tipo and m.type != tipo:
            continue
        if product_id and m.product_id != product_id:
            continue
        out.append({
            "id": m.id,
            "data": m.date,
            "produto": estado.nome_produto(m.product_id),
            "product_id": m.product_id,
            "tipo": m.type,
            "quantidade": m.quantity,
            "usuario": m.user,
        })
    return out


def totais_movimentacoes(estado: EstadoLoja) -> Dict[str, int]:
    return {
        TIPO_ENTRADA: sum(m.quantity for m in estado.movimentacoes if m.type == TIPO_ENTRADA),
        TIPO_SAIDA: sum(m.quantity for m in estado.movimentacoes if m.type == TIPO_SAIDA),
    }


# ----------------------
# 5) Pedidos e fatura
# ----------------------

def listar_pedidos(estado: EstadoLoja, status: Optional[str] = None) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for o in estado.pedidos:
        if status and o.status != status:
            continue
        out.append({
            "id": o.id,
            "data": o.date[:10],
            "cliente": estado.nome_cliente(o.client_id),
            "itens": len(o.items),
            "total": o.total_amount,
            "pago": o.paid_amount,
            "saldo": o.saldo,
            "status": o.status,
        })
    return out


def fatura_pedido(estado: EstadoLoja, order_id: str) -> Dict[str, Any]:
    """Visão de fatura de um pedido (linhas, totais e histórico de pagamentos).

    Raises:
        ValueError: pedido inexistente.
    """
    pedido = estado.pedido(order_id)
    if pedido is None:
        raise ValueError(f"Pedido não encontrado: {order_id}")

    cliente = estado.cliente(pedido.client_id)
    linhas = [
        {
            "product_id": it.product_id,
            "produto": estado.nome_produto(it.product_id),
            "quantidade": it.quantity,
            "preco_unitario": it.unit_price,
            "total": it.total,
            "pago": it.paid_amount,
            "devido": it.saldo,
        }
        for it in pedido.items
    ]
    pagamentos = [
        {
            "id": p.id,
            "data": p.date,
            "metodo": p.method,
            "valor": p.amount,
            "referencia": p.reference or "",
            "produtos": [estado.nome_produto(pid) for pid in p.affected_product_ids],
        }
        for p in pedido.payments
    ]
    log_system_event("fatura_consultada", {"pedido": order_id, "credito": pedido.credito})
    return {
        "id": pedido.id,
        "data": pedido.date,
        "status": pedido.status,
        "cliente": estado.nome_cliente(pedido.client_id),
        "cliente_telefone": cliente.phone if cliente else "",
        "cliente_endereco": cliente.address if cliente else "",
        "loja": estado.config.name,
        "linhas": linhas,
        "total": pedido.total_amount,
        "pago": pedido.paid_amount,
        "saldo": pedido.saldo,
        "credito": pedido.credito,
        "pagamentos": pagamentos,
    }
