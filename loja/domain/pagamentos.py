"""
Payment allocation for multi-line orders.

A payment tendered against an order is spread over the order lines in one
of two ways:

* automatic ("waterfall"): lines are walked in their stored order and each
  one is filled up to its remaining due before the next one receives
  anything;
* manual: the caller names an amount per product id. Amounts are clamped to
  each line's remaining due before they are applied.

After every application the order-level ``paid_amount`` grows by the
recorded payment amount and the order status (a derived property of
``Pedido``) follows. With the ``"limitar"`` overshoot policy the tendered
amount is clamped to the order balance, so ``paid_amount`` always equals the
sum of the line allocations. With ``"credito"`` the full tendered amount is
recorded and the part no line could absorb stays on the order as credit.

The functions here only touch the order they receive; persistence and
logging belong to the use case layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from loja.config import DEFAULTS, POLITICA_CREDITO, POLITICA_LIMITAR
from loja.domain.models import ItemPedido, Pagamento, Pedido
from loja.domain.policies import METODOS_PAGAMENTO, arredonda_valor, novo_id


@dataclass
class ResultadoPagamento:
    """Outcome of one payment application."""
    pagamento: Pagamento
    alocacoes: Dict[str, float] = field(default_factory=dict)
    troco: float = 0.0              # tendered but not recorded ("limitar" only)


def distribuir_automatico(itens: Iterable[ItemPedido], valor: float) -> Tuple[Dict[str, float], float]:
    """Spread ``valor`` over the lines, first line first.

    Parameters
    ----------
    itens: iterable of ItemPedido
        Order lines in their stored order.
    valor: float
        Amount to distribute.

    Returns
    -------
    tuple
        ``(alocacoes, sobra)`` where ``alocacoes`` maps product id to the
        amount given to that line (insertion ordered) and ``sobra`` is what
        no line could absorb.
    """
    restante = arredonda_valor(valor)
    alocacoes: Dict[str, float] = {}
    for item in itens:
        if restante <= 0:
            break
        devido = item.saldo
        if devido <= 0:
            continue
        aplicar = min(restante, devido)
        alocacoes[item.product_id] = aplicar
        restante = arredonda_valor(restante - aplicar)
    return alocacoes, max(0.0, restante)


def limitar_distribuicao_manual(itens: Iterable[ItemPedido], distribuicao: Mapping[str, float]) -> Dict[str, float]:
    """Clamp a manual ``{product_id: amount}`` map to what each line still owes.

    Unknown product ids and non-positive amounts are dropped. The caller's
    key order is preserved.
    """
    por_produto = {i.product_id: i for i in itens}
    out: Dict[str, float] = {}
    for product_id, valor in distribuicao.items():
        item = por_produto.get(product_id)
        if item is None:
            continue
        try:
            v = arredonda_valor(valor)
        except (TypeError, ValueError):
            continue
        v = min(v, item.saldo)
        if v > 0:
            out[product_id] = v
    return out


def _aplica_alocacoes(pedido: Pedido, alocacoes: Mapping[str, float]) -> None:
    for item in pedido.items:
        v = alocacoes.get(item.product_id)
        if v:
            item.paid_amount = arredonda_valor(item.paid_amount + v)


def aplicar_pagamento(
    pedido: Pedido,
    valor: Optional[float] = None,
    *,
    distribuicao: Optional[Mapping[str, float]] = None,
    metodo: str = METODOS_PAGAMENTO[0],
    referencia: Optional[str] = None,
    nota: Optional[str] = None,
    data: Optional[str] = None,
    politica: Optional[str] = None,
    pagamento_id: Optional[str] = None,
) -> Optional[ResultadoPagamento]:
    """Apply one payment to ``pedido`` in place.

    Parameters
    ----------
    pedido: Pedido
        Target order, mutated in place.
    valor: float, optional
        Tendered amount for the automatic mode. Ignored when
        ``distribuicao`` is given.
    distribuicao: mapping, optional
        Manual ``{product_id: amount}`` allocation. Its clamped sum is the
        payment amount.
    metodo: str
        One of ``METODOS_PAGAMENTO``.
    politica: str, optional
        ``"limitar"`` or ``"credito"``; defaults to
        ``DEFAULTS.politica_excedente``.

    Returns
    -------
    ResultadoPagamento or None
        ``None`` when there is nothing to apply (amount <= 0, nothing
        owed under "limitar", empty manual map). The order is untouched in
        that case.

    Raises
    ------
    ValueError
        Unknown payment method or overshoot policy.
    """
    if metodo not in METODOS_PAGAMENTO:
        raise ValueError(f"Método de pagamento inválido: {metodo}")
    politica = politica or DEFAULTS.politica_excedente
    if politica not in (POLITICA_LIMITAR, POLITICA_CREDITO):
        raise ValueError(f"Política de excedente inválida: {politica}")

    troco = 0.0
    if distribuicao is not None:
        alocacoes = limitar_distribuicao_manual(pedido.items, distribuicao)
        montante = arredonda_valor(sum(alocacoes.values()))
        afetados = tuple(alocacoes.keys())
    else:
        if valor is None:
            return None
        ofertado = arredonda_valor(valor)
        if ofertado <= 0:
            return None
        montante = ofertado
        if politica == POLITICA_LIMITAR:
            montante = min(ofertado, pedido.saldo)
            troco = arredonda_valor(ofertado - montante)
        alocacoes, _sobra = distribuir_automatico(pedido.items, montante)
        afetados = ()

    if montante <= 0:
        return None

    pagamento = Pagamento(
        id=pagamento_id or novo_id("PAY"),
        amount=montante,
        date=data or datetime.now().isoformat(timespec="seconds"),
        method=metodo,
        reference=referencia or None,
        note=nota or None,
        affected_product_ids=afetados,
    )
    _aplica_alocacoes(pedido, alocacoes)
    pedido.payments.append(pagamento)
    pedido.paid_amount = arredonda_valor(pedido.paid_amount + montante)
    return ResultadoPagamento(pagamento=pagamento, alocacoes=dict(alocacoes), troco=troco)


def verificar_reconciliacao(pedido: Pedido, permitir_credito: bool = False) -> List[str]:
    """List the ledger inconsistencies of an order (empty list when sound).

    Checks that every line satisfies ``0 <= paid <= total``, that the
    order-level paid amount equals the sum of line allocations (or exceeds
    it, when ``permitir_credito``) and that it matches the payment history.
    """
    problemas: List[str] = []
    for item in pedido.items:
        if item.paid_amount < 0:
            problemas.append(f"{item.product_id}: valor pago negativo")
        if item.paid_amount > item.total:
            problemas.append(f"{item.product_id}: pago {item.paid_amount} acima do total {item.total}")

    linhas = pedido.pago_em_linhas
    pago = arredonda_valor(pedido.paid_amount)
    if permitir_credito:
        if pago < linhas:
            problemas.append(f"pedido {pedido.id}: pago {pago} abaixo da soma das linhas {linhas}")
    elif pago != linhas:
        problemas.append(f"pedido {pedido.id}: pago {pago} difere da soma das linhas {linhas}")

    historico = arredonda_valor(sum(p.amount for p in pedido.payments))
    if historico != pago:
        problemas.append(f"pedido {pedido.id}: histórico {historico} difere do pago {pago}")
    return problemas
