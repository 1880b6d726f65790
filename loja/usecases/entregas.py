"""
UC: Entregas.

- gerar_entrega(): cria a entrega de um pedido (no máximo uma por pedido).
- atualizar_entrega(): edição livre dos campos logísticos.
- listar_entregas(): filtro por status e busca textual, com flag de atraso.

O status da entrega não altera o status do pedido (nem o contrário).
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from loja.domain import pedidos as regras
from loja.domain.models import Entrega, EstadoLoja
from loja.domain.policies import STATUS_ENTREGA, STATUS_ENTREGA_ATIVOS
from loja.infra.logger import log_system_event, log_transaction


CAMPOS_ENTREGA = ("carrier", "tracking_number", "status", "estimated_arrival",
                  "actual_arrival", "shipped_date", "notes")


def gerar_entrega(estado: EstadoLoja, order_id: str, agora: Optional[datetime] = None) -> Entrega:
    pedido = estado.pedido(order_id)
    if pedido is None:
        raise ValueError(f"Pedido não encontrado: {order_id}")
    entrega = regras.gerar_entrega(pedido, estado.entregas, agora=agora)
    estado.entregas.insert(0, entrega)
    log_transaction("gerar_entrega", {"pedido": order_id}, result={"id": entrega.id})
    return entrega


def _valida_data(campo: str, valor: str) -> None:
    try:
        date.fromisoformat(valor[:10])
    except ValueError:
        raise ValueError(f"Data inválida em {campo}: {valor} (use YYYY-MM-DD)")


def atualizar_entrega(estado: EstadoLoja, delivery_id: str, **campos: Any) -> Entrega:
    entrega = estado.entrega(delivery_id)
    if entrega is None:
        raise ValueError(f"Entrega não encontrada: {delivery_id}")
    desconhecidos = set(campos) - set(CAMPOS_ENTREGA)
    if desconhecidos:
        raise ValueError(f"Campos não editáveis: {', '.join(sorted(desconhecidos))}")
    if campos.get("status") is not None and campos["status"] not in STATUS_ENTREGA:
        raise ValueError(f"Status de entrega inválido: {campos['status']}")
    for campo in ("estimated_arrival", "actual_arrival", "shipped_date"):
        if campos.get(campo):
            _valida_data(campo, str(campos[campo]))

    for chave, valor in campos.items():
        if valor is not None:
            setattr(entrega, chave, str(valor).strip())
    log_system_event("entrega_atualizada", {"id": delivery_id, "campos": sorted(k for k, v in campos.items() if v is not None)})
    return entrega


def listar_entregas(
    estado: EstadoLoja,
    status: Optional[str] = None,
    busca: Optional[str] = None,
    hoje: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """Lista entregas (mais recentes primeiro) com cliente resolvido e flag de atraso."""
    if status and status != "all" and status not in STATUS_ENTREGA:
        raise ValueError(f"Status de entrega inválido: {status}")
    termo = (busca or "").strip().lower()
    out: List[Dict[str, Any]] = []
    for e in estado.entregas:
        if status and status != "all" and e.status != status:
            continue
        pedido = estado.pedido(e.order_id)
        cliente = estado.nome_cliente(pedido.client_id) if pedido else estado.nome_cliente("")
        if termo and not any(termo in s.lower() for s in (e.id, e.order_id, cliente, e.tracking_number)):
            continue
        out.append({
            "id": e.id,
            "pedido": e.order_id,
            "cliente": cliente,
            "status": e.status,
            "transportadora": e.carrier,
            "rastreio": e.tracking_number,
            "previsao": e.estimated_arrival,
            "atrasada": regras.entrega_atrasada(e, hoje),
        })
    return out


def entregas_ativas(estado: EstadoLoja) -> int:
    return sum(1 for e in estado.entregas if e.status in STATUS_ENTREGA_ATIVOS)
