from datetime import date, datetime

import pytest

from loja.domain.models import Cliente, Entrega, EstadoLoja, ItemPedido, Pedido
from loja.usecases.entregas import atualizar_entrega, entregas_ativas, gerar_entrega, listar_entregas


def _seed_estado():
    return EstadoLoja(
        clientes=[Cliente(id="CL-1", name="Kouassi", phone="0700")],
        pedidos=[
            Pedido(id="ORD-1", client_id="CL-1", items=[ItemPedido("P1", 1, 10.0)], total_amount=10.0),
            Pedido(id="ORD-2", client_id="CL-ORFAO", items=[ItemPedido("P1", 1, 10.0)], total_amount=10.0),
        ],
    )


def test_gerar_entrega_uma_por_pedido():
    estado = _seed_estado()
    e = gerar_entrega(estado, "ORD-1", agora=datetime(2024, 5, 1))
    assert e.estimated_arrival == "2024-05-08"
    assert estado.entrega_do_pedido("ORD-1") is e
    with pytest.raises(ValueError):
        gerar_entrega(estado, "ORD-1")
    with pytest.raises(ValueError):
        gerar_entrega(estado, "ORD-X")
    assert len(estado.entregas) == 1


def test_entrega_nao_altera_status_do_pedido():
    estado = _seed_estado()
    e = gerar_entrega(estado, "ORD-1")
    atualizar_entrega(estado, e.id, status="delivered", actual_arrival="2024-05-06")
    assert estado.pedido("ORD-1").status == "unpaid"


def test_atualizar_entrega_valida_status_e_datas():
    estado = _seed_estado()
    e = gerar_entrega(estado, "ORD-1")
    atualizar_entrega(estado, e.id, carrier="DHL", tracking_number=" TRK1 ", status="shipped")
    assert (e.carrier, e.tracking_number, e.status) == ("DHL", "TRK1", "shipped")
    with pytest.raises(ValueError):
        atualizar_entrega(estado, e.id, status="lost")
    with pytest.raises(ValueError):
        atualizar_entrega(estado, e.id, estimated_arrival="31/12/2024")
    with pytest.raises(ValueError):
        atualizar_entrega(estado, e.id, destino="Abidjan")
    assert e.status == "shipped"


def test_listar_entregas_filtro_busca_e_atraso():
    estado = _seed_estado()
    estado.entregas = [
        Entrega(id="DLV-2", order_id="ORD-2", status="pending_shipment", estimated_arrival="2024-02-10"),
        Entrega(id="DLV-1", order_id="ORD-1", status="shipped", tracking_number="TRK-AB", estimated_arrival="2024-01-10"),
    ]
    hoje = date(2024, 2, 1)

    todas = listar_entregas(estado, hoje=hoje)
    assert [e["id"] for e in todas] == ["DLV-2", "DLV-1"]
    assert todas[0]["cliente"] == "Cliente desconhecido"
    assert todas[1]["atrasada"] is True
    assert todas[0]["atrasada"] is False

    assert [e["id"] for e in listar_entregas(estado, status="shipped", hoje=hoje)] == ["DLV-1"]
    assert [e["id"] for e in listar_entregas(estado, busca="trk-ab", hoje=hoje)] == ["DLV-1"]
    assert [e["id"] for e in listar_entregas(estado, busca="kouassi", hoje=hoje)] == ["DLV-1"]
    with pytest.raises(ValueError):
        listar_entregas(estado, status="perdida")

    assert entregas_ativas(estado) == 1


def test_entregas_novas_entram_no_inicio():
    estado = _seed_estado()
    gerar_entrega(estado, "ORD-1")
    gerar_entrega(estado, "ORD-2")
    assert [e.order_id for e in estado.entregas] == ["ORD-2", "ORD-1"]
    assert [e["pedido"] for e in listar_entregas(estado)] == ["ORD-2", "ORD-1"]
