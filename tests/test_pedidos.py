from datetime import date, datetime

import pytest

from loja.domain.models import Entrega, ItemPedido, Pedido, Produto
from loja.domain.pedidos import adicionar_ao_carrinho, criar_pedido, entrega_atrasada, gerar_entrega


def _produto(pid="P1", qtd=5, preco=10.0):
    return Produto(id=pid, sku=f"SKU-{pid}", name=f"Produto {pid}", quantity=qtd, price=preco)


def test_carrinho_soma_repeticoes_e_congela_preco():
    carrinho = []
    p = _produto(qtd=5, preco=10.0)
    assert adicionar_ao_carrinho(carrinho, p, 2)
    p.price = 99.0
    assert adicionar_ao_carrinho(carrinho, p, 1)
    assert len(carrinho) == 1
    assert carrinho[0].quantity == 3
    assert carrinho[0].unit_price == 10.0


def test_carrinho_respeita_estoque():
    carrinho = []
    p = _produto(qtd=2)
    assert adicionar_ao_carrinho(carrinho, p, 2)
    assert not adicionar_ao_carrinho(carrinho, p, 1)
    assert carrinho[0].quantity == 2
    assert not adicionar_ao_carrinho([], _produto(qtd=0), 1)


def test_criar_pedido():
    carrinho = [ItemPedido("P1", 2, 10.0), ItemPedido("P2", 1, 5.5)]
    pedido = criar_pedido("CL-1", carrinho, pedido_id="ORD-1", data="2024-01-01T10:00:00")
    assert pedido.total_amount == 25.5
    assert pedido.paid_amount == 0.0
    assert pedido.status == "unpaid"
    assert [i.paid_amount for i in pedido.items] == [0.0, 0.0]
    assert pedido.payments == [] and pedido.schedules == []


@pytest.mark.parametrize(
    "cliente,carrinho",
    [
        ("", [ItemPedido("P1", 1, 1.0)]),
        ("CL-1", []),
        ("CL-1", [ItemPedido("P1", 0, 1.0)]),
        ("CL-1", [ItemPedido("P1", 1, 1.0), ItemPedido("P1", 2, 1.0)]),
    ],
)
def test_criar_pedido_invalido(cliente, carrinho):
    with pytest.raises(ValueError):
        criar_pedido(cliente, carrinho)


def test_gerar_entrega_previsao_e_unicidade():
    pedido = Pedido(id="ORD-1", client_id="CL-1", items=[ItemPedido("P1", 1, 1.0)], total_amount=1.0)
    e = gerar_entrega(pedido, [], agora=datetime(2024, 3, 1, 9, 0))
    assert e.order_id == "ORD-1"
    assert e.status == "pending_shipment"
    assert e.estimated_arrival == "2024-03-08"
    assert e.carrier == "" and e.tracking_number == ""
    with pytest.raises(ValueError):
        gerar_entrega(pedido, [e])


@pytest.mark.parametrize(
    "status,previsao,atrasada",
    [
        ("shipped", "2024-03-01", True),
        ("delivered", "2024-03-01", False),
        ("pending_shipment", "2024-03-10", False),
        ("pending_shipment", "", False),
        ("pending_shipment", "lixo", False),
    ],
)
def test_entrega_atrasada(status, previsao, atrasada):
    e = Entrega(id="DLV-1", order_id="ORD-1", status=status, estimated_arrival=previsao)
    assert entrega_atrasada(e, hoje=date(2024, 3, 5)) is atrasada
