import pytest

from loja.config import DEFAULTS
from loja.domain.models import EstadoLoja, ItemPedido, Pedido, Produto
from loja.usecases.estoque import (
    atualizar_estoque,
    cadastrar_produto,
    editar_produto,
    entrada_estoque,
    importar_produtos,
    remover_produto,
    saida_estoque,
)


def _seed_estado():
    return EstadoLoja(produtos=[Produto(id="P1", sku="SKU-1", name="Cimento", quantity=10, min_threshold=3, price=100.0)])


def test_atualizar_estoque_deriva_movimentacao():
    estado = _seed_estado()
    mov = atualizar_estoque(estado, "P1", 4)
    assert (mov.type, mov.quantity) == ("OUT", 6)
    assert mov.user == DEFAULTS.usuario_padrao
    assert estado.produto("P1").quantity == 4

    assert atualizar_estoque(estado, "P1", 4) is None
    mov = atualizar_estoque(estado, "P1", 9, usuario="Ana")
    assert (mov.type, mov.quantity, mov.user) == ("IN", 5, "Ana")
    assert len(estado.movimentacoes) == 2


def test_atualizar_estoque_invalido():
    estado = _seed_estado()
    with pytest.raises(ValueError):
        atualizar_estoque(estado, "P1", -1)
    with pytest.raises(ValueError):
        atualizar_estoque(estado, "NAO", 1)
    assert estado.movimentacoes == []


def test_entrada_e_saida_unitaria():
    estado = _seed_estado()
    entrada_estoque(estado, "P1")
    assert estado.produto("P1").quantity == 11
    saida_estoque(estado, "P1", 20)
    assert estado.produto("P1").quantity == 0
    assert [m.type for m in estado.movimentacoes] == ["OUT", "IN"]
    assert saida_estoque(estado, "P1") is None


def test_cadastrar_produto_com_padroes_e_estoque_inicial():
    estado = EstadoLoja()
    p = cadastrar_produto(estado, "Areia", quantity=7, price=12.5)
    assert p.sku.startswith("SKU-")
    assert p.category == DEFAULTS.categoria_padrao
    assert p.supplier == DEFAULTS.fornecedor_padrao
    assert p.min_threshold == DEFAULTS.limiar_minimo_padrao
    assert p.quantity == 7
    assert [(m.type, m.quantity) for m in estado.movimentacoes] == [("IN", 7)]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"name": ""},
        {"name": "X", "price": -1},
        {"name": "X", "min_threshold": -1},
        {"name": "X", "quantity": -2},
        {"name": "X", "product_id": "P1"},
    ],
)
def test_cadastrar_produto_invalido(kwargs):
    estado = _seed_estado()
    with pytest.raises(ValueError):
        cadastrar_produto(estado, **kwargs)
    assert len(estado.produtos) == 1


def test_editar_produto():
    estado = _seed_estado()
    editar_produto(estado, "P1", name="Cimento CPII", price=120.0, quantity=15)
    p = estado.produto("P1")
    assert (p.name, p.price, p.quantity) == ("Cimento CPII", 120.0, 15)
    assert [(m.type, m.quantity) for m in estado.movimentacoes] == [("IN", 5)]


def test_editar_produto_invalido_nao_altera():
    estado = _seed_estado()
    with pytest.raises(ValueError):
        editar_produto(estado, "P1", name="Outro", quantity=-1)
    assert estado.produto("P1").name == "Cimento"
    with pytest.raises(ValueError):
        editar_produto(estado, "P1", cor="azul")


def test_remover_produto_bloqueado_por_pedido():
    estado = _seed_estado()
    estado.pedidos.append(Pedido(id="ORD-1", client_id="CL-1", items=[ItemPedido("P1", 1, 100.0)], total_amount=100.0))
    with pytest.raises(ValueError):
        remover_produto(estado, "P1")
    remover_produto(estado, "P1", forcar=True)
    assert estado.produtos == []
    assert estado.nome_produto("P1") == "Produto desconhecido"


def test_importar_produtos_casa_por_sku():
    estado = _seed_estado()
    linhas = [
        {"sku": "SKU-1", "name": "Cimento", "quantity": 12, "price": 110.0},
        {"sku": "SKU-2", "name": "Areia", "quantity": 4, "price": 20.0, "category": "Agregados"},
        {"sku": "SKU-3", "name": None, "quantity": 1},
        {"sku": "SKU-4", "name": "Brita", "quantity": "muitos"},
    ]
    info = importar_produtos(estado, linhas)
    assert info["total"] == 4
    assert info["inseridos"] == 1
    assert info["atualizados"] == 1
    assert [e["linha"] for e in info["erros"]] == [3, 4]
    assert estado.produto("P1").quantity == 12
    assert {p.sku for p in estado.produtos} == {"SKU-1", "SKU-2"}


def test_importar_produtos_substituir():
    estado = _seed_estado()
    estado.produtos.append(Produto(id="P9", sku="SKU-9", name="Velho"))
    info = importar_produtos(estado, [{"sku": "SKU-1", "name": "Cimento", "quantity": 10}], substituir=True)
    assert info["removidos"] == 1
    assert [p.id for p in estado.produtos] == ["P1"]
