import pytest

from loja.domain.models import ItemPedido, Pedido
from loja.domain.pagamentos import (
    aplicar_pagamento,
    distribuir_automatico,
    limitar_distribuicao_manual,
    verificar_reconciliacao,
)


def _pedido(*totais):
    """Pedido com uma linha por total (P1, P2, ...), quantidade 1."""
    itens = [ItemPedido(product_id=f"P{n}", quantity=1, unit_price=float(t)) for n, t in enumerate(totais, start=1)]
    return Pedido(id="ORD-TESTE", client_id="CL-1", items=itens, total_amount=float(sum(totais)))


def test_distribuicao_automatica_em_cascata():
    pedido = _pedido(100, 50)
    res = aplicar_pagamento(pedido, 120, metodo="Espèces")
    assert res is not None
    assert [i.paid_amount for i in pedido.items] == [100.0, 20.0]
    assert pedido.paid_amount == 120.0
    assert pedido.status == "partially_paid"
    assert res.pagamento.amount == 120.0
    assert res.pagamento.affected_product_ids == ()
    assert res.alocacoes == {"P1": 100.0, "P2": 20.0}
    assert verificar_reconciliacao(pedido) == []


def test_cascata_pula_linhas_quitadas():
    pedido = _pedido(100, 50, 30)
    pedido.items[0].paid_amount = 100.0
    pedido.paid_amount = 100.0
    alocacoes, sobra = distribuir_automatico(pedido.items, 60)
    assert alocacoes == {"P2": 50.0, "P3": 10.0}
    assert sobra == 0.0


def test_distribuicao_manual():
    pedido = _pedido(100, 100)
    res = aplicar_pagamento(pedido, distribuicao={"P1": 30, "P2": 70}, metodo="Wave Money")
    assert res.pagamento.amount == 100.0
    assert res.pagamento.affected_product_ids == ("P1", "P2")
    assert [i.paid_amount for i in pedido.items] == [30.0, 70.0]
    assert pedido.paid_amount == 100.0
    assert pedido.status == "partially_paid"


def test_distribuicao_manual_mantem_ordem_do_chamador():
    pedido = _pedido(100, 100)
    res = aplicar_pagamento(pedido, distribuicao={"P2": 10, "P1": 5})
    assert res.pagamento.affected_product_ids == ("P2", "P1")


def test_distribuicao_manual_limitada_ao_devido():
    pedido = _pedido(100, 50)
    assert limitar_distribuicao_manual(pedido.items, {"P1": 500, "P2": 0, "X": 10}) == {"P1": 100.0}
    res = aplicar_pagamento(pedido, distribuicao={"P1": 500, "X": 10})
    assert res.pagamento.amount == 100.0
    assert pedido.items[0].paid_amount == 100.0
    assert verificar_reconciliacao(pedido) == []


def test_distribuicao_manual_vazia_nao_faz_nada():
    pedido = _pedido(100)
    assert aplicar_pagamento(pedido, distribuicao={"X": 10}) is None
    assert pedido.payments == []
    assert pedido.paid_amount == 0.0


def test_excedente_limitado_vira_troco():
    pedido = _pedido(100, 50)
    res = aplicar_pagamento(pedido, 200, politica="limitar")
    assert res.pagamento.amount == 150.0
    assert res.troco == 50.0
    assert pedido.paid_amount == 150.0
    assert pedido.status == "paid"
    assert pedido.credito == 0.0
    assert verificar_reconciliacao(pedido) == []


def test_excedente_como_credito():
    pedido = _pedido(100, 50)
    res = aplicar_pagamento(pedido, 200, politica="credito")
    assert res.pagamento.amount == 200.0
    assert res.troco == 0.0
    assert [i.paid_amount for i in pedido.items] == [100.0, 50.0]
    assert pedido.paid_amount == 200.0
    assert pedido.credito == 50.0
    assert pedido.status == "paid"
    assert verificar_reconciliacao(pedido, permitir_credito=True) == []
    assert verificar_reconciliacao(pedido) != []


def test_pedido_quitado_nao_aceita_mais_pagamento_limitado():
    pedido = _pedido(100)
    aplicar_pagamento(pedido, 100)
    assert aplicar_pagamento(pedido, 10, politica="limitar") is None
    assert len(pedido.payments) == 1


@pytest.mark.parametrize("valor", [0, -5, None])
def test_valor_nao_positivo_nao_faz_nada(valor):
    pedido = _pedido(100, 50)
    assert aplicar_pagamento(pedido, valor) is None
    assert pedido.paid_amount == 0.0
    assert pedido.payments == []
    assert all(i.paid_amount == 0.0 for i in pedido.items)
    assert pedido.status == "unpaid"


def test_metodo_invalido():
    pedido = _pedido(100)
    with pytest.raises(ValueError):
        aplicar_pagamento(pedido, 10, metodo="Bitcoin")
    assert pedido.payments == []


def test_politica_invalida():
    with pytest.raises(ValueError):
        aplicar_pagamento(_pedido(100), 10, politica="perdoar")


def test_sequencia_de_pagamentos_mantem_invariantes():
    pedido = _pedido(33.33, 66.67, 10)
    for valor in (10, 25.5, 0.01, 40, 100):
        aplicar_pagamento(pedido, valor)
        assert verificar_reconciliacao(pedido) == []
        for item in pedido.items:
            assert 0 <= item.paid_amount <= item.total
    assert pedido.status == "paid"
    assert pedido.saldo == 0.0
    assert round(sum(p.amount for p in pedido.payments), 2) == pedido.paid_amount == 110.0


def test_status_acompanha_pagamentos():
    pedido = _pedido(100)
    assert pedido.status == "unpaid"
    aplicar_pagamento(pedido, 40)
    assert pedido.status == "partially_paid"
    aplicar_pagamento(pedido, 60)
    assert pedido.status == "paid"


def test_reconciliacao_detecta_linha_acima_do_total():
    pedido = _pedido(100)
    pedido.items[0].paid_amount = 120.0
    pedido.paid_amount = 120.0
    problemas = verificar_reconciliacao(pedido)
    assert any("acima do total" in p for p in problemas)
