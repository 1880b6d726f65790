import pytest

from loja.domain.policies import (
    arredonda_valor,
    derivar_movimentacao,
    novo_id,
    pin_valido,
    status_estoque,
    status_pagamento,
)


@pytest.mark.parametrize(
    "pago,total,esperado",
    [
        (0, 150, "unpaid"),
        (0.0, 0.0, "unpaid"),
        (50, 150, "partially_paid"),
        (149.99, 150, "partially_paid"),
        (150, 150, "paid"),
        (200, 150, "paid"),
    ],
)
def test_status_pagamento(pago, total, esperado):
    assert status_pagamento(pago, total) == esperado


@pytest.mark.parametrize(
    "antes,depois,esperado",
    [
        (10, 4, ("OUT", 6)),
        (4, 4, None),
        (4, 9, ("IN", 5)),
        (0, 3, ("IN", 3)),
    ],
)
def test_derivar_movimentacao(antes, depois, esperado):
    assert derivar_movimentacao(antes, depois) == esperado


@pytest.mark.parametrize(
    "qtd,limiar,esperado",
    [(0, 5, "ESGOTADO"), (3, 5, "BAIXO"), (5, 5, "BAIXO"), (6, 5, "OK")],
)
def test_status_estoque(qtd, limiar, esperado):
    assert status_estoque(qtd, limiar) == esperado


def test_arredonda_valor():
    assert arredonda_valor(0.1 + 0.2) == 0.3
    assert arredonda_valor("10") == 10.0


@pytest.mark.parametrize(
    "pin,ok",
    [("0000", True), ("1234", True), ("123", False), ("12a4", False),
     ("²²²²", False), ("١٢٣٤", False), ("1234\n", False), (None, False)],
)
def test_pin_valido(pin, ok):
    assert pin_valido(pin) is ok


def test_novo_id_formato():
    i = novo_id("ORD")
    assert i.startswith("ORD-")
    assert len(i) == len("ORD-") + 6
    assert novo_id("ORD") != novo_id("ORD")
