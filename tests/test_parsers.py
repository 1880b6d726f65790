import pytest

from loja.adapters.parsers import parse_carrinho, parse_distribuicao, parse_item_carrinho, parse_valor_raw


@pytest.mark.parametrize(
    "txt,esperado",
    [
        ("1 650 000 FCFA", 1650000.0),
        ("1 650 000", 1650000.0),
        ("5,5", 5.5),
        ("12,50", 12.5),
        ("1.234,56", 1234.56),
        ("1,234.56", 1234.56),
        ("1,234,567", 1234567.0),
        ("1.234.567", 1234567.0),
        ("99.9", 99.9),
        (42, 42.0),
        ("abc", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_valor_raw(txt, esperado):
    assert parse_valor_raw(txt) == esperado


def test_parse_item_carrinho():
    assert parse_item_carrinho("PRD-1:3") == ("PRD-1", 3)
    assert parse_item_carrinho(" PRD-1 ") == ("PRD-1", 1)
    assert parse_carrinho(["A:1", "B:2"]) == [("A", 1), ("B", 2)]


@pytest.mark.parametrize("txt", ["", ":3", "A:x", "A:0", "A:-1"])
def test_parse_item_carrinho_invalido(txt):
    with pytest.raises(ValueError):
        parse_item_carrinho(txt)


def test_parse_distribuicao():
    assert parse_distribuicao(["A=30", "B=1 500", "A=5,5"]) == {"A": 35.5, "B": 1500.0}
    with pytest.raises(ValueError):
        parse_distribuicao(["A30"])
    with pytest.raises(ValueError):
        parse_distribuicao(["A=abc"])
