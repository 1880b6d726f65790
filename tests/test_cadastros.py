import pytest

from loja.domain.models import ConfigLoja, EstadoLoja
from loja.usecases.clientes import cadastrar_cliente, editar_cliente
from loja.usecases.configuracao import atualizar_config, verificar_pin


def test_cadastrar_e_editar_cliente():
    estado = EstadoLoja()
    c = cadastrar_cliente(estado, "  Kouassi SARL ", "0700", company="")
    assert c.id.startswith("CL-")
    assert c.name == "Kouassi SARL"
    assert c.company is None

    editar_cliente(estado, c.id, email="k@x.ci", company="Kouassi")
    assert estado.cliente(c.id).email == "k@x.ci"
    assert estado.cliente(c.id).company == "Kouassi"


@pytest.mark.parametrize("nome,telefone", [("", "0700"), ("Ana", ""), ("  ", "0700")])
def test_cliente_exige_nome_e_telefone(nome, telefone):
    estado = EstadoLoja()
    with pytest.raises(ValueError):
        cadastrar_cliente(estado, nome, telefone)
    assert estado.clientes == []


def test_editar_cliente_nao_apaga_telefone():
    estado = EstadoLoja()
    c = cadastrar_cliente(estado, "Ana", "0700")
    with pytest.raises(ValueError):
        editar_cliente(estado, c.id, phone=" ")
    assert estado.cliente(c.id).phone == "0700"


def test_config_padrao_e_pin():
    cfg = ConfigLoja.padrao()
    assert cfg.pin_code == "0000"
    assert verificar_pin(cfg, "0000")
    assert not verificar_pin(cfg, "1111")
    assert not verificar_pin(cfg, None)


def test_atualizar_config():
    estado = EstadoLoja()
    atualizar_config(estado, name="Loja Nova", pin_code="4321")
    assert estado.config.name == "Loja Nova"
    assert estado.config.pin_code == "4321"


@pytest.mark.parametrize("pin", ["123", "12345", "abcd"])
def test_atualizar_config_pin_invalido(pin):
    estado = EstadoLoja()
    with pytest.raises(ValueError):
        atualizar_config(estado, name="X", pin_code=pin)
    assert estado.config.name != "X"
