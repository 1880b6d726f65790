import json
from pathlib import Path

from typer.testing import CliRunner

from loja.adapters.cli import app
from loja.usecases.controlador import ControladorLoja

runner = CliRunner()


def _invoke(db_path, *args, input=None):
    return runner.invoke(app, [*args, "--db", str(db_path)], input=input)


def _seed(db_path):
    r = _invoke(db_path, "produtos", "adicionar", "Cimento", "--quantidade", "10", "--preco", "100")
    assert r.exit_code == 0, r.output
    r = _invoke(db_path, "produtos", "adicionar", "Areia", "--quantidade", "5", "--preco", "50")
    assert r.exit_code == 0, r.output
    r = _invoke(db_path, "clientes", "adicionar", "Kouassi", "--telefone", "0700")
    assert r.exit_code == 0, r.output
    estado = ControladorLoja(str(db_path)).estado
    por_nome = {p.name: p.id for p in estado.produtos}
    return por_nome["Cimento"], por_nome["Areia"], estado.clientes[0].id


def test_cli_migrate(tmp_path: Path):
    db_path = tmp_path / "loja_test.sqlite"
    result = _invoke(db_path, "migrate")
    assert result.exit_code == 0, result.output
    assert "Migrações aplicadas" in result.output


def test_cli_fluxo_pedido_pagamento_entrega(tmp_path: Path):
    db_path = tmp_path / "loja_test.sqlite"
    cimento, areia, cliente = _seed(db_path)

    r = _invoke(db_path, "pedidos", "criar", "--cliente", cliente, "--item", f"{cimento}:1", "--item", f"{areia}:1")
    assert r.exit_code == 0, r.output
    pedido_id = ControladorLoja(str(db_path)).estado.pedidos[0].id

    r = _invoke(db_path, "pedidos", "pagar", pedido_id, "--valor", "120", "--metodo", "Espèces")
    assert r.exit_code == 0, r.output
    pedido = ControladorLoja(str(db_path)).estado.pedido(pedido_id)
    assert [i.paid_amount for i in pedido.items] == [100.0, 20.0]
    assert pedido.status == "partially_paid"

    r = _invoke(db_path, "pedidos", "pagar", pedido_id, "--valor", "100")
    assert r.exit_code == 0, r.output
    assert "Troco" in r.output
    assert ControladorLoja(str(db_path)).estado.pedido(pedido_id).status == "paid"

    r = _invoke(db_path, "entregas", "gerar", pedido_id)
    assert r.exit_code == 0, r.output
    r = _invoke(db_path, "entregas", "gerar", pedido_id)
    assert r.exit_code == 1

    r = _invoke(db_path, "pedidos", "mostrar", pedido_id, "--json")
    assert r.exit_code == 0, r.output
    fatura = json.loads(r.stdout)
    assert fatura["saldo"] == 0.0
    assert len(fatura["pagamentos"]) == 2


def test_cli_pagamento_manual(tmp_path: Path):
    db_path = tmp_path / "loja_test.sqlite"
    cimento, areia, cliente = _seed(db_path)
    _invoke(db_path, "pedidos", "criar", "--cliente", cliente, "-i", f"{cimento}:1", "-i", f"{areia}:1")
    pedido_id = ControladorLoja(str(db_path)).estado.pedidos[0].id

    r = _invoke(db_path, "pedidos", "pagar", pedido_id, "--dist", f"{areia}=30")
    assert r.exit_code == 0, r.output
    pedido = ControladorLoja(str(db_path)).estado.pedido(pedido_id)
    assert pedido.payments[0].affected_product_ids == (areia,)
    assert pedido.item(areia).paid_amount == 30.0

    r = _invoke(db_path, "pedidos", "pagar", pedido_id)
    assert r.exit_code == 1


def test_cli_erro_de_validacao(tmp_path: Path):
    db_path = tmp_path / "loja_test.sqlite"
    r = _invoke(db_path, "clientes", "adicionar", "Ana", "--telefone", " ")
    assert r.exit_code == 1
    assert "Erro" in r.output
    r = _invoke(db_path, "produtos", "adicionar", "X", "--preco", "caro")
    assert r.exit_code == 1


def test_cli_movimentacoes_json_e_exportacao(tmp_path: Path):
    db_path = tmp_path / "loja_test.sqlite"
    cimento, _, _ = _seed(db_path)
    r = _invoke(db_path, "produtos", "ajustar", cimento, "4")
    assert r.exit_code == 0, r.output
    assert "OUT de 6" in r.output

    r = _invoke(db_path, "movimentacoes", "listar", "--json")
    assert r.exit_code == 0, r.output
    data = json.loads(r.stdout)
    assert data["totais"] == {"IN": 15, "OUT": 6}
    assert data["movimentacoes"][0]["tipo"] == "OUT"

    destino = tmp_path / "diario.csv"
    r = _invoke(db_path, "movimentacoes", "exportar", str(destino))
    assert r.exit_code == 0, r.output
    assert destino.exists()


def test_cli_backup_restaurar_e_reset(tmp_path: Path):
    db_path = tmp_path / "loja_test.sqlite"
    _seed(db_path)
    arquivo = tmp_path / "backup.json"
    r = _invoke(db_path, "backup", "exportar", str(arquivo))
    assert r.exit_code == 0, r.output

    r = _invoke(db_path, "reset", "--pin", "1111", "--sim")
    assert r.exit_code == 1
    r = _invoke(db_path, "reset", "--pin", "0000", "--sim")
    assert r.exit_code == 0, r.output
    assert ControladorLoja(str(db_path)).estado.produtos == []

    r = _invoke(db_path, "backup", "restaurar", str(arquivo), "--pin", "0000")
    assert r.exit_code == 0, r.output
    assert len(ControladorLoja(str(db_path)).estado.produtos) == 2

    ruim = tmp_path / "ruim.json"
    ruim.write_text(json.dumps({"clients": []}), encoding="utf-8")
    r = _invoke(db_path, "backup", "restaurar", str(ruim), "--pin", "0000")
    assert r.exit_code == 1
    assert "products" in r.output
    assert len(ControladorLoja(str(db_path)).estado.produtos) == 2


def test_cli_config_set_exige_pin(tmp_path: Path):
    db_path = tmp_path / "loja_test.sqlite"
    r = _invoke(db_path, "config", "set", "--pin", "9999", "--nome", "Outra")
    assert r.exit_code == 1
    r = _invoke(db_path, "config", "set", "--pin", "0000", "--nome", "Outra", "--novo-pin", "4321")
    assert r.exit_code == 0, r.output
    cfg = ControladorLoja(str(db_path)).estado.config
    assert (cfg.name, cfg.pin_code) == ("Outra", "4321")


def test_cli_dashboard_json(tmp_path: Path):
    db_path = tmp_path / "loja_test.sqlite"
    _seed(db_path)
    r = _invoke(db_path, "rel", "dashboard", "--json")
    assert r.exit_code == 0, r.output
    stats = json.loads(r.stdout)
    assert stats["totalValue"] == 1250.0
    assert stats["totalItems"] == 15
