# loja/adapters/cli.py
"""
CLI da loja (Typer).

Comandos principais:
- migrate                                  -> aplica migrações no SQLite
- produtos listar|adicionar|editar|remover|ajustar|entrada|saida|importar
- clientes listar|adicionar|editar
- pedidos criar|listar|mostrar|pagar
- entregas gerar|listar|atualizar
- movimentacoes listar|exportar
- backup exportar|restaurar
- config show|set
- reset                                    -> apaga tudo (exige PIN)
- rel dashboard|clientes
- insights                                 -> análise do estoque por IA
"""

from __future__ import annotations

import asyncio
import json
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from loja.adapters.parsers import parse_carrinho, parse_distribuicao, parse_valor_raw
from loja.adapters.planilha_loader import exportar_movimentacoes, load_produtos
from loja.adapters.schemas import ErroValidacaoBackup
from loja.config import DB_PATH, POLITICA_CREDITO, POLITICA_LIMITAR
from loja.domain.policies import METODOS_PAGAMENTO
from loja.infra.migrations import apply_migrations, current_version
from loja.usecases import backup, entregas, insights, relatorios
from loja.usecases.controlador import ControladorLoja


app = typer.Typer(help="Loja: estoque, pedidos e pagamentos")
console = Console()

DB_OPTION_HELP = "Caminho do SQLite"


# -----------------------
# util
# -----------------------

def _print_json(obj) -> None:
    """Fallback para impressão de JSON quando necessário."""
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2))


def _fmt(val: Any) -> str:
    if isinstance(val, bool):
        return "sim" if val else "não"
    if isinstance(val, int):
        return f"{val:,}".replace(",", ".")
    if isinstance(val, float):
        return f"{val:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    if isinstance(val, list):
        return ", ".join(str(v) for v in val)
    return "" if val is None else str(val)


_CORES_STATUS = {
    "ESGOTADO": "bold red",
    "BAIXO": "bold yellow",
    "OK": "bold green",
    "paid": "bold green",
    "partially_paid": "bold yellow",
    "unpaid": "bold red",
    "delivered": "bold green",
    "cancelled": "dim",
}


def _display_table(data: List[Dict[str, Any]] | Dict[str, Any], title: str = "Resultado") -> None:
    """Exibe os dados em tabelas formatadas usando Rich."""
    if not data:
        console.print(Panel("Nenhum dado encontrado", title=title, border_style="yellow"))
        return

    if isinstance(data, dict):
        table = Table(title=title, box=box.ROUNDED)
        table.add_column("Campo")
        table.add_column("Valor", justify="right")
        for chave, valor in data.items():
            table.add_row(escape(str(chave)), escape(_fmt(valor)))
        console.print(table)
        return

    table = Table(title=title, box=box.ROUNDED)
    columns = list(data[0].keys())
    for column in columns:
        amostra = data[0].get(column)
        if isinstance(amostra, (int, float)) and not isinstance(amostra, bool):
            table.add_column(column, justify="right")
        elif column in ("data", "previsao"):
            table.add_column(column, justify="center")
        else:
            table.add_column(column)
    for row in data:
        values = []
        for col in columns:
            texto = escape(_fmt(row.get(col, "")))
            cor = _CORES_STATUS.get(texto) if col == "status" else None
            values.append(f"[{cor}]{texto}[/]" if cor else texto)
        table.add_row(*values)
    console.print(table)


def _display_lote(data: Dict[str, Any], title: str) -> None:
    linhas = [
        f"Total de registros: {data['total']}",
        f"Processados com sucesso: {data.get('sucessos', 0)}",
    ]
    for chave in ("inseridos", "atualizados", "removidos"):
        if chave in data:
            linhas.append(f"{chave.capitalize()}: {data[chave]}")
    if data.get("erros"):
        linhas.append(f"Erros: {len(data['erros'])}")
    console.print(Panel("\n".join(linhas), title=title))

    if data.get("erros"):
        erro_table = Table(title="Erros Encontrados")
        erro_table.add_column("Linha")
        erro_table.add_column("Erro")
        for erro in data["erros"]:
            erro_table.add_row(str(erro.get("linha", "?")), erro.get("mensagem", "Erro desconhecido"))
        console.print(erro_table)


@contextmanager
def _validacao():
    """Converte erros de validação em mensagem vermelha e saída com código 1."""
    try:
        yield
    except ErroValidacaoBackup as e:
        console.print("[bold red]Backup inválido:[/]")
        for erro in e.erros:
            console.print(f"  - {escape(erro)}")
        raise typer.Exit(code=1)
    except ValueError as e:
        console.print(f"[bold red]Erro:[/] {escape(str(e))}")
        raise typer.Exit(code=1)


def _valor(txt: Optional[str], campo: str) -> Optional[float]:
    if txt is None:
        return None
    v = parse_valor_raw(txt)
    if v is None:
        raise ValueError(f"Valor inválido para {campo}: {txt}")
    return v


# -----------------------
# infra
# -----------------------

@app.command("migrate")
def cmd_migrate(db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP)):
    """Aplica as migrações do banco."""
    apply_migrations(db_path)
    typer.echo(f">> Migrações aplicadas em: {db_path} (versão {current_version(db_path)})")


# -----------------------
# produtos
# -----------------------

produtos_app = typer.Typer(help="Catálogo de produtos e estoque.")
app.add_typer(produtos_app, name="produtos")


@produtos_app.command("listar")
def cmd_produtos_listar(
    filtro: str = typer.Option("all", help="all | low | out"),
    ordenar: str = typer.Option("name", help="name | quantity | price"),
    desc: bool = typer.Option(False, "--desc", help="Ordem decrescente"),
    como_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Lista o inventário com filtro de estoque e ordenação."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        linhas = relatorios.listar_produtos(ctl.estado, filtro=filtro, ordenar=ordenar, desc=desc)
    if como_json:
        _print_json(linhas)
    else:
        _display_table(linhas, title="Inventário")


@produtos_app.command("adicionar")
def cmd_produtos_adicionar(
    nome: str = typer.Argument(..., help="Nome do produto"),
    sku: Optional[str] = typer.Option(None, help="SKU (gerado se omitido)"),
    categoria: Optional[str] = typer.Option(None, help="Categoria"),
    quantidade: int = typer.Option(0, help="Estoque inicial"),
    limiar: Optional[int] = typer.Option(None, help="Estoque mínimo"),
    preco: str = typer.Option("0", help="Preço unitário (ex.: '1 500' ou 12,50)"),
    fornecedor: Optional[str] = typer.Option(None, help="Fornecedor"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Cadastra um produto."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        p = ctl.cadastrar_produto(
            nome, sku=sku, category=categoria, quantity=quantidade, min_threshold=limiar,
            price=_valor(preco, "preço"), supplier=fornecedor,
        )
    typer.echo(f">> Produto cadastrado: {p.id} ({p.sku})")


@produtos_app.command("editar")
def cmd_produtos_editar(
    product_id: str = typer.Argument(..., help="Id do produto"),
    nome: Optional[str] = typer.Option(None, help="Nome"),
    sku: Optional[str] = typer.Option(None, help="SKU"),
    categoria: Optional[str] = typer.Option(None, help="Categoria"),
    quantidade: Optional[int] = typer.Option(None, help="Nova quantidade em estoque"),
    limiar: Optional[int] = typer.Option(None, help="Estoque mínimo"),
    preco: Optional[str] = typer.Option(None, help="Preço unitário"),
    fornecedor: Optional[str] = typer.Option(None, help="Fornecedor"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Edita um produto (apenas os campos informados)."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        ctl.editar_produto(
            product_id, name=nome, sku=sku, category=categoria, quantity=quantidade,
            min_threshold=limiar, price=_valor(preco, "preço"), supplier=fornecedor,
        )
    typer.echo(f">> Produto atualizado: {product_id}")


@produtos_app.command("remover")
def cmd_produtos_remover(
    product_id: str = typer.Argument(..., help="Id do produto"),
    forcar: bool = typer.Option(False, "--forcar", help="Remove mesmo se estiver em pedidos"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Remove um produto do catálogo."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        ctl.remover_produto(product_id, forcar=forcar)
    typer.echo(f">> Produto removido: {product_id}")


def _echo_movimentacao(mov) -> None:
    if mov is None:
        typer.echo(">> Quantidade inalterada; nenhuma movimentação registrada.")
    else:
        typer.echo(f">> Movimentação {mov.type} de {mov.quantity} registrada ({mov.id})")


@produtos_app.command("ajustar")
def cmd_produtos_ajustar(
    product_id: str = typer.Argument(..., help="Id do produto"),
    quantidade: int = typer.Argument(..., help="Nova quantidade em estoque"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Define a quantidade em estoque (gera a movimentação IN/OUT correspondente)."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        mov = ctl.ajustar_estoque(product_id, quantidade)
    _echo_movimentacao(mov)


@produtos_app.command("entrada")
def cmd_produtos_entrada(
    product_id: str = typer.Argument(..., help="Id do produto"),
    qtd: int = typer.Option(1, help="Quantidade"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Entrada de estoque (+N)."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        mov = ctl.entrada_estoque(product_id, qtd)
    _echo_movimentacao(mov)


@produtos_app.command("saida")
def cmd_produtos_saida(
    product_id: str = typer.Argument(..., help="Id do produto"),
    qtd: int = typer.Option(1, help="Quantidade"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Saída de estoque (-N, sem ficar negativo)."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        mov = ctl.saida_estoque(product_id, qtd)
    _echo_movimentacao(mov)


@produtos_app.command("importar")
def cmd_produtos_importar(
    path: str = typer.Argument(..., help="Planilha XLSX ou CSV de produtos"),
    substituir: bool = typer.Option(False, "--substituir", help="Remove produtos ausentes da planilha"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Importa produtos em lote (casando pelo SKU)."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        linhas = load_produtos(path)
        info = ctl.importar_produtos(linhas, substituir=substituir)
    _display_lote(info, title="Importação de Produtos")


# -----------------------
# clientes
# -----------------------

clientes_app = typer.Typer(help="Cadastro de clientes.")
app.add_typer(clientes_app, name="clientes")


@clientes_app.command("listar")
def cmd_clientes_listar(
    como_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Lista clientes com dívida e pedidos."""
    ctl = ControladorLoja(db_path)
    linhas = relatorios.estatisticas_clientes(ctl.estado)
    if como_json:
        _print_json(linhas)
        return
    _display_table(linhas, title="Clientes")
    console.print(f"[dim]Dívida total em aberto: {_fmt(relatorios.divida_total(ctl.estado))}[/dim]")


@clientes_app.command("adicionar")
def cmd_clientes_adicionar(
    nome: str = typer.Argument(..., help="Nome do cliente"),
    telefone: str = typer.Option(..., help="Telefone"),
    email: str = typer.Option("", help="E-mail"),
    endereco: str = typer.Option("", help="Endereço"),
    empresa: Optional[str] = typer.Option(None, help="Empresa"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Cadastra um cliente."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        c = ctl.cadastrar_cliente(nome, telefone, email=email, address=endereco, company=empresa)
    typer.echo(f">> Cliente cadastrado: {c.id}")


@clientes_app.command("editar")
def cmd_clientes_editar(
    client_id: str = typer.Argument(..., help="Id do cliente"),
    nome: Optional[str] = typer.Option(None, help="Nome"),
    telefone: Optional[str] = typer.Option(None, help="Telefone"),
    email: Optional[str] = typer.Option(None, help="E-mail"),
    endereco: Optional[str] = typer.Option(None, help="Endereço"),
    empresa: Optional[str] = typer.Option(None, help="Empresa"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Edita um cliente (apenas os campos informados)."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        ctl.editar_cliente(client_id, name=nome, phone=telefone, email=email, address=endereco, company=empresa)
    typer.echo(f">> Cliente atualizado: {client_id}")


# -----------------------
# pedidos
# -----------------------

pedidos_app = typer.Typer(help="Pedidos e pagamentos.")
app.add_typer(pedidos_app, name="pedidos")


@pedidos_app.command("criar")
def cmd_pedidos_criar(
    cliente: str = typer.Option(..., help="Id do cliente"),
    item: List[str] = typer.Option(..., "--item", "-i", help="PRODUTO:QTD (repita para vários)"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Cria um pedido a partir dos itens informados (baixa o estoque)."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        pedido = ctl.criar_pedido(cliente, parse_carrinho(item))
    typer.echo(f">> Pedido criado: {pedido.id} | total {_fmt(pedido.total_amount)}")


@pedidos_app.command("listar")
def cmd_pedidos_listar(
    status: Optional[str] = typer.Option(None, help="paid | partially_paid | unpaid"),
    como_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Lista pedidos (mais recentes primeiro)."""
    ctl = ControladorLoja(db_path)
    linhas = relatorios.listar_pedidos(ctl.estado, status=status)
    if como_json:
        _print_json(linhas)
    else:
        _display_table(linhas, title="Pedidos")


@pedidos_app.command("mostrar")
def cmd_pedidos_mostrar(
    order_id: str = typer.Argument(..., help="Id do pedido"),
    como_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Mostra a fatura do pedido."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        fatura = relatorios.fatura_pedido(ctl.estado, order_id)
    if como_json:
        _print_json(fatura)
        return
    cabecalho = [
        f"{fatura['loja']}",
        f"Pedido {fatura['id']} | {fatura['data'][:10]} | {fatura['status']}",
        f"Cliente: {fatura['cliente']} {fatura['cliente_telefone']}".rstrip(),
    ]
    console.print(Panel("\n".join(cabecalho), title="Fatura"))
    _display_table(fatura["linhas"], title="Itens")
    _display_table(
        {"total": fatura["total"], "pago": fatura["pago"], "saldo": fatura["saldo"], "credito": fatura["credito"]},
        title="Totais",
    )
    if fatura["pagamentos"]:
        _display_table(fatura["pagamentos"], title="Pagamentos")


@pedidos_app.command("pagar")
def cmd_pedidos_pagar(
    order_id: str = typer.Argument(..., help="Id do pedido"),
    valor: Optional[str] = typer.Option(None, help="Valor entregue (distribuição automática)"),
    dist: Optional[List[str]] = typer.Option(None, "--dist", "-d", help="PRODUTO=VALOR (distribuição manual)"),
    metodo: str = typer.Option(METODOS_PAGAMENTO[0], help="Canal de pagamento"),
    referencia: Optional[str] = typer.Option(None, help="Referência da transação"),
    nota: Optional[str] = typer.Option(None, help="Observação"),
    politica: Optional[str] = typer.Option(None, help=f"{POLITICA_LIMITAR} | {POLITICA_CREDITO}"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Registra um pagamento (informe --valor OU --dist)."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        if (valor is None) == (not dist):
            raise ValueError("Informe --valor (automático) ou --dist (manual), não ambos.")
        resultado = ctl.registrar_pagamento(
            order_id,
            _valor(valor, "valor"),
            distribuicao=parse_distribuicao(dist) if dist else None,
            metodo=metodo,
            referencia=referencia,
            nota=nota,
            politica=politica,
        )
    if resultado is None:
        console.print("[yellow]Nenhum pagamento aplicado (valor inválido ou pedido já quitado).[/]")
        return
    pedido = ctl.estado.pedido(order_id)
    typer.echo(f">> Pagamento {resultado.pagamento.id} de {_fmt(resultado.pagamento.amount)} aplicado "
               f"| status {pedido.status} | saldo {_fmt(pedido.saldo)}")
    if resultado.troco > 0:
        typer.echo(f">> Troco: {_fmt(resultado.troco)}")


# -----------------------
# entregas
# -----------------------

entregas_app = typer.Typer(help="Entregas.")
app.add_typer(entregas_app, name="entregas")


@entregas_app.command("gerar")
def cmd_entregas_gerar(
    order_id: str = typer.Argument(..., help="Id do pedido"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Gera a entrega de um pedido."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        e = ctl.gerar_entrega(order_id)
    typer.echo(f">> Entrega gerada: {e.id} | previsão {e.estimated_arrival}")


@entregas_app.command("listar")
def cmd_entregas_listar(
    status: Optional[str] = typer.Option(None, help="Filtra por status (ou 'all')"),
    busca: Optional[str] = typer.Option(None, help="Busca por id, pedido, cliente ou rastreio"),
    como_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Lista entregas com indicação de atraso."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        linhas = entregas.listar_entregas(ctl.estado, status=status, busca=busca)
    if como_json:
        _print_json(linhas)
    else:
        _display_table(linhas, title="Entregas")


@entregas_app.command("atualizar")
def cmd_entregas_atualizar(
    delivery_id: str = typer.Argument(..., help="Id da entrega"),
    status: Optional[str] = typer.Option(None, help="preparing | pending_shipment | shipped | delivered | cancelled"),
    transportadora: Optional[str] = typer.Option(None, help="Transportadora"),
    rastreio: Optional[str] = typer.Option(None, help="Código de rastreio"),
    previsao: Optional[str] = typer.Option(None, help="Previsão de chegada (YYYY-MM-DD)"),
    chegada: Optional[str] = typer.Option(None, help="Chegada efetiva (YYYY-MM-DD)"),
    envio: Optional[str] = typer.Option(None, help="Data de envio (YYYY-MM-DD)"),
    notas: Optional[str] = typer.Option(None, help="Observações"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Atualiza os dados logísticos de uma entrega."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        ctl.atualizar_entrega(
            delivery_id, status=status, carrier=transportadora, tracking_number=rastreio,
            estimated_arrival=previsao, actual_arrival=chegada, shipped_date=envio, notes=notas,
        )
    typer.echo(f">> Entrega atualizada: {delivery_id}")


# -----------------------
# movimentações
# -----------------------

mov_app = typer.Typer(help="Diário de movimentações de estoque.")
app.add_typer(mov_app, name="movimentacoes")


@mov_app.command("listar")
def cmd_mov_listar(
    tipo: Optional[str] = typer.Option(None, help="IN | OUT"),
    produto: Optional[str] = typer.Option(None, help="Id do produto"),
    como_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Lista as movimentações (mais recentes primeiro) e os totais."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        linhas = relatorios.listar_movimentacoes(ctl.estado, tipo=tipo, product_id=produto)
    totais = relatorios.totais_movimentacoes(ctl.estado)
    if como_json:
        _print_json({"movimentacoes": linhas, "totais": totais})
        return
    _display_table(linhas, title="Movimentações")
    console.print(f"[dim]Entradas: {_fmt(totais['IN'])} | Saídas: {_fmt(totais['OUT'])}[/dim]")


@mov_app.command("exportar")
def cmd_mov_exportar(
    path: str = typer.Argument(..., help="Arquivo de saída (.csv ou .xlsx)"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Exporta o diário de movimentações."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        n = exportar_movimentacoes(relatorios.listar_movimentacoes(ctl.estado), path)
    typer.echo(f">> {n} movimentações exportadas para {path}")


# -----------------------
# backup / configuração / reset
# -----------------------

backup_app = typer.Typer(help="Backup e restauração.")
app.add_typer(backup_app, name="backup")


@backup_app.command("exportar")
def cmd_backup_exportar(
    path: Optional[str] = typer.Argument(None, help="Arquivo JSON (padrão: stockmaster_db_<data>.json)"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Exporta todo o estado num arquivo JSON."""
    ctl = ControladorLoja(db_path)
    info = backup.salvar_backup(ctl.estado, path or backup.nome_arquivo_backup())
    typer.echo(f">> Backup gravado em {info['arquivo']} ({info['produtos']} produtos, {info['pedidos']} pedidos)")


@backup_app.command("restaurar")
def cmd_backup_restaurar(
    path: str = typer.Argument(..., help="Arquivo JSON de backup"),
    pin: str = typer.Option(..., prompt="PIN", hide_input=True, help="PIN da loja"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Substitui TODO o estado pelo conteúdo do backup."""
    ctl = ControladorLoja(db_path)
    with _validacao():
        info = ctl.restaurar_arquivo(path, pin)
    _display_table(info, title="Backup Restaurado")


config_app = typer.Typer(help="Configuração da loja.")
app.add_typer(config_app, name="config")


@config_app.command("show")
def cmd_config_show(db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP)):
    """Exibe a configuração da loja (sem o PIN)."""
    ctl = ControladorLoja(db_path)
    dados = ctl.estado.config.para_dict()
    dados.pop("pinCode", None)
    _display_table(dados, title="Configuração da Loja")
    console.print(f"[dim]Banco de dados: {db_path}[/dim]")


@config_app.command("set")
def cmd_config_set(
    pin: str = typer.Option(..., prompt="PIN", hide_input=True, help="PIN atual"),
    nome: Optional[str] = typer.Option(None, help="Nome da loja"),
    logo: Optional[str] = typer.Option(None, help="URL do logo"),
    endereco: Optional[str] = typer.Option(None, help="Endereço"),
    email: Optional[str] = typer.Option(None, help="E-mail"),
    telefone: Optional[str] = typer.Option(None, help="Telefone"),
    slogan: Optional[str] = typer.Option(None, help="Slogan"),
    novo_pin: Optional[str] = typer.Option(None, help="Novo PIN (4 dígitos)"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Altera a configuração (apenas os campos informados)."""
    campos = {
        "name": nome, "logo_url": logo, "address": endereco, "email": email,
        "phone": telefone, "slogan": slogan, "pin_code": novo_pin,
    }
    if all(v is None for v in campos.values()):
        typer.echo("Nada a alterar. Informe pelo menos um campo.")
        raise typer.Exit(code=1)
    ctl = ControladorLoja(db_path)
    with _validacao():
        ctl.atualizar_config(pin, **campos)
    typer.echo(">> Configuração atualizada.")


@app.command("reset")
def cmd_reset(
    pin: str = typer.Option(..., prompt="PIN", hide_input=True, help="PIN da loja"),
    sim: bool = typer.Option(False, "--sim", help="Confirma sem perguntar"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Apaga TODOS os dados e volta à configuração padrão."""
    if not sim and not typer.confirm("Apagar todos os dados?"):
        raise typer.Exit(code=1)
    ctl = ControladorLoja(db_path)
    with _validacao():
        ctl.resetar(pin)
    typer.echo(">> Dados apagados.")


# -----------------------
# relatórios
# -----------------------

rel_app = typer.Typer(help="Relatórios")
app.add_typer(rel_app, name="rel")


@rel_app.command("dashboard")
def rel_dashboard(
    como_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Indicadores do painel: valor em estoque, itens, alertas, entregas ativas."""
    ctl = ControladorLoja(db_path)
    stats = relatorios.resumo_painel(ctl.estado)
    if como_json:
        _print_json(stats)
    else:
        _display_table(stats, title="Painel")


@rel_app.command("clientes")
def rel_clientes(
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Clientes com dívida em aberto (maior dívida primeiro)."""
    ctl = ControladorLoja(db_path)
    linhas = [c for c in relatorios.estatisticas_clientes(ctl.estado) if c["debt"] > 0]
    linhas.sort(key=lambda c: -c["debt"])
    _display_table(linhas, title="Dívida por Cliente")


@app.command("insights")
def cmd_insights(db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP)):
    """Análise do estoque por IA (precisa de GEMINI_API_KEY)."""
    ctl = ControladorLoja(db_path)
    with console.status("Analisando o estoque..."):
        texto = asyncio.run(insights.gerar_insights(ctl.estado.produtos))
    console.print(Panel(texto, title="Insights IA"))


# Entry point opcional:
def main():
    app()


if __name__ == "__main__":
    main()
