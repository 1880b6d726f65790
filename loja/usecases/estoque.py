"""
UC: Catálogo de produtos e movimentações de estoque.

- atualizar_estoque(): define a nova quantidade de um produto e registra a
  movimentação derivada (IN/OUT) no histórico.
- entrada_estoque() / saida_estoque(): atalhos +N / -N (a saída para em 0).
- cadastrar_produto(), editar_produto(), remover_produto().
- importar_produtos(): carga em lote (linhas vindas do loader de planilhas).

Obs.:
- A derivação só conhece (quantidade antiga, quantidade nova). Um pedido com
  três linhas gera três movimentações independentes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from loja.config import DEFAULTS
from loja.domain.models import EstadoLoja, Movimentacao, Produto
from loja.domain.policies import derivar_movimentacao, novo_id
from loja.infra.logger import log_movimentacao, log_system_event, log_transaction


CAMPOS_EDITAVEIS = ("sku", "name", "category", "min_threshold", "price", "supplier", "quantity")


def _agora() -> str:
    return datetime.now().isoformat(timespec="seconds")


def _produto_ou_erro(estado: EstadoLoja, product_id: str) -> Produto:
    p = estado.produto(product_id)
    if p is None:
        raise ValueError(f"Produto não encontrado: {product_id}")
    return p


def atualizar_estoque(
    estado: EstadoLoja,
    product_id: str,
    nova_quantidade: int,
    usuario: Optional[str] = None,
    origem: str = "ajuste",
) -> Optional[Movimentacao]:
    """Define a quantidade de um produto e registra a movimentação derivada.

    Returns:
        A movimentação criada, ou ``None`` quando a quantidade não mudou.

    Raises:
        ValueError: produto inexistente ou quantidade negativa.
    """
    produto = _produto_ou_erro(estado, product_id)
    nova_quantidade = int(nova_quantidade)
    if nova_quantidade < 0:
        raise ValueError(f"Quantidade não pode ser negativa: {nova_quantidade}")

    derivada = derivar_movimentacao(produto.quantity, nova_quantidade)
    if derivada is None:
        return None
    tipo, qtd = derivada

    agora = _agora()
    anterior = produto.quantity
    produto.quantity = nova_quantidade
    produto.last_updated = agora
    mov = Movimentacao(
        id=novo_id("TX"),
        product_id=product_id,
        type=tipo,
        quantity=qtd,
        date=agora,
        user=usuario or DEFAULTS.usuario_padrao,
    )
    estado.movimentacoes.insert(0, mov)
    log_movimentacao(tipo, product_id, qtd, origem=origem, antes=anterior, depois=nova_quantidade)
    return mov


def entrada_estoque(estado: EstadoLoja, product_id: str, quantidade: int = 1,
                    usuario: Optional[str] = None) -> Optional[Movimentacao]:
    produto = _produto_ou_erro(estado, product_id)
    return atualizar_estoque(estado, product_id, produto.quantity + max(0, int(quantidade)), usuario, "entrada")


def saida_estoque(estado: EstadoLoja, product_id: str, quantidade: int = 1,
                  usuario: Optional[str] = None) -> Optional[Movimentacao]:
    produto = _produto_ou_erro(estado, product_id)
    return atualizar_estoque(estado, product_id, max(0, produto.quantity - max(0, int(quantidade))), usuario, "saida")


def _sku_automatico() -> str:
    return novo_id("SKU")


def cadastrar_produto(
    estado: EstadoLoja,
    name: str,
    sku: Optional[str] = None,
    category: Optional[str] = None,
    quantity: int = 0,
    min_threshold: Optional[int] = None,
    price: float = 0.0,
    supplier: Optional[str] = None,
    product_id: Optional[str] = None,
    usuario: Optional[str] = None,
) -> Produto:
    """Cadastra um produto. O estoque inicial entra no histórico como IN."""
    name = (name or "").strip()
    if not name:
        raise ValueError("Nome do produto é obrigatório.")
    if float(price) < 0:
        raise ValueError("Preço não pode ser negativo.")
    limiar = DEFAULTS.limiar_minimo_padrao if min_threshold is None else int(min_threshold)
    if limiar < 0:
        raise ValueError("Limiar mínimo não pode ser negativo.")
    if int(quantity) < 0:
        raise ValueError(f"Quantidade não pode ser negativa: {quantity}")
    if product_id and estado.produto(product_id):
        raise ValueError(f"Já existe produto com id {product_id}.")

    produto = Produto(
        id=product_id or novo_id("PRD"),
        sku=(sku or "").strip() or _sku_automatico(),
        name=name,
        category=(category or "").strip() or DEFAULTS.categoria_padrao,
        quantity=0,
        min_threshold=limiar,
        price=float(price),
        supplier=(supplier or "").strip() or DEFAULTS.fornecedor_padrao,
        last_updated=_agora(),
    )
    estado.produtos.append(produto)
    if int(quantity):
        atualizar_estoque(estado, produto.id, int(quantity), usuario, "cadastro")
    log_transaction("cadastrar_produto", {"id": produto.id, "sku": produto.sku}, result="success")
    return produto


def editar_produto(estado: EstadoLoja, product_id: str, usuario: Optional[str] = None, **campos: Any) -> Produto:
    """Altera campos do produto. Mudança de quantidade passa pela derivação de movimentação.

    O preço novo não altera pedidos já feitos (o preço unitário é congelado na linha).
    """
    produto = _produto_ou_erro(estado, product_id)
    desconhecidos = set(campos) - set(CAMPOS_EDITAVEIS)
    if desconhecidos:
        raise ValueError(f"Campos não editáveis: {', '.join(sorted(desconhecidos))}")

    if "price" in campos and campos["price"] is not None and float(campos["price"]) < 0:
        raise ValueError("Preço não pode ser negativo.")
    if "min_threshold" in campos and campos["min_threshold"] is not None and int(campos["min_threshold"]) < 0:
        raise ValueError("Limiar mínimo não pode ser negativo.")
    if "name" in campos and campos["name"] is not None and not str(campos["name"]).strip():
        raise ValueError("Nome do produto é obrigatório.")
    if campos.get("quantity") is not None and int(campos["quantity"]) < 0:
        raise ValueError(f"Quantidade não pode ser negativa: {campos['quantity']}")

    for chave in ("sku", "name", "category", "supplier"):
        if campos.get(chave) is not None:
            setattr(produto, chave, str(campos[chave]).strip())
    if campos.get("min_threshold") is not None:
        produto.min_threshold = int(campos["min_threshold"])
    if campos.get("price") is not None:
        produto.price = float(campos["price"])
    produto.last_updated = _agora()

    if campos.get("quantity") is not None:
        atualizar_estoque(estado, product_id, int(campos["quantity"]), usuario, "edicao")
    return produto


def remover_produto(estado: EstadoLoja, product_id: str, forcar: bool = False) -> Produto:
    """Remove um produto do catálogo.

    Bloqueado enquanto alguma linha de pedido referenciar o produto, a não
    ser com ``forcar=True``; nesse caso as leituras passam a exibir o rótulo
    de produto desconhecido.
    """
    produto = _produto_ou_erro(estado, product_id)
    pedidos = [o.id for o in estado.pedidos if o.item(product_id) is not None]
    if pedidos and not forcar:
        raise ValueError(f"Produto {product_id} está em pedidos: {', '.join(pedidos)}")
    estado.produtos = [p for p in estado.produtos if p.id != product_id]
    log_system_event("produto_removido", {"id": product_id, "pedidos": pedidos})
    return produto


def importar_produtos(
    estado: EstadoLoja,
    linhas: List[Dict[str, Any]],
    substituir: bool = False,
    usuario: Optional[str] = None,
) -> Dict[str, Any]:
    """Carga em lote de produtos, casando pelo SKU.

    - SKU existente -> edição (quantidade via movimentação);
    - SKU novo      -> cadastro;
    - ``substituir`` remove os produtos cujo SKU não veio na carga.

    Linhas inválidas não interrompem a carga: entram em ``erros``.
    """
    log_system_event("importar_produtos_start", {"linhas": len(linhas), "substituir": substituir})
    por_sku = {p.sku: p for p in estado.produtos if p.sku}
    inseridos = atualizados = 0
    erros: List[Dict[str, Any]] = []
    vistos = set()

    for n, linha in enumerate(linhas, start=1):
        sku = str(linha.get("sku") or "").strip()
        existente = por_sku.get(sku) if sku else None
        if existente:
            vistos.add(existente.id)
        try:
            if existente:
                editar_produto(
                    estado, existente.id, usuario,
                    name=linha.get("name"), category=linha.get("category"),
                    min_threshold=linha.get("min_threshold"), price=linha.get("price"),
                    supplier=linha.get("supplier"), quantity=linha.get("quantity"),
                )
                atualizados += 1
            else:
                novo = cadastrar_produto(
                    estado, linha.get("name"), sku=sku or None, category=linha.get("category"),
                    quantity=linha.get("quantity") or 0, min_threshold=linha.get("min_threshold"),
                    price=linha.get("price") or 0.0, supplier=linha.get("supplier"), usuario=usuario,
                )
                por_sku[novo.sku] = novo
                inseridos += 1
                vistos.add(novo.id)
        except (ValueError, TypeError) as e:
            erros.append({"linha": n, "mensagem": str(e)})

    removidos = 0
    if substituir:
        for p in [p for p in estado.produtos if p.id not in vistos]:
            remover_produto(estado, p.id, forcar=True)
            removidos += 1

    result = {
        "total": len(linhas),
        "sucessos": inseridos + atualizados,
        "inseridos": inseridos,
        "atualizados": atualizados,
        "removidos": removidos,
        "erros": erros,
    }
    log_transaction("importar_produtos", {"linhas": len(linhas)}, result=result)
    return result
