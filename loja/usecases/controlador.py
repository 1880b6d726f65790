"""
Controlador da sessão: dono do ``EstadoLoja``.

Carrega o estado do banco na criação e grava o estado completo depois de
cada comando que altera dados. Falha de gravação não desfaz o comando: é
registrada no log de sistema (nível error) e o estado em memória continua
valendo para a sessão.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence, Tuple

from loja.config import DB_PATH
from loja.domain.models import Cliente, ConfigLoja, Entrega, EstadoLoja, Movimentacao, Pedido, Produto
from loja.domain.pagamentos import ResultadoPagamento
from loja.infra.logger import log_system_event
from loja.infra.repositories import EstadoRepo
from loja.usecases import backup, clientes, configuracao, entregas, estoque, vendas


class ControladorLoja:
    def __init__(self, db_path: str = DB_PATH):
        self.db_path = db_path
        self.repo: Optional[EstadoRepo] = None
        try:
            self.repo = EstadoRepo(db_path)
            self.estado = self.repo.carregar()
        except (sqlite3.Error, OSError) as e:
            log_system_event("carregar_estado_falhou", {"db_path": db_path, "error": str(e)}, level="error")
            self.estado = EstadoLoja()

    def salvar(self) -> bool:
        """Grava o estado completo. Devolve False (sem levantar) em caso de falha."""
        if self.repo is None:
            log_system_event("salvar_estado_falhou", {"db_path": self.db_path, "error": "sem repositório"},
                             level="error")
            return False
        try:
            self.repo.salvar(self.estado)
        except (sqlite3.Error, OSError) as e:
            log_system_event("salvar_estado_falhou", {"db_path": self.db_path, "error": str(e)}, level="error")
            return False
        return True

    def _executa(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        resultado = func(self.estado, *args, **kwargs)
        self.salvar()
        return resultado

    # ---------------- produtos / estoque ----------------

    def cadastrar_produto(self, name: str, **campos: Any) -> Produto:
        return self._executa(estoque.cadastrar_produto, name, **campos)

    def editar_produto(self, product_id: str, **campos: Any) -> Produto:
        return self._executa(estoque.editar_produto, product_id, **campos)

    def remover_produto(self, product_id: str, forcar: bool = False) -> Produto:
        return self._executa(estoque.remover_produto, product_id, forcar=forcar)

    def ajustar_estoque(self, product_id: str, nova_quantidade: int) -> Optional[Movimentacao]:
        return self._executa(estoque.atualizar_estoque, product_id, nova_quantidade)

    def entrada_estoque(self, product_id: str, quantidade: int = 1) -> Optional[Movimentacao]:
        return self._executa(estoque.entrada_estoque, product_id, quantidade)

    def saida_estoque(self, product_id: str, quantidade: int = 1) -> Optional[Movimentacao]:
        return self._executa(estoque.saida_estoque, product_id, quantidade)

    def importar_produtos(self, linhas: Iterable[Dict[str, Any]], substituir: bool = False) -> Dict[str, Any]:
        return self._executa(estoque.importar_produtos, list(linhas), substituir=substituir)

    # ---------------- clientes ----------------

    def cadastrar_cliente(self, name: str, phone: str, **campos: Any) -> Cliente:
        return self._executa(clientes.cadastrar_cliente, name, phone, **campos)

    def editar_cliente(self, client_id: str, **campos: Any) -> Cliente:
        return self._executa(clientes.editar_cliente, client_id, **campos)

    # ---------------- pedidos / pagamentos ----------------

    def criar_pedido(self, client_id: str, entradas: Sequence[Tuple[str, int]]) -> Pedido:
        if self.estado.cliente(client_id) is None:
            raise ValueError(f"Cliente não encontrado: {client_id}")
        carrinho = vendas.montar_carrinho(self.estado, entradas)
        return self._executa(vendas.criar_pedido_do_carrinho, client_id, carrinho)

    def registrar_pedido(self, pedido: Pedido) -> str:
        return self._executa(vendas.registrar_pedido, pedido)

    def registrar_pagamento(
        self,
        order_id: str,
        valor: Optional[float] = None,
        distribuicao: Optional[Mapping[str, float]] = None,
        **kwargs: Any,
    ) -> Optional[ResultadoPagamento]:
        resultado = vendas.registrar_pagamento(self.estado, order_id, valor, distribuicao=distribuicao, **kwargs)
        if resultado is not None:
            self.salvar()
        return resultado

    # ---------------- entregas ----------------

    def gerar_entrega(self, order_id: str) -> Entrega:
        return self._executa(entregas.gerar_entrega, order_id)

    def atualizar_entrega(self, delivery_id: str, **campos: Any) -> Entrega:
        return self._executa(entregas.atualizar_entrega, delivery_id, **campos)

    # ---------------- configuração / backup ----------------

    def atualizar_config(self, pin: Optional[str], **campos: Any) -> ConfigLoja:
        self._exige_pin(pin)
        return self._executa(configuracao.atualizar_config, **campos)

    def restaurar(self, documento: Any, pin: Optional[str]) -> Dict[str, int]:
        self._exige_pin(pin)
        return self._executa(backup.restaurar_snapshot, documento)

    def restaurar_arquivo(self, path: str, pin: Optional[str]) -> Dict[str, int]:
        self._exige_pin(pin)
        return self._executa(backup.restaurar_arquivo, path)

    def resetar(self, pin: Optional[str]) -> None:
        self._exige_pin(pin)
        self._executa(backup.resetar)

    def _exige_pin(self, pin: Optional[str]) -> None:
        if not configuracao.verificar_pin(self.estado.config, pin):
            log_system_event("pin_incorreto", level="warning")
            raise ValueError("Código PIN incorreto.")
