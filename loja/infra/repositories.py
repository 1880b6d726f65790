# loja/infra/repositories.py
"""
Repositórios (DAO) para acesso aos dados no SQLite.

Classes:
- ArmazenamentoRepo  -> chave/valor com blobs JSON
- EstadoRepo         -> carrega/grava o EstadoLoja completo (uma chave por coleção)
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .db import connect
from .migrations import apply_migrations
from .logger import log_database_operation, log_system_event
from loja.domain.models import (
    Cliente,
    ConfigLoja,
    Entrega,
    EstadoLoja,
    Movimentacao,
    Pedido,
    Produto,
)


# Chaves herdadas do armazenamento local da versão anterior
CHAVE_PRODUTOS = "sm_products_v2"
CHAVE_CLIENTES = "sm_clients_v2"
CHAVE_PEDIDOS = "sm_orders_v2"
CHAVE_ENTREGAS = "sm_deliveries_v2"
CHAVE_MOVIMENTACOES = "sm_transactions_v2"
CHAVE_CONFIG = "sm_config_v2"


# -------------------------
# Chave / valor
# -------------------------

class ArmazenamentoRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def set_many(self, items: Iterable[Tuple[str, Any]]) -> None:
        """Grava vários valores (serializados em JSON) numa única transação."""
        agora = datetime.now().isoformat(timespec="seconds")
        rows = [(k, json.dumps(v, ensure_ascii=False), agora) for k, v in items]
        with connect(self.db_path) as c:
            c.executemany(
                """
                INSERT INTO armazenamento (chave, valor, atualizado_em)
                VALUES (?, ?, ?)
                ON CONFLICT(chave) DO UPDATE SET
                    valor=excluded.valor,
                    atualizado_em=excluded.atualizado_em
                """,
                rows,
            )

    def get(self, key: str, default: Optional[Any] = None) -> Optional[Any]:
        """Lê e desserializa uma chave; JSON inválido volta como ``default``."""
        with connect(self.db_path) as c:
            row = c.execute("SELECT valor FROM armazenamento WHERE chave = ?", (key,)).fetchone()
        if row is None:
            return default
        try:
            return json.loads(row[0])
        except (TypeError, ValueError):
            log_system_event("armazenamento_json_invalido", {"chave": key}, level="warning")
            return default

    def keys(self) -> List[str]:
        with connect(self.db_path) as c:
            return [r[0] for r in c.execute("SELECT chave FROM armazenamento ORDER BY chave")]

    def clear(self) -> None:
        with connect(self.db_path) as c:
            c.execute("DELETE FROM armazenamento")


# -------------------------
# Estado completo
# -------------------------

def _lista(raw: Any, fabrica: Callable[[Dict[str, Any]], Any], chave: str) -> List[Any]:
    if not isinstance(raw, list):
        return []
    out = []
    for i, d in enumerate(raw):
        if not isinstance(d, dict):
            log_system_event("registro_ignorado", {"chave": chave, "indice": i}, level="warning")
            continue
        out.append(fabrica(d))
    return out


def estado_para_colecoes(estado: EstadoLoja) -> Dict[str, Any]:
    return {
        CHAVE_PRODUTOS: [p.para_dict() for p in estado.produtos],
        CHAVE_CLIENTES: [c.para_dict() for c in estado.clientes],
        CHAVE_PEDIDOS: [o.para_dict() for o in estado.pedidos],
        CHAVE_ENTREGAS: [e.para_dict() for e in estado.entregas],
        CHAVE_MOVIMENTACOES: [m.para_dict() for m in estado.movimentacoes],
        CHAVE_CONFIG: estado.config.para_dict(),
    }


class EstadoRepo:
    """Lê o estado na inicialização e grava o estado completo após cada mutação."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        apply_migrations(db_path)
        self.kv = ArmazenamentoRepo(db_path)

    def carregar(self) -> EstadoLoja:
        """Carrega o estado; coleções ausentes ou ilegíveis assumem o padrão."""
        config_raw = self.kv.get(CHAVE_CONFIG)
        estado = EstadoLoja(
            produtos=_lista(self.kv.get(CHAVE_PRODUTOS), Produto.de_dict, CHAVE_PRODUTOS),
            clientes=_lista(self.kv.get(CHAVE_CLIENTES), Cliente.de_dict, CHAVE_CLIENTES),
            pedidos=_lista(self.kv.get(CHAVE_PEDIDOS), Pedido.de_dict, CHAVE_PEDIDOS),
            entregas=_lista(self.kv.get(CHAVE_ENTREGAS), Entrega.de_dict, CHAVE_ENTREGAS),
            movimentacoes=_lista(self.kv.get(CHAVE_MOVIMENTACOES), Movimentacao.de_dict, CHAVE_MOVIMENTACOES),
            config=ConfigLoja.de_dict(config_raw) if isinstance(config_raw, dict) else ConfigLoja.padrao(),
        )
        log_database_operation("armazenamento", "LOAD", 6,
                               produtos=len(estado.produtos), pedidos=len(estado.pedidos))
        return estado

    def salvar(self, estado: EstadoLoja) -> None:
        colecoes = estado_para_colecoes(estado)
        self.kv.set_many(colecoes.items())
        log_database_operation("armazenamento", "SAVE", len(colecoes))
