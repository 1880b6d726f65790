# loja/infra/migrations.py
"""
Migrações de schema usando PRAGMA user_version.

V1: tabela chave/valor com os blobs JSON das coleções
V2: registra a data da última gravação de cada chave
"""

from __future__ import annotations

from typing import List
from .db import connect


LATEST_VERSION = 2

SCHEMA_V1: List[str] = [
    # Uma linha por coleção (sm_products_v2, sm_orders_v2, ...)
    """
    CREATE TABLE IF NOT EXISTS armazenamento (
        chave TEXT PRIMARY KEY,
        valor TEXT NOT NULL
    );
    """,
]


def _ensure_column(conn, table: str, column: str, ddl: str) -> None:
    """Adiciona coluna se não existir."""
    cur = conn.execute(f"PRAGMA table_info({table});")
    cols = [r[1] for r in cur.fetchall()]  # r[1] é o nome da coluna
    if column not in cols:
        conn.execute(f"ALTER TABLE {table} ADD COLUMN {ddl};")


def _apply_v1(conn) -> None:
    for sql in SCHEMA_V1:
        conn.executescript(sql)


def _apply_v2(conn) -> None:
    _ensure_column(conn, "armazenamento", "atualizado_em", "atualizado_em TEXT")


def current_version(db_path: str) -> int:
    with connect(db_path) as conn:
        return conn.execute("PRAGMA user_version;").fetchone()[0] or 0


def apply_migrations(db_path: str) -> None:
    """Aplica migrações incrementais de acordo com PRAGMA user_version."""
    with connect(db_path) as conn:
        ver = conn.execute("PRAGMA user_version;").fetchone()[0] or 0

        if ver < 1:
            _apply_v1(conn)
            conn.execute("PRAGMA user_version = 1;")
            ver = 1

        if ver < 2:
            _apply_v2(conn)
            conn.execute("PRAGMA user_version = 2;")
            ver = 2
