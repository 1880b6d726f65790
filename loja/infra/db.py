# loja/infra/db.py
"""
Utilidades de conexão SQLite.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


@contextmanager
def connect(db_path: str) -> Iterator[sqlite3.Connection]:
    """
    Context manager para abrir conexão SQLite com:
    - diretório do arquivo criado se necessário
    - row_factory = sqlite3.Row
    - uma única transação: commit ao sair, rollback em caso de exceção

    Todas as coleções da loja são gravadas dentro de uma mesma conexão,
    então uma falha no meio da gravação não deixa o snapshot pela metade.
    """
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path, timeout=5.0)
    try:
        conn.row_factory = sqlite3.Row
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
