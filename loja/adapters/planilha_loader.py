# loja/adapters/planilha_loader.py
"""
Planilhas (XLSX/CSV) de produtos e exportação do diário de movimentações.

Essas funções:
- leem planilhas usando pandas (XLSX via openpyxl, CSV com separador detectado);
- normalizam cabeçalhos (acentos, variações, sinônimos em pt/fr/en);
- retornam listas de dicionários com as chaves esperadas por
  ``usecases.estoque.importar_produtos``.

Observações:
- Valores inválidos não são descartados aqui: seguem como texto para que a
  importação registre o erro da linha.
- Linhas totalmente vazias são ignoradas.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from loja.adapters.parsers import parse_valor_raw


CHAVES_PRODUTO = ("sku", "name", "category", "quantity", "min_threshold", "price", "supplier")


# ---------------------------
# utilitários de normalização
# ---------------------------

def _slug(s: str) -> str:
    """Normaliza cabeçalhos: minúsculas, sem acentos, sem não-alfanumérico."""
    if s is None:
        return ""
    s = str(s).strip().lower()
    acentos = dict(zip("áàâãäéèêëíìîïóòôõöúùûüç", "aaaaaeeeeiiiiooooouuuuc"))
    s = "".join(acentos.get(ch, ch) for ch in s)
    s = re.sub(r"[^a-z0-9]+", " ", s)
    s = re.sub(r"\s+", " ", s).strip()
    return s


_ALIASES = {
    "sku": "sku",
    "codigo": "sku",
    "cod": "sku",
    "code": "sku",
    "reference": "sku",
    "ref": "sku",

    "name": "name",
    "nome": "name",
    "produto": "name",
    "nom": "name",
    "produit": "name",
    "designation": "name",

    "category": "category",
    "categoria": "category",
    "categorie": "category",

    "quantity": "quantity",
    "quantidade": "quantity",
    "qtd": "quantity",
    "qtde": "quantity",
    "quantite": "quantity",
    "stock": "quantity",
    "estoque": "quantity",

    "min threshold": "min_threshold",
    "minthreshold": "min_threshold",
    "limiar": "min_threshold",
    "estoque minimo": "min_threshold",
    "seuil": "min_threshold",
    "seuil minimum": "min_threshold",
    "seuil min": "min_threshold",

    "price": "price",
    "preco": "price",
    "preco unitario": "price",
    "valor": "price",
    "prix": "price",
    "prix unitaire": "price",

    "supplier": "supplier",
    "fornecedor": "supplier",
    "fournisseur": "supplier",
}


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    return df.rename(columns={col: _ALIASES.get(_slug(col), _slug(col)) for col in df.columns})


def _safe_get(row, key) -> Optional[str]:
    val = row.get(key)
    if val is None or pd.isna(val):
        return None
    s = str(val).strip()
    return s or None


def _to_int(val: Optional[str]) -> Any:
    """"12" / "12.0" → 12; vazio → None; texto inválido segue como está."""
    if val is None:
        return None
    num = parse_valor_raw(val)
    if num is None or num != int(num):
        return val
    return int(num)


def _to_price(val: Optional[str]) -> Any:
    if val is None:
        return None
    num = parse_valor_raw(val)
    return val if num is None else num


def _ler_tabela(path: str) -> pd.DataFrame:
    sufixo = Path(path).suffix.lower()
    if sufixo in (".xlsx", ".xlsm", ".xls"):
        return pd.read_excel(path, dtype="string")
    if sufixo == ".csv":
        return pd.read_csv(path, dtype="string", sep=None, engine="python")
    raise ValueError(f"Formato não suportado: {sufixo or path} (use .xlsx ou .csv)")


# ---------------------------
# loaders públicos
# ---------------------------

def load_produtos(path: str) -> List[Dict[str, Any]]:
    """Lê a planilha de produtos.

    Campos de saída (chaves do dict por linha):
      - sku, name, category, supplier: str | None
      - quantity, min_threshold: int | None (texto se inválido)
      - price: float | None (texto se inválido)
    """
    df = _normalize_columns(_ler_tabela(path))
    out: List[Dict[str, Any]] = []
    for _, row in df.iterrows():
        rec = {
            "sku": _safe_get(row, "sku"),
            "name": _safe_get(row, "name"),
            "category": _safe_get(row, "category"),
            "quantity": _to_int(_safe_get(row, "quantity")),
            "min_threshold": _to_int(_safe_get(row, "min_threshold")),
            "price": _to_price(_safe_get(row, "price")),
            "supplier": _safe_get(row, "supplier"),
        }
        if all(v is None for v in rec.values()):
            continue
        out.append(rec)
    return out


# ---------------------------
# exportação
# ---------------------------

COLUNAS_MOVIMENTACOES = {
    "data": "Data",
    "produto": "Produto",
    "product_id": "Id produto",
    "tipo": "Tipo",
    "quantidade": "Quantidade",
    "usuario": "Usuário",
    "id": "Id",
}


def exportar_movimentacoes(linhas: List[Dict[str, Any]], path: str) -> int:
    """Grava o diário (linhas de ``relatorios.listar_movimentacoes``) em CSV ou XLSX."""
    df = pd.DataFrame(linhas, columns=list(COLUNAS_MOVIMENTACOES)).rename(columns=COLUNAS_MOVIMENTACOES)
    destino = Path(path)
    destino.parent.mkdir(parents=True, exist_ok=True)
    sufixo = destino.suffix.lower()
    if sufixo == ".xlsx":
        df.to_excel(destino, index=False, engine="openpyxl")
    elif sufixo == ".csv":
        df.to_csv(destino, index=False, encoding="utf-8")
    else:
        raise ValueError(f"Formato não suportado: {sufixo or path} (use .xlsx ou .csv)")
    return len(df)
