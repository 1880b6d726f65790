"""
Utilidades de parsing para valores digitados na linha de comando e em planilhas.

- valores monetários com separadores variados ("1 650 000 FCFA", "5,5",
  "1.234,56", "1,234.56");
- itens de carrinho no formato "PRODUTO:QTD";
- distribuição manual de pagamento no formato "PRODUTO=VALOR".
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Tuple

_LIXO_RE = re.compile(r"[^0-9.,\-]")


def parse_valor_raw(txt) -> Optional[float]:
    """Interpreta um valor monetário.

    Espaços (inclusive não separáveis) e texto de moeda são descartados.
    Quando há ponto e vírgula, o último a aparecer é o separador decimal.
    Só com vírgula: uma vírgula seguida de 1 ou 2 dígitos é decimal, senão é
    separador de milhar. Só com ponto: vários pontos são milhar, um ponto é
    decimal.

    Exemplos:
        "1 650 000 FCFA" → 1650000.0
        "5,5"            → 5.5
        "1.234,56"       → 1234.56
        "1,234.56"       → 1234.56
        "abc"            → None

    Returns:
        O valor, ou None se não houver número.
    """
    if txt is None:
        return None
    if isinstance(txt, (int, float)):
        return float(txt)
    s = _LIXO_RE.sub("", str(txt))
    if not s or not re.search(r"\d", s):
        return None

    if "." in s and "," in s:
        if s.rfind(",") > s.rfind("."):
            s = s.replace(".", "").replace(",", ".")
        else:
            s = s.replace(",", "")
    elif "," in s:
        if s.count(",") == 1 and re.search(r",\d{1,2}$", s):
            s = s.replace(",", ".")
        else:
            s = s.replace(",", "")
    elif s.count(".") > 1:
        s = s.replace(".", "")

    try:
        return float(s)
    except ValueError:
        return None


def parse_item_carrinho(txt: str) -> Tuple[str, int]:
    """ "PRD-1:3" → ("PRD-1", 3); sem quantidade assume 1."""
    s = (txt or "").strip()
    if not s:
        raise ValueError("Item de carrinho vazio.")
    pid, _, qtd = s.partition(":")
    pid = pid.strip()
    if not pid:
        raise ValueError(f"Item de carrinho sem produto: {txt}")
    if not qtd.strip():
        return pid, 1
    try:
        n = int(qtd.strip())
    except ValueError:
        raise ValueError(f"Quantidade inválida em '{txt}' (use PRODUTO:QTD)")
    if n <= 0:
        raise ValueError(f"Quantidade deve ser positiva em '{txt}'")
    return pid, n


def parse_carrinho(itens: Iterable[str]) -> List[Tuple[str, int]]:
    return [parse_item_carrinho(i) for i in itens]


def parse_distribuicao(entradas: Iterable[str]) -> Dict[str, float]:
    """["PRD-1=30", "PRD-2=1 500"] → {"PRD-1": 30.0, "PRD-2": 1500.0}.

    Repetições do mesmo produto somam.
    """
    out: Dict[str, float] = {}
    for txt in entradas:
        pid, sep, valor = (txt or "").partition("=")
        pid = pid.strip()
        if not sep or not pid:
            raise ValueError(f"Distribuição inválida: '{txt}' (use PRODUTO=VALOR)")
        v = parse_valor_raw(valor)
        if v is None:
            raise ValueError(f"Valor inválido em '{txt}'")
        out[pid] = out.get(pid, 0.0) + v
    return out
