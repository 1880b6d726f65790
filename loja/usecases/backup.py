"""
UC: Backup, restauração e reset.

- exportar_snapshot(): documento único com todas as coleções, a
  configuração, a data do backup e a versão do formato.
- salvar_backup(path): grava o documento em JSON.
- restaurar_snapshot(doc) / restaurar_arquivo(path): valida o documento
  inteiro e só então substitui TODAS as coleções (não é merge). Documento
  inválido não altera nada.
- resetar(): volta o estado aos valores padrão.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from loja.adapters.schemas import ErroValidacaoBackup, validar_documento
from loja.config import DEFAULTS
from loja.domain.models import (
    Cliente,
    ConfigLoja,
    Entrega,
    EstadoLoja,
    Movimentacao,
    Pedido,
    Produto,
)
from loja.infra.logger import log_file_operation, log_system_event, log_transaction


def nome_arquivo_backup(agora: Optional[datetime] = None) -> str:
    return f"stockmaster_db_{(agora or datetime.now()).date().isoformat()}.json"


def exportar_snapshot(estado: EstadoLoja, agora: Optional[datetime] = None) -> Dict[str, Any]:
    return {
        "products": [p.para_dict() for p in estado.produtos],
        "clients": [c.para_dict() for c in estado.clientes],
        "orders": [o.para_dict() for o in estado.pedidos],
        "deliveries": [e.para_dict() for e in estado.entregas],
        "transactions": [m.para_dict() for m in estado.movimentacoes],
        "storeConfig": estado.config.para_dict(),
        "backupDate": (agora or datetime.now()).isoformat(timespec="seconds"),
        "version": DEFAULTS.versao_backup,
    }


def salvar_backup(estado: EstadoLoja, path: str) -> Dict[str, Any]:
    doc = exportar_snapshot(estado)
    destino = Path(path)
    destino.parent.mkdir(parents=True, exist_ok=True)
    destino.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")
    log_file_operation("backup", str(destino), rows_processed=len(doc["products"]) + len(doc["orders"]))
    return {"arquivo": str(destino), "produtos": len(doc["products"]), "pedidos": len(doc["orders"])}


def documento_para_estado(documento: Any) -> EstadoLoja:
    """Valida o documento e monta um EstadoLoja novo (sem tocar no atual)."""
    doc = validar_documento(documento).model_dump(by_alias=True)
    return EstadoLoja(
        produtos=[Produto.de_dict(d) for d in doc["products"]],
        clientes=[Cliente.de_dict(d) for d in doc["clients"]],
        pedidos=[Pedido.de_dict(d) for d in doc["orders"]],
        entregas=[Entrega.de_dict(d) for d in doc["deliveries"]],
        movimentacoes=[Movimentacao.de_dict(d) for d in doc["transactions"]],
        config=ConfigLoja.de_dict(doc["storeConfig"]),
    )


def _substituir(estado: EstadoLoja, novo: EstadoLoja) -> None:
    estado.produtos = novo.produtos
    estado.clientes = novo.clientes
    estado.pedidos = novo.pedidos
    estado.entregas = novo.entregas
    estado.movimentacoes = novo.movimentacoes
    estado.config = novo.config


def restaurar_snapshot(estado: EstadoLoja, documento: Any) -> Dict[str, int]:
    """Substitui todo o estado pelo conteúdo do documento.

    Raises:
        ErroValidacaoBackup: documento inválido (estado intacto).
    """
    log_system_event("restaurar_start")
    try:
        novo = documento_para_estado(documento)
    except ErroValidacaoBackup as e:
        log_transaction("restaurar_backup", {}, error=str(e))
        log_system_event("restaurar_rejeitado", {"erros": e.erros}, level="warning")
        raise
    _substituir(estado, novo)
    result = {
        "produtos": len(novo.produtos),
        "clientes": len(novo.clientes),
        "pedidos": len(novo.pedidos),
        "entregas": len(novo.entregas),
        "movimentacoes": len(novo.movimentacoes),
    }
    log_transaction("restaurar_backup", {}, result=result)
    return result


def ler_backup(path: str) -> Any:
    try:
        texto = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ErroValidacaoBackup([f"arquivo: não foi possível ler {path} ({e})"]) from e
    try:
        return json.loads(texto)
    except ValueError as e:
        raise ErroValidacaoBackup([f"arquivo: JSON inválido ({e})"]) from e


def restaurar_arquivo(estado: EstadoLoja, path: str) -> Dict[str, int]:
    log_file_operation("restore", path)
    return restaurar_snapshot(estado, ler_backup(path))


def resetar(estado: EstadoLoja) -> None:
    """Apaga todas as coleções e volta a configuração ao padrão."""
    _substituir(estado, EstadoLoja())
    log_system_event("reset_total", level="warning")
