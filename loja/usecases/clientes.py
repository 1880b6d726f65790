"""
UC: Cadastro de clientes.
"""

from __future__ import annotations

from typing import Any, Optional

from loja.domain.models import Cliente, EstadoLoja
from loja.domain.policies import novo_id
from loja.infra.logger import log_transaction


CAMPOS_CLIENTE = ("name", "email", "phone", "address", "company")


def _normalize_str(x: Any) -> Optional[str]:
    if x is None:
        return None
    s = str(x).strip()
    return s or None


def cadastrar_cliente(
    estado: EstadoLoja,
    name: str,
    phone: str,
    email: str = "",
    address: str = "",
    company: Optional[str] = None,
    client_id: Optional[str] = None,
) -> Cliente:
    """Cadastra um cliente. Nome e telefone são obrigatórios."""
    name = _normalize_str(name)
    phone = _normalize_str(phone)
    if not name or not phone:
        raise ValueError("Nome e telefone do cliente são obrigatórios.")
    if client_id and estado.cliente(client_id):
        raise ValueError(f"Já existe cliente com id {client_id}.")
    cliente = Cliente(
        id=client_id or novo_id("CL"),
        name=name,
        email=_normalize_str(email) or "",
        phone=phone,
        address=_normalize_str(address) or "",
        company=_normalize_str(company),
    )
    estado.clientes.append(cliente)
    log_transaction("cadastrar_cliente", {"id": cliente.id}, result="success")
    return cliente


def editar_cliente(estado: EstadoLoja, client_id: str, **campos: Any) -> Cliente:
    """Edição explícita de um cliente (pedidos continuam apontando para o mesmo id)."""
    cliente = estado.cliente(client_id)
    if cliente is None:
        raise ValueError(f"Cliente não encontrado: {client_id}")
    desconhecidos = set(campos) - set(CAMPOS_CLIENTE)
    if desconhecidos:
        raise ValueError(f"Campos não editáveis: {', '.join(sorted(desconhecidos))}")
    for chave in ("name", "phone"):
        if chave in campos and campos[chave] is not None and not _normalize_str(campos[chave]):
            raise ValueError("Nome e telefone do cliente são obrigatórios.")

    for chave, valor in campos.items():
        if valor is None:
            continue
        if chave == "company":
            cliente.company = _normalize_str(valor)
        else:
            setattr(cliente, chave, _normalize_str(valor) or "")
    log_transaction("editar_cliente", {"id": client_id, "campos": sorted(campos)}, result="success")
    return cliente
