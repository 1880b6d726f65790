# loja/domain/models.py
"""
Modelos (dataclasses) do domínio.

Observação importante:
- Os campos espelham as chaves do documento persistido (camelCase no JSON,
  snake_case aqui). ``para_dict``/``de_dict`` fazem a conversão.
- Pedidos, entregas e movimentações referenciam produtos e clientes apenas
  por id (referência fraca). A resolução é feita por ``EstadoLoja`` e tolera
  referências órfãs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from loja.config import DEFAULTS
from loja.domain.policies import (
    CLIENTE_DESCONHECIDO,
    PRODUTO_DESCONHECIDO,
    arredonda_valor,
    status_pagamento,
)


def _int(val: Any, default: int = 0) -> int:
    try:
        return int(val)
    except (TypeError, ValueError):
        return default


def _float(val: Any, default: float = 0.0) -> float:
    try:
        return float(val)
    except (TypeError, ValueError):
        return default


def _str(val: Any, default: str = "") -> str:
    return default if val is None else str(val)


@dataclass
class Produto:
    """Cadastro de produto do catálogo."""
    id: str
    sku: str = ""
    name: str = ""
    category: str = ""
    quantity: int = 0               # >= 0
    min_threshold: int = 0          # >= 0
    price: float = 0.0
    supplier: str = ""
    last_updated: str = ""

    def para_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sku": self.sku,
            "name": self.name,
            "category": self.category,
            "quantity": self.quantity,
            "minThreshold": self.min_threshold,
            "price": self.price,
            "supplier": self.supplier,
            "lastUpdated": self.last_updated,
        }

    @classmethod
    def de_dict(cls, d: Dict[str, Any]) -> "Produto":
        return cls(
            id=_str(d.get("id")),
            sku=_str(d.get("sku")),
            name=_str(d.get("name")),
            category=_str(d.get("category")),
            quantity=_int(d.get("quantity")),
            min_threshold=_int(d.get("minThreshold")),
            price=_float(d.get("price")),
            supplier=_str(d.get("supplier")),
            last_updated=_str(d.get("lastUpdated")),
        )


@dataclass
class Cliente:
    """Cadastro de cliente."""
    id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    company: Optional[str] = None

    def para_dict(self) -> Dict[str, Any]:
        d = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
        }
        if self.company is not None:
            d["company"] = self.company
        return d

    @classmethod
    def de_dict(cls, d: Dict[str, Any]) -> "Cliente":
        return cls(
            id=_str(d.get("id")),
            name=_str(d.get("name")),
            email=_str(d.get("email")),
            phone=_str(d.get("phone")),
            address=_str(d.get("address")),
            company=d.get("company"),
        )


@dataclass
class ItemPedido:
    """Linha de pedido: unidade de alocação de pagamento."""
    product_id: str
    quantity: int
    unit_price: float               # preço congelado no momento do pedido
    paid_amount: float = 0.0

    @property
    def total(self) -> float:
        return arredonda_valor(self.quantity * self.unit_price)

    @property
    def saldo(self) -> float:
        """Valor ainda devido nesta linha."""
        return arredonda_valor(self.total - self.paid_amount)

    def para_dict(self) -> Dict[str, Any]:
        return {
            "productId": self.product_id,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "paidAmount": self.paid_amount,
        }

    @classmethod
    def de_dict(cls, d: Dict[str, Any]) -> "ItemPedido":
        return cls(
            product_id=_str(d.get("productId")),
            quantity=_int(d.get("quantity")),
            unit_price=_float(d.get("unitPrice")),
            paid_amount=_float(d.get("paidAmount")),
        )


@dataclass(frozen=True)
class Pagamento:
    """Lançamento de pagamento. Imutável depois de criado."""
    id: str
    amount: float
    date: str
    method: str
    reference: Optional[str] = None
    note: Optional[str] = None
    affected_product_ids: tuple = ()

    def para_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "amount": self.amount,
            "date": self.date,
            "method": self.method,
            "affectedProductIds": list(self.affected_product_ids),
        }
        if self.reference is not None:
            d["reference"] = self.reference
        if self.note is not None:
            d["note"] = self.note
        return d

    @classmethod
    def de_dict(cls, d: Dict[str, Any]) -> "Pagamento":
        return cls(
            id=_str(d.get("id")),
            amount=_float(d.get("amount")),
            date=_str(d.get("date")),
            method=_str(d.get("method")),
            reference=d.get("reference"),
            note=d.get("note"),
            affected_product_ids=tuple(d.get("affectedProductIds") or ()),
        )


@dataclass
class ParcelaPagamento:
    """Parcela de um plano de pagamento (reservado; não é gerada pelo razão)."""
    id: str
    amount: float
    due_date: str
    status: str = "pending"         # 'pending' | 'paid' | 'overdue'

    def para_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "amount": self.amount, "dueDate": self.due_date, "status": self.status}

    @classmethod
    def de_dict(cls, d: Dict[str, Any]) -> "ParcelaPagamento":
        return cls(
            id=_str(d.get("id")),
            amount=_float(d.get("amount")),
            due_date=_str(d.get("dueDate")),
            status=_str(d.get("status"), "pending"),
        )


@dataclass
class Pedido:
    """Pedido de venda.

    ``status`` não é um campo: é derivado de ``paid_amount`` e
    ``total_amount`` a cada leitura.
    """
    id: str
    client_id: str
    items: List[ItemPedido] = field(default_factory=list)
    date: str = ""
    total_amount: float = 0.0       # fixado na criação
    paid_amount: float = 0.0        # soma de todos os pagamentos aplicados
    payments: List[Pagamento] = field(default_factory=list)
    schedules: List[ParcelaPagamento] = field(default_factory=list)

    @property
    def status(self) -> str:
        return status_pagamento(self.paid_amount, self.total_amount)

    @property
    def saldo(self) -> float:
        return arredonda_valor(max(0.0, self.total_amount - self.paid_amount))

    @property
    def pago_em_linhas(self) -> float:
        return arredonda_valor(sum(i.paid_amount for i in self.items))

    @property
    def credito(self) -> float:
        """Valor pago além das alocações por linha (política 'credito')."""
        return arredonda_valor(max(0.0, self.paid_amount - self.pago_em_linhas))

    def item(self, product_id: str) -> Optional[ItemPedido]:
        for it in self.items:
            if it.product_id == product_id:
                return it
        return None

    def para_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "clientId": self.client_id,
            "items": [i.para_dict() for i in self.items],
            "status": self.status,
            "date": self.date,
            "totalAmount": self.total_amount,
            "paidAmount": self.paid_amount,
            "payments": [p.para_dict() for p in self.payments],
            "schedules": [s.para_dict() for s in self.schedules],
        }

    @classmethod
    def de_dict(cls, d: Dict[str, Any]) -> "Pedido":
        # 'status' gravado é ignorado: é sempre recalculado
        return cls(
            id=_str(d.get("id")),
            client_id=_str(d.get("clientId")),
            items=[ItemPedido.de_dict(i) for i in d.get("items") or []],
            date=_str(d.get("date")),
            total_amount=_float(d.get("totalAmount")),
            paid_amount=_float(d.get("paidAmount")),
            payments=[Pagamento.de_dict(p) for p in d.get("payments") or []],
            schedules=[ParcelaPagamento.de_dict(s) for s in d.get("schedules") or []],
        )


@dataclass
class Entrega:
    """Expedição vinculada (por referência) a um pedido."""
    id: str
    order_id: str
    carrier: str = ""
    tracking_number: str = ""
    status: str = "pending_shipment"
    estimated_arrival: str = ""     # YYYY-MM-DD
    actual_arrival: Optional[str] = None
    shipped_date: Optional[str] = None
    notes: Optional[str] = None

    def para_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "orderId": self.order_id,
            "carrier": self.carrier,
            "trackingNumber": self.tracking_number,
            "status": self.status,
            "estimatedArrival": self.estimated_arrival,
        }
        for chave, val in (
            ("actualArrival", self.actual_arrival),
            ("shippedDate", self.shipped_date),
            ("notes", self.notes),
        ):
            if val is not None:
                d[chave] = val
        return d

    @classmethod
    def de_dict(cls, d: Dict[str, Any]) -> "Entrega":
        return cls(
            id=_str(d.get("id")),
            order_id=_str(d.get("orderId")),
            carrier=_str(d.get("carrier")),
            tracking_number=_str(d.get("trackingNumber")),
            status=_str(d.get("status"), "pending_shipment"),
            estimated_arrival=_str(d.get("estimatedArrival")),
            actual_arrival=d.get("actualArrival"),
            shipped_date=d.get("shippedDate"),
            notes=d.get("notes"),
        )


@dataclass(frozen=True)
class Movimentacao:
    """Movimentação de estoque (IN/OUT). Somente inclusão."""
    id: str
    product_id: str
    type: str                       # 'IN' | 'OUT'
    quantity: int                   # > 0, delta absoluto
    date: str
    user: str

    def para_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "productId": self.product_id,
            "type": self.type,
            "quantity": self.quantity,
            "date": self.date,
            "user": self.user,
        }

    @classmethod
    def de_dict(cls, d: Dict[str, Any]) -> "Movimentacao":
        return cls(
            id=_str(d.get("id")),
            product_id=_str(d.get("productId")),
            type=_str(d.get("type")),
            quantity=_int(d.get("quantity")),
            date=_str(d.get("date")),
            user=_str(d.get("user")),
        )


@dataclass
class ConfigLoja:
    """Configuração única da loja (marca e PIN)."""
    name: str = ""
    logo_url: str = ""
    address: str = ""
    email: str = ""
    phone: str = ""
    slogan: str = ""
    pin_code: str = "0000"

    def para_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "logoUrl": self.logo_url,
            "address": self.address,
            "email": self.email,
            "phone": self.phone,
            "slogan": self.slogan,
            "pinCode": self.pin_code,
        }

    @classmethod
    def de_dict(cls, d: Dict[str, Any]) -> "ConfigLoja":
        return cls(
            name=_str(d.get("name")),
            logo_url=_str(d.get("logoUrl")),
            address=_str(d.get("address")),
            email=_str(d.get("email")),
            phone=_str(d.get("phone")),
            slogan=_str(d.get("slogan")),
            pin_code=_str(d.get("pinCode"), "0000"),
        )

    @classmethod
    def padrao(cls) -> "ConfigLoja":
        return cls.de_dict(DEFAULTS.loja_padrao)


@dataclass
class EstadoLoja:
    """Estado completo da aplicação (todas as coleções + configuração).

    Pedidos, entregas e movimentações ficam do mais recente para o mais
    antigo, a mesma ordem dos arrays do backup.
    """
    produtos: List[Produto] = field(default_factory=list)
    clientes: List[Cliente] = field(default_factory=list)
    pedidos: List[Pedido] = field(default_factory=list)
    entregas: List[Entrega] = field(default_factory=list)
    movimentacoes: List[Movimentacao] = field(default_factory=list)
    config: ConfigLoja = field(default_factory=ConfigLoja.padrao)

    # --------- resolução de referências fracas ---------

    def produto(self, product_id: str) -> Optional[Produto]:
        for p in self.produtos:
            if p.id == product_id:
                return p
        return None

    def cliente(self, client_id: str) -> Optional[Cliente]:
        for c in self.clientes:
            if c.id == client_id:
                return c
        return None

    def pedido(self, order_id: str) -> Optional[Pedido]:
        for o in self.pedidos:
            if o.id == order_id:
                return o
        return None

    def entrega(self, delivery_id: str) -> Optional[Entrega]:
        for e in self.entregas:
            if e.id == delivery_id:
                return e
        return None

    def entrega_do_pedido(self, order_id: str) -> Optional[Entrega]:
        for e in self.entregas:
            if e.order_id == order_id:
                return e
        return None

    def nome_produto(self, product_id: str) -> str:
        p = self.produto(product_id)
        return p.name if p else PRODUTO_DESCONHECIDO

    def nome_cliente(self, client_id: str) -> str:
        c = self.cliente(client_id)
        return c.name if c else CLIENTE_DESCONHECIDO
