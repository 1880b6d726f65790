"""Schema of the backup (snapshot) document.

The document shape is the one written by the export: top-level
``products`` (required list), ``clients``, ``orders``, ``deliveries``,
``transactions``, ``storeConfig``, ``backupDate`` and ``version``. Optional
collections that are absent, null or empty fall back to their defaults.
Unknown keys are ignored.

Backups written by the browser version of the store may carry products with
negative stock and zero-quantity stock movements; both are accepted.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from loja.config import DEFAULTS


class _Registro(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ============================================================================
# RECORDS
# ============================================================================


class ProdutoSchema(_Registro):
    id: str
    sku: str = ""
    name: str = ""
    category: str = ""
    quantity: int = 0
    min_threshold: int = Field(0, ge=0, alias="minThreshold")
    price: float = Field(0.0, ge=0)
    supplier: str = ""
    last_updated: str = Field("", alias="lastUpdated")


class ClienteSchema(_Registro):
    id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    company: Optional[str] = None


class ItemPedidoSchema(_Registro):
    product_id: str = Field(..., alias="productId")
    quantity: int = Field(..., gt=0)
    unit_price: float = Field(..., ge=0, alias="unitPrice")
    paid_amount: float = Field(0.0, ge=0, alias="paidAmount")


class PagamentoSchema(_Registro):
    id: str
    amount: float = Field(..., gt=0)
    date: str = ""
    method: str = ""
    reference: Optional[str] = None
    note: Optional[str] = None
    affected_product_ids: List[str] = Field(default_factory=list, alias="affectedProductIds")


class ParcelaSchema(_Registro):
    id: str
    amount: float = 0.0
    due_date: str = Field("", alias="dueDate")
    status: str = "pending"


class PedidoSchema(_Registro):
    id: str
    client_id: str = Field(..., alias="clientId")
    items: List[ItemPedidoSchema] = Field(default_factory=list)
    status: Optional[str] = None
    date: str = ""
    total_amount: float = Field(0.0, ge=0, alias="totalAmount")
    paid_amount: float = Field(0.0, ge=0, alias="paidAmount")
    payments: List[PagamentoSchema] = Field(default_factory=list)
    schedules: List[ParcelaSchema] = Field(default_factory=list)


class EntregaSchema(_Registro):
    id: str
    order_id: str = Field(..., alias="orderId")
    carrier: str = ""
    tracking_number: str = Field("", alias="trackingNumber")
    status: str = "pending_shipment"
    estimated_arrival: str = Field("", alias="estimatedArrival")
    actual_arrival: Optional[str] = Field(None, alias="actualArrival")
    shipped_date: Optional[str] = Field(None, alias="shippedDate")
    notes: Optional[str] = None


class MovimentacaoSchema(_Registro):
    id: str
    product_id: str = Field(..., alias="productId")
    type: str
    quantity: int = Field(..., ge=0)
    date: str = ""
    user: str = ""

    @field_validator("type")
    @classmethod
    def tipo_valido(cls, v: str) -> str:
        if v not in ("IN", "OUT"):
            raise ValueError("type deve ser IN ou OUT")
        return v


class ConfigLojaSchema(_Registro):
    name: str = ""
    logo_url: str = Field("", alias="logoUrl")
    address: str = ""
    email: str = ""
    phone: str = ""
    slogan: str = ""
    pin_code: str = Field("0000", alias="pinCode", pattern=r"^[0-9]{4}$")


# ============================================================================
# DOCUMENT
# ============================================================================


class BackupDocumento(_Registro):
    products: List[ProdutoSchema]
    clients: List[ClienteSchema] = Field(default_factory=list)
    orders: List[PedidoSchema] = Field(default_factory=list)
    deliveries: List[EntregaSchema] = Field(default_factory=list)
    transactions: List[MovimentacaoSchema] = Field(default_factory=list)
    store_config: ConfigLojaSchema = Field(
        default_factory=lambda: ConfigLojaSchema(**DEFAULTS.loja_padrao), alias="storeConfig"
    )
    backup_date: Optional[str] = Field(None, alias="backupDate")
    version: Optional[str] = None

    @field_validator("clients", "orders", "deliveries", "transactions", mode="before")
    @classmethod
    def colecao_vazia(cls, v: Any) -> Any:
        return v or []

    @field_validator("store_config", mode="before")
    @classmethod
    def config_vazia(cls, v: Any) -> Any:
        return v or dict(DEFAULTS.loja_padrao)

    @field_validator("version", mode="before")
    @classmethod
    def versao_texto(cls, v: Any) -> Any:
        return None if v is None else str(v)


class ErroValidacaoBackup(ValueError):
    """Documento de backup rejeitado; ``erros`` lista os problemas por campo."""

    def __init__(self, erros: List[str]):
        self.erros = list(erros)
        super().__init__("Backup inválido: " + "; ".join(self.erros))


def validar_documento(documento: Any) -> BackupDocumento:
    """Valida o documento inteiro e devolve o modelo tipado.

    Raises:
        ErroValidacaoBackup: com uma mensagem por campo inválido.
    """
    if not isinstance(documento, dict):
        raise ErroValidacaoBackup(["documento: deve ser um objeto JSON"])
    if not isinstance(documento.get("products"), list):
        raise ErroValidacaoBackup(["products: ausente ou não é uma lista"])
    try:
        return BackupDocumento.model_validate(documento)
    except ValidationError as e:
        erros = []
        for err in e.errors():
            local = ".".join(str(p) for p in err["loc"])
            erros.append(f"{local}: {err['msg']}")
        raise ErroValidacaoBackup(erros) from e
