# loja/config.py
"""
Configurações globais e valores padrão da loja.
"""

import os
from dataclasses import dataclass, field
from typing import Dict


# Caminho padrão do banco de dados SQLite
DB_PATH = os.path.join(os.getcwd(), "loja.db")

# Políticas aceitas para pagamento acima do saldo devedor
POLITICA_LIMITAR = "limitar"
POLITICA_CREDITO = "credito"


def _loja_padrao() -> Dict[str, str]:
    return {
        "name": "STOCKMASTER PRO",
        "logoUrl": "",
        "address": "Avenue des Affaires, Immeuble Alpha",
        "email": "contact@stockmaster.pro",
        "phone": "+225 01 02 03 04 05",
        "slogan": "L'ERP Nouvelle Génération",
        "pinCode": "0000",
    }


@dataclass
class DefaultConfig:
    """Valores padrão para parâmetros do sistema."""
    prazo_entrega_dias: int = 7          # estimatedArrival = criação + N dias
    versao_backup: str = "2.0"
    usuario_padrao: str = "Admin"        # usuário gravado nas movimentações
    limiar_minimo_padrao: int = 5
    categoria_padrao: str = "Geral"
    fornecedor_padrao: str = "Desconhecido"
    politica_excedente: str = POLITICA_LIMITAR
    modelo_insights: str = "gemini-3-flash-preview"
    timeout_insights: float = 30.0
    loja_padrao: Dict[str, str] = field(default_factory=_loja_padrao)


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()


def api_key_insights() -> str:
    """Chave do serviço de geração de texto (lida a cada chamada)."""
    return os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY") or ""
