"""
UC: Configuração da loja e acesso por PIN.

O PIN é só uma trava de conveniência na interface (não é fronteira de
segurança): protege edição de configuração, restauração e reset.
"""

from __future__ import annotations

from typing import Any, Optional

from loja.domain.models import ConfigLoja, EstadoLoja
from loja.domain.policies import pin_valido
from loja.infra.logger import log_system_event


CAMPOS_CONFIG = ("name", "logo_url", "address", "email", "phone", "slogan", "pin_code")


def verificar_pin(config: ConfigLoja, pin: Optional[str]) -> bool:
    return pin is not None and str(pin) == config.pin_code


def atualizar_config(estado: EstadoLoja, **campos: Any) -> ConfigLoja:
    """Atualiza campos da configuração; ``pin_code`` precisa ter 4 dígitos."""
    desconhecidos = set(campos) - set(CAMPOS_CONFIG)
    if desconhecidos:
        raise ValueError(f"Campos não editáveis: {', '.join(sorted(desconhecidos))}")
    if campos.get("pin_code") is not None and not pin_valido(str(campos["pin_code"])):
        raise ValueError("O código PIN deve ter exatamente 4 dígitos.")

    for chave, valor in campos.items():
        if valor is not None:
            setattr(estado.config, chave, str(valor))
    log_system_event("config_atualizada", {"campos": sorted(k for k, v in campos.items() if v is not None)})
    return estado.config
