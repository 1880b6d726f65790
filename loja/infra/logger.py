# loja/infra/logger.py
"""
Sistema de logging das operações da loja.

Este módulo configura e fornece loggers para registrar as operações
críticas do sistema: pedidos, pagamentos, movimentações de estoque,
gravações no banco e eventos gerais (backup, restauração, falhas).
"""

import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional


# Flag global para habilitar/desabilitar logging
ENABLE_LOGGING = os.environ.get("LOJA_LOGGING", "0") == "1"

# Configuração base dos loggers
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger específico com arquivo de saída.

    O arquivo só é aberto na primeira mensagem (``delay=True``), então
    importar o módulo com o logging desligado não cria arquivos.

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger configurado
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    file_handler = logging.FileHandler(log_file, encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger

# Diretório base para logs (na pasta do pacote)
BASE_DIR = Path(__file__).parent.parent
LOGS_DIR = Path(os.environ.get("LOJA_LOGS_DIR", str(BASE_DIR / "logs")))

LOG_FILES = {
    "transactions": LOGS_DIR / "transactions.log",
    "pedidos": LOGS_DIR / "pedidos.log",
    "pagamentos": LOGS_DIR / "pagamentos.log",
    "estoque": LOGS_DIR / "estoque.log",
    "database": LOGS_DIR / "database.log",
    "system": LOGS_DIR / "system.log",
}

# Loggers específicos para cada operação
transaction_logger = setup_logger('loja.transactions', str(LOG_FILES["transactions"]))
pedido_logger = setup_logger('loja.pedidos', str(LOG_FILES["pedidos"]))
pagamento_logger = setup_logger('loja.pagamentos', str(LOG_FILES["pagamentos"]))
estoque_logger = setup_logger('loja.estoque', str(LOG_FILES["estoque"]))
database_logger = setup_logger('loja.database', str(LOG_FILES["database"]))
system_logger = setup_logger('loja.system', str(LOG_FILES["system"]))


def log_transaction(operation: str, data: Dict[str, Any], result: Optional[Any] = None, error: Optional[str] = None) -> None:
    """
    Registra uma operação completa (caso de uso) no log.

    Args:
        operation: Nome da operação (registrar_pedido, restaurar_backup, ...)
        data: Dados de entrada
        result: Resultado da operação (opcional)
        error: Mensagem de erro (opcional)
    """
    if not ENABLE_LOGGING:
        return
    if error:
        transaction_logger.error(f"TRANSACTION_FAILED: {operation} - {error} - Data: {data}")
    else:
        transaction_logger.info(f"TRANSACTION_SUCCESS: {operation} - Result: {result} - Data: {data}")

def log_pedido(action: str, pedido_id: str, **kwargs) -> None:
    """Log específico para pedidos (create, update)."""
    if not ENABLE_LOGGING:
        return
    log_data = {"action": action, "pedido": pedido_id, **kwargs}
    pedido_logger.info(f"PEDIDO_{action.upper()}: {log_data}")

def log_pagamento(action: str, pedido_id: str, valor: float, **kwargs) -> None:
    """Log específico para pagamentos aplicados ou rejeitados."""
    if not ENABLE_LOGGING:
        return
    log_data = {"action": action, "pedido": pedido_id, "valor": valor, **kwargs}
    pagamento_logger.info(f"PAGAMENTO_{action.upper()}: {log_data}")

def log_movimentacao(tipo: str, product_id: str, quantidade: int, **kwargs) -> None:
    """
    Log específico para movimentações de estoque.

    Args:
        tipo: IN ou OUT
        product_id: Id do produto
        quantidade: Quantidade movimentada
        **kwargs: Dados adicionais (origem, quantidades antes/depois)
    """
    if not ENABLE_LOGGING:
        return
    log_data = {"tipo": tipo, "produto": product_id, "quantidade": quantidade, **kwargs}
    estoque_logger.info(f"MOVIMENTACAO_{tipo}: {log_data}")

def log_database_operation(table: str, operation: str, affected_rows: int = 0, **kwargs) -> None:
    """
    Log específico para operações no banco de dados.

    Args:
        table: Nome da tabela ou chave gravada
        operation: Operação (LOAD, SAVE, MIGRATE)
        affected_rows: Número de linhas afetadas
        **kwargs: Dados adicionais
    """
    if not ENABLE_LOGGING:
        return
    log_data = {"table": table, "operation": operation, "affected_rows": affected_rows, **kwargs}
    database_logger.info(f"DB_{operation}: {log_data}")

def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Log para eventos do sistema.

    Eventos de nível ``error`` são sempre gravados, mesmo com o logging
    desligado: falhas de gravação não interrompem o uso e este é o único
    lugar onde ficam registradas.

    Args:
        event: Descrição do evento
        details: Detalhes adicionais (opcional)
        level: Nível do log (info, warning, error)
    """
    if not ENABLE_LOGGING and level.lower() != "error":
        return
    log_data = {"event": event, "details": details or {}}
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")

def log_file_operation(operation: str, file_path: str, rows_processed: int = 0, **kwargs) -> None:
    """
    Log para operações de arquivo (importação/exportação/backup).

    Args:
        operation: Tipo de operação (import, export, backup, restore)
        file_path: Caminho do arquivo
        rows_processed: Número de linhas processadas
        **kwargs: Dados adicionais
    """
    if not ENABLE_LOGGING:
        return
    log_data = {"operation": operation, "file_path": file_path, "rows_processed": rows_processed, **kwargs}
    system_logger.info(f"FILE_{operation.upper()}: {log_data}")
