import os
import tempfile
from pathlib import Path

# Logs dos testes fora da árvore do pacote (precisa valer antes do import de loja.infra.logger)
os.environ.setdefault("LOJA_LOGS_DIR", str(Path(tempfile.gettempdir()) / "loja-test-logs"))
