"""
Configuração do servidor via variáveis de ambiente.

Todas as variáveis são lidas uma única vez no import. O serviço recebe
esses valores na construção e não os altera depois.
"""

import os
import sys

from loguru import logger

from clickup_tasks.errors import ConfigurationError

# ============================================================================
# CONFIGURAÇÃO
# ============================================================================

API_BASE_URL = os.environ.get("CLICKUP_BASE_URL", "https://api.clickup.com/api/v2")
API_KEY = os.environ.get("CLICKUP_API_KEY", "")
TEAM_ID = os.environ.get("CLICKUP_TEAM_ID", "")
DEFAULT_TIMEOUT = float(os.environ.get("DEFAULT_TIMEOUT", "30.0"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FILE = os.environ.get("LOG_FILE", "")

# Busca por nome
SEARCH_MAX_PAGES = int(os.environ.get("SEARCH_MAX_PAGES", "10"))  # páginas de 100 tasks
FUZZY_MATCH_THRESHOLD = float(os.environ.get("FUZZY_MATCH_THRESHOLD", "0.8"))

# Modo operacional
READ_ONLY_MODE = os.environ.get("READ_ONLY_MODE", "false").lower() == "true"

# Permite startup sem credenciais (útil para testes)
_PYTEST_RUNNING = "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ
ALLOW_MISSING_TOKEN = os.environ.get("ALLOW_MISSING_TOKEN", "false").lower() == "true" or _PYTEST_RUNNING

REQUIRED_VARS = ["CLICKUP_API_KEY", "CLICKUP_TEAM_ID"]
OPTIONAL_VARS = [
    "CLICKUP_BASE_URL",
    "DEFAULT_TIMEOUT",
    "LOG_LEVEL",
    "LOG_FILE",
    "SEARCH_MAX_PAGES",
    "FUZZY_MATCH_THRESHOLD",
    "READ_ONLY_MODE",
    "ALLOW_MISSING_TOKEN",
]


def validate_config() -> None:
    """
    Valida configuração no startup. Fail-fast para variáveis obrigatórias.

    Raises:
        ConfigurationError: Se variável obrigatória não está configurada

    Note:
        Configure ALLOW_MISSING_TOKEN=true para testes sem credenciais reais.
    """
    missing = [var for var in REQUIRED_VARS if not os.environ.get(var)]

    if missing and not ALLOW_MISSING_TOKEN:
        error_msg = f"Variáveis de ambiente obrigatórias não configuradas: {', '.join(missing)}"
        logger.error(error_msg)
        raise ConfigurationError(error_msg)
    elif missing:
        logger.warning(f"Variáveis não configuradas (permitido por ALLOW_MISSING_TOKEN): {', '.join(missing)}")

    # Warning para desconhecidas (possível typo)
    known_vars = set(REQUIRED_VARS + OPTIONAL_VARS)
    env_vars = {k for k in os.environ if k.startswith("CLICKUP_")}
    for var in sorted(env_vars - known_vars):
        logger.warning(f"Variável desconhecida ignorada (possível typo?): {var}")

    mode = "READ_ONLY" if READ_ONLY_MODE else "READ_WRITE"
    logger.info(f"Configuração validada | Modo: {mode}")
