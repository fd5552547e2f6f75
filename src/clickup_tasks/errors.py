"""
Exceções do serviço de tasks do ClickUp.

Toda falha de módulo é relançada com uma mensagem que nomeia a operação e os
identificadores envolvidos, preservando o tipo (kind) do erro original.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(str, Enum):
    """Categorias de erro expostas à camada de protocolo."""
    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    RATE_LIMIT = "rate_limit"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    READ_ONLY = "read_only"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class ClickUpError(Exception):
    """Exceção base para erros do ClickUp MCP."""

    default_code = ErrorCode.UNKNOWN

    def __init__(self, message: str, code: Optional[ErrorCode] = None, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.code = code or self.default_code
        self.context = context or {}
        super().__init__(message)

    def with_context(self, message: str) -> "ClickUpError":
        """
        Retorna uma cópia do erro com a mensagem prefixada.

        O tipo e os atributos (status_code, candidates, ...) são mantidos,
        de modo que o chamador ainda consegue distinguir NotFound de
        Ambiguous depois de várias camadas de contexto.
        """
        wrapped = self.__class__.__new__(self.__class__)
        wrapped.__dict__.update(self.__dict__)
        wrapped.message = f"{message}: {self.message}"
        wrapped.args = (wrapped.message,)
        return wrapped


class ClickUpServiceError(ClickUpError):
    """Erro inesperado encapsulado pela camada de serviço."""
    pass


class ConfigurationError(ClickUpError):
    """Erro de configuração (variáveis de ambiente, etc)."""
    default_code = ErrorCode.CONFIGURATION


class ReadOnlyModeError(ClickUpError):
    """Erro quando operação de escrita é bloqueada em modo read-only."""
    default_code = ErrorCode.READ_ONLY


class ValidationError(ClickUpError):
    """Erro de validação de entrada."""
    default_code = ErrorCode.VALIDATION


class NotFoundError(ClickUpError):
    """Task, campo ou recurso inexistente."""
    default_code = ErrorCode.NOT_FOUND


class AmbiguousMatchError(ClickUpError):
    """Nome de task que corresponde a várias tasks."""

    default_code = ErrorCode.AMBIGUOUS

    def __init__(self, message: str, candidates: Optional[List[Dict[str, Any]]] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context=context)
        self.candidates = candidates or []


def _code_for_status(status_code: Optional[int]) -> ErrorCode:
    if status_code is None:
        return ErrorCode.NETWORK_ERROR
    if status_code in (401, 403):
        return ErrorCode.UNAUTHORIZED
    if status_code == 404:
        return ErrorCode.NOT_FOUND
    if status_code == 429:
        return ErrorCode.RATE_LIMIT
    if status_code >= 500:
        return ErrorCode.SERVER_ERROR
    if status_code in (400, 422):
        return ErrorCode.VALIDATION
    return ErrorCode.UNKNOWN


class ClickUpAPIError(ClickUpError):
    """Erro retornado pela API do ClickUp (ou falha de transporte)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        err_code: Optional[str] = None,
        body: Any = None
    ):
        self.status_code = status_code
        self.endpoint = endpoint
        self.err_code = err_code
        self.body = body
        status = status_code if status_code is not None else "network"
        super().__init__(
            f"[{status}] {message} (endpoint: {endpoint})",
            code=_code_for_status(status_code)
        )
