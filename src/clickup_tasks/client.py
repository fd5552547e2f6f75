"""
Adaptador HTTP para a API REST do ClickUp.

Uma requisição por chamada: sem retry, sem cache e sem rate limiting local.
Qualquer status fora de 2xx vira ClickUpAPIError com status e corpo.
"""

import json
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from clickup_tasks import config
from clickup_tasks.errors import ClickUpAPIError


def _expand_list_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Converte parâmetros com lista para o formato `chave[]` do ClickUp.

    `{"statuses": ["open", "done"]}` vira `{"statuses[]": ["open", "done"]}`;
    booleanos viram "true"/"false" e valores None são descartados.
    """
    if not params:
        return None
    expanded: Dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            expanded[key] = str(value).lower()
        elif isinstance(value, (list, tuple)):
            if value:
                list_key = key if key.endswith("[]") else f"{key}[]"
                expanded[list_key] = list(value)
        else:
            expanded[key] = value
    return expanded


class ClickUpClient:
    """Cliente HTTP autenticado com connection pooling."""

    def __init__(
        self,
        api_key: str,
        base_url: str = config.API_BASE_URL,
        timeout: float = config.DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Authorization": self._api_key},
                timeout=self._timeout,
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
                transport=self._transport
            )
        return self._http

    async def aclose(self) -> None:
        if self._http is not None and not self._http.is_closed:
            await self._http.aclose()

    async def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Any] = None,
        files: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Faz uma requisição à API do ClickUp.

        Args:
            method: Método HTTP (GET, POST, PUT, DELETE)
            endpoint: Endpoint da API (sem base URL)
            params: Query parameters
            json_data: Corpo JSON para POST/PUT
            files: Arquivos para upload multipart

        Returns:
            Resposta da API como dicionário (vazio para 204)

        Raises:
            ClickUpAPIError: Status fora de 2xx, timeout ou erro de conexão
        """
        logger.debug(f"API {method} {endpoint}")
        try:
            response = await self._get_http().request(
                method,
                endpoint,
                params=_expand_list_params(params),
                json=json_data,
                files=files
            )
        except httpx.TimeoutException as e:
            raise ClickUpAPIError(f"Timeout: {e}", endpoint=endpoint) from e
        except httpx.TransportError as e:
            raise ClickUpAPIError(f"Erro de conexão: {e}", endpoint=endpoint) from e

        if not response.is_success:
            raise self._api_error(response, endpoint)

        if response.status_code == 204 or not response.content:
            return {}

        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise ClickUpAPIError(
                f"Resposta não é JSON válido: {e}",
                status_code=response.status_code,
                endpoint=endpoint,
                body=response.text
            ) from e

    @staticmethod
    def _api_error(response: httpx.Response, endpoint: str) -> ClickUpAPIError:
        body: Any
        err_code = None
        try:
            body = response.json()
        except (json.JSONDecodeError, ValueError):
            body = response.text
        if isinstance(body, dict):
            err_code = body.get("ECODE")
            message = body.get("err") or str(body)
        else:
            message = body or response.reason_phrase
        return ClickUpAPIError(
            f"Erro API: {message}",
            status_code=response.status_code,
            endpoint=endpoint,
            err_code=err_code,
            body=body
        )

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.request("GET", endpoint, params=params)

    async def post(
        self,
        endpoint: str,
        json_data: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        return await self.request("POST", endpoint, params=params, json_data=json_data, files=files)

    async def put(self, endpoint: str, json_data: Optional[Any] = None, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.request("PUT", endpoint, params=params, json_data=json_data)

    async def delete(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.request("DELETE", endpoint, params=params)

    async def download(self, url: str, auth_header: Optional[str] = None) -> bytes:
        """
        Baixa um arquivo externo (fora da API do ClickUp).

        O header de autenticação do ClickUp não é enviado; use `auth_header`
        quando a URL de origem exigir credenciais próprias.
        """
        headers = {"Authorization": auth_header} if auth_header else None
        logger.debug(f"Download {url}")
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport, follow_redirects=True) as http:
                response = await http.get(url, headers=headers)
        except httpx.TimeoutException as e:
            raise ClickUpAPIError(f"Timeout no download: {e}", endpoint=url) from e
        except httpx.TransportError as e:
            raise ClickUpAPIError(f"Erro de conexão no download: {e}", endpoint=url) from e

        if not response.is_success:
            raise ClickUpAPIError(
                f"Falha ao baixar arquivo: {response.reason_phrase}",
                status_code=response.status_code,
                endpoint=url
            )
        return response.content
