"""
Testes do adaptador HTTP, das exceções e da configuração.
"""
import httpx
import pytest
import respx
from httpx import Response

from clickup_tasks import config
from clickup_tasks.client import ClickUpClient, _expand_list_params
from clickup_tasks.errors import (
    AmbiguousMatchError,
    ClickUpAPIError,
    ConfigurationError,
    ErrorCode,
    NotFoundError,
)
from clickup_tasks.logs import get_correlation_id, set_new_correlation_id

API_BASE = "https://api.clickup.com/api/v2"


class TestExpandListParams:

    def test_lists_booleans_and_none(self):
        params = _expand_list_params({
            "statuses": ["open", "done"],
            "assignees[]": ["1"],
            "include_closed": True,
            "archived": False,
            "page": 2,
            "order_by": None,
            "tags": [],
        })
        assert params == {
            "statuses[]": ["open", "done"],
            "assignees[]": ["1"],
            "include_closed": "true",
            "archived": "false",
            "page": 2,
        }

    def test_empty(self):
        assert _expand_list_params(None) is None
        assert _expand_list_params({}) is None


class TestClickUpClient:

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_json(self):
        respx.get(f"{API_BASE}/team").mock(return_value=Response(200, json={"teams": []}))
        client = ClickUpClient("pk_test", base_url=API_BASE)

        assert await client.get("/team") == {"teams": []}
        await client.aclose()

    @respx.mock
    @pytest.mark.asyncio
    async def test_no_content(self):
        respx.delete(f"{API_BASE}/task/t1").mock(return_value=Response(204))
        client = ClickUpClient("pk_test", base_url=API_BASE)

        assert await client.delete("/task/t1") == {}

    @respx.mock
    @pytest.mark.asyncio
    async def test_api_error_body(self):
        respx.get(f"{API_BASE}/task/t1").mock(
            return_value=Response(429, json={"err": "Rate limit reached", "ECODE": "APP_002"})
        )
        client = ClickUpClient("pk_test", base_url=API_BASE)

        with pytest.raises(ClickUpAPIError) as exc:
            await client.get("/task/t1")

        assert exc.value.status_code == 429
        assert exc.value.code == ErrorCode.RATE_LIMIT
        assert exc.value.err_code == "APP_002"
        assert exc.value.endpoint == "/task/t1"
        assert "Rate limit reached" in str(exc.value)

    @respx.mock
    @pytest.mark.asyncio
    async def test_api_error_text_body(self):
        respx.get(f"{API_BASE}/task/t1").mock(return_value=Response(502, text="Bad Gateway"))
        client = ClickUpClient("pk_test", base_url=API_BASE)

        with pytest.raises(ClickUpAPIError) as exc:
            await client.get("/task/t1")

        assert exc.value.code == ErrorCode.SERVER_ERROR
        assert exc.value.body == "Bad Gateway"

    @respx.mock
    @pytest.mark.asyncio
    async def test_redirect_is_error(self):
        """3xx não é sucesso: vira ClickUpAPIError com status e corpo."""
        respx.get(f"{API_BASE}/task/t1").mock(
            return_value=Response(302, headers={"Location": "https://example.com/login"}, text="Found")
        )
        client = ClickUpClient("pk_test", base_url=API_BASE)

        with pytest.raises(ClickUpAPIError) as exc:
            await client.get("/task/t1")

        assert exc.value.status_code == 302
        assert exc.value.body == "Found"

    @respx.mock
    @pytest.mark.asyncio
    async def test_invalid_json_body(self):
        """2xx com corpo que não é JSON vira ClickUpAPIError com o corpo."""
        respx.get(f"{API_BASE}/task/t1").mock(return_value=Response(200, text="<html>manutenção</html>"))
        client = ClickUpClient("pk_test", base_url=API_BASE)

        with pytest.raises(ClickUpAPIError) as exc:
            await client.get("/task/t1")

        assert exc.value.status_code == 200
        assert exc.value.body == "<html>manutenção</html>"

    @respx.mock
    @pytest.mark.asyncio
    async def test_network_error(self):
        """Falha de transporte vira ClickUpAPIError sem status."""
        respx.get(f"{API_BASE}/task/t1").mock(side_effect=httpx.ConnectError)
        client = ClickUpClient("pk_test", base_url=API_BASE)

        with pytest.raises(ClickUpAPIError) as exc:
            await client.get("/task/t1")

        assert exc.value.status_code is None
        assert exc.value.code == ErrorCode.NETWORK_ERROR

    @respx.mock
    @pytest.mark.asyncio
    async def test_single_attempt(self):
        """Sem retry: um 500 gera exatamente uma chamada."""
        route = respx.get(f"{API_BASE}/task/t1").mock(return_value=Response(500, json={"err": "boom"}))
        client = ClickUpClient("pk_test", base_url=API_BASE)

        with pytest.raises(ClickUpAPIError):
            await client.get("/task/t1")

        assert route.call_count == 1


class TestErrors:

    def test_with_context_keeps_type(self):
        error = NotFoundError("Task 'x' não encontrada", context={"task_id": "x"})

        wrapped = error.with_context("Falha ao localizar task 'x'")

        assert isinstance(wrapped, NotFoundError)
        assert wrapped.code == ErrorCode.NOT_FOUND
        assert wrapped.context == {"task_id": "x"}
        assert str(wrapped) == "Falha ao localizar task 'x': Task 'x' não encontrada"
        assert str(error) == "Task 'x' não encontrada"

    def test_with_context_keeps_candidates(self):
        error = AmbiguousMatchError("2 tasks", candidates=[{"id": "a"}, {"id": "b"}])

        wrapped = error.with_context("Falha").with_context("Falha externa")

        assert isinstance(wrapped, AmbiguousMatchError)
        assert wrapped.candidates == [{"id": "a"}, {"id": "b"}]
        assert str(wrapped) == "Falha externa: Falha: 2 tasks"

    @pytest.mark.parametrize("status,code", [
        (401, ErrorCode.UNAUTHORIZED),
        (403, ErrorCode.UNAUTHORIZED),
        (404, ErrorCode.NOT_FOUND),
        (422, ErrorCode.VALIDATION),
        (503, ErrorCode.SERVER_ERROR),
        (418, ErrorCode.UNKNOWN),
    ])
    def test_api_error_codes(self, status, code):
        assert ClickUpAPIError("x", status_code=status, endpoint="/e").code == code


class TestConfig:

    def test_missing_required_vars(self, monkeypatch):
        monkeypatch.delenv("CLICKUP_API_KEY", raising=False)
        monkeypatch.delenv("CLICKUP_TEAM_ID", raising=False)
        monkeypatch.setattr(config, "ALLOW_MISSING_TOKEN", False)

        with pytest.raises(ConfigurationError) as exc:
            config.validate_config()

        assert "CLICKUP_API_KEY" in str(exc.value)
        assert exc.value.code == ErrorCode.CONFIGURATION

    def test_missing_allowed(self, monkeypatch):
        monkeypatch.delenv("CLICKUP_API_KEY", raising=False)
        monkeypatch.setattr(config, "ALLOW_MISSING_TOKEN", True)

        config.validate_config()

    def test_valid(self, monkeypatch):
        monkeypatch.setenv("CLICKUP_API_KEY", "pk_test")
        monkeypatch.setenv("CLICKUP_TEAM_ID", "team123")
        monkeypatch.setattr(config, "ALLOW_MISSING_TOKEN", False)

        config.validate_config()


class TestCorrelationId:

    def test_default(self):
        assert isinstance(get_correlation_id(), str)

    def test_new_id(self):
        cid = set_new_correlation_id()
        assert len(cid) == 8
        assert get_correlation_id() == cid
        assert set_new_correlation_id() != cid
