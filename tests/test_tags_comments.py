"""
Testes de tags e comentários de tasks.
"""
import json

import pytest
import respx
from httpx import Response

from clickup_tasks.errors import ReadOnlyModeError, ValidationError

API_BASE = "https://api.clickup.com/api/v2"


class TestTags:

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_task_tags(self, service, mock_task):
        respx.get(f"{API_BASE}/task/abc123").mock(return_value=Response(200, json=mock_task))

        tags = await service.get_task_tags("abc123")

        assert [t.name for t in tags] == ["urgente", "juridico"]

    @respx.mock
    @pytest.mark.asyncio
    async def test_add_tag(self, service):
        route = respx.post(f"{API_BASE}/task/t1/tag/urgente").mock(return_value=Response(200, json={}))

        assert await service.add_tag_to_task("t1", "urgente") is True
        assert route.called

    @respx.mock
    @pytest.mark.asyncio
    async def test_remove_tag(self, service):
        route = respx.delete(f"{API_BASE}/task/t1/tag/urgente").mock(return_value=Response(200, json={}))

        assert await service.remove_tag_from_task("t1", "urgente") is True
        assert route.called

    @respx.mock
    @pytest.mark.asyncio
    async def test_update_task_tags_diff(self, service, make_task):
        """Remove só as que sobram e adiciona só as que faltam."""
        respx.get(f"{API_BASE}/task/t1").mock(
            return_value=Response(200, json=make_task("t1", "Com tags", tags=[{"name": "a"}, {"name": "b"}]))
        )
        remove_a = respx.delete(f"{API_BASE}/task/t1/tag/a").mock(return_value=Response(200, json={}))
        remove_b = respx.delete(f"{API_BASE}/task/t1/tag/b").mock(return_value=Response(200, json={}))
        add_b = respx.post(f"{API_BASE}/task/t1/tag/b").mock(return_value=Response(200, json={}))
        add_c = respx.post(f"{API_BASE}/task/t1/tag/c").mock(return_value=Response(200, json={}))

        assert await service.update_task_tags("t1", ["b", "c"]) is True

        assert remove_a.called
        assert add_c.called
        assert not remove_b.called
        assert not add_b.called

    @pytest.mark.asyncio
    async def test_add_tag_read_only(self, read_only_service):
        with pytest.raises(ReadOnlyModeError):
            await read_only_service.add_tag_to_task("t1", "urgente")


class TestComments:

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_comments(self, service):
        route = respx.get(f"{API_BASE}/task/t1/comment").mock(
            return_value=Response(200, json={"comments": [
                {"id": "90", "comment_text": "Primeiro", "user": {"id": 1, "username": "joao"}, "date": "1704067200000"},
                {"id": 91, "comment_text": "Segundo", "date": 1704153600000},
            ]})
        )

        comments = await service.get_task_comments("t1", start=1704067200000, start_id="89")

        params = route.calls.last.request.url.params
        assert params["start"] == "1704067200000"
        assert params["start_id"] == "89"
        assert [c.id for c in comments] == ["90", "91"]
        assert comments[1].date == "1704153600000"

    @respx.mock
    @pytest.mark.asyncio
    async def test_create_comment(self, service):
        route = respx.post(f"{API_BASE}/task/t1/comment").mock(
            return_value=Response(200, json={"id": 458, "hist_id": "26508", "date": 1568036964079})
        )

        comment = await service.create_task_comment("t1", "Revisado", notify_all=True, assignee=7)

        body = json.loads(route.calls.last.request.content)
        assert body == {"comment_text": "Revisado", "notify_all": True, "assignee": 7}
        assert comment.id == "458"
        assert comment.comment_text == "Revisado"

    @respx.mock
    @pytest.mark.asyncio
    async def test_create_empty_comment(self, service):
        route = respx.post(f"{API_BASE}/task/t1/comment").mock(return_value=Response(200, json={}))

        with pytest.raises(ValidationError):
            await service.create_task_comment("t1", "   ")

        assert not route.called
