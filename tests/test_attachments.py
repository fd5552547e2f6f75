"""
Testes de upload de anexos (bytes em memória e a partir de URL).
"""
import pytest
import respx
from httpx import Response

from clickup_tasks.errors import ClickUpAPIError, ValidationError
from clickup_tasks.task.attachments import file_name_from_url

API_BASE = "https://api.clickup.com/api/v2"

ATTACHMENT_RESPONSE = {
    "id": "att-1",
    "version": 0,
    "date": 1704067200000,
    "title": "relatorio.pdf",
    "extension": "pdf",
    "url": "https://t9001.p.clickup-attachments.com/att-1/relatorio.pdf"
}


class TestFileNameFromUrl:

    def test_last_segment(self):
        assert file_name_from_url("https://files.example.com/docs/relatorio.pdf?x=1") == "relatorio.pdf"

    def test_encoded(self):
        assert file_name_from_url("https://files.example.com/docs/ata%20final.txt") == "ata final.txt"

    def test_no_path(self):
        assert file_name_from_url("https://files.example.com") == ""


class TestUploadAttachment:

    @respx.mock
    @pytest.mark.asyncio
    async def test_upload_bytes_multipart(self, service):
        route = respx.post(f"{API_BASE}/task/t1/attachment").mock(
            return_value=Response(200, json=ATTACHMENT_RESPONSE)
        )

        attachment = await service.upload_task_attachment("t1", b"%PDF-1.4 conteudo", "relatorio.pdf")

        request = route.calls.last.request
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b'name="attachment"' in request.read()
        assert b'filename="relatorio.pdf"' in request.read()
        assert attachment.id == "att-1"
        assert attachment.version == "0"

    @pytest.mark.asyncio
    async def test_empty_file(self, service):
        with pytest.raises(ValidationError):
            await service.upload_task_attachment("t1", b"", "vazio.txt")

    @pytest.mark.asyncio
    async def test_missing_name(self, service):
        with pytest.raises(ValidationError):
            await service.upload_task_attachment("t1", b"abc", "")

    @respx.mock
    @pytest.mark.asyncio
    async def test_upload_from_url(self, service):
        download = respx.get("https://files.example.com/docs/relatorio.pdf").mock(
            return_value=Response(200, content=b"%PDF-1.4 conteudo")
        )
        upload = respx.post(f"{API_BASE}/task/t1/attachment").mock(
            return_value=Response(200, json=ATTACHMENT_RESPONSE)
        )

        attachment = await service.upload_task_attachment_from_url(
            "t1",
            "https://files.example.com/docs/relatorio.pdf",
            auth_header="Bearer origem"
        )

        assert download.calls.last.request.headers["Authorization"] == "Bearer origem"
        assert b'filename="relatorio.pdf"' in upload.calls.last.request.read()
        assert b"%PDF-1.4 conteudo" in upload.calls.last.request.read()
        assert attachment.title == "relatorio.pdf"

    @respx.mock
    @pytest.mark.asyncio
    async def test_upload_from_url_download_error(self, service):
        respx.get("https://files.example.com/sumiu.pdf").mock(return_value=Response(404))
        upload = respx.post(f"{API_BASE}/task/t1/attachment").mock(return_value=Response(200, json=ATTACHMENT_RESPONSE))

        with pytest.raises(ClickUpAPIError) as exc:
            await service.upload_task_attachment_from_url("t1", "https://files.example.com/sumiu.pdf")

        assert exc.value.status_code == 404
        assert not upload.called

    @pytest.mark.asyncio
    async def test_upload_from_invalid_url(self, service):
        with pytest.raises(ValidationError):
            await service.upload_task_attachment_from_url("t1", "ftp://files.example.com/a.pdf")
