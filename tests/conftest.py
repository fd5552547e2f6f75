"""
Fixtures para testes do ClickUp Tasks MCP.
"""
import os
import sys

import pytest

# Adiciona src ao path para importar o pacote
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from clickup_tasks.task.service import TaskService  # noqa: E402

# Base URL da API
API_BASE = "https://api.clickup.com/api/v2"
TEAM_ID = "team123"


@pytest.fixture
def service():
    """TaskService apontando para a API mockada (respx)."""
    return TaskService("pk_test_token_123456789", TEAM_ID, base_url=API_BASE, read_only=False)


@pytest.fixture
def read_only_service():
    """TaskService em modo READ_ONLY."""
    return TaskService("pk_test_token_123456789", TEAM_ID, base_url=API_BASE, read_only=True)


@pytest.fixture
def make_task():
    """Fábrica de payloads de task no formato da API."""
    def _make(task_id, name, list_id="list1", list_name="Cliente X", date_updated="1704153600000", **extra):
        task = {
            "id": task_id,
            "name": name,
            "status": {"status": "Em andamento", "type": "custom"},
            "date_created": "1704067200000",
            "date_updated": date_updated,
            "assignees": [{"id": 1, "username": "joao"}],
            "tags": [],
            "custom_fields": [],
            "list": {"id": list_id, "name": list_name},
            "folder": {"id": "folder1", "name": "Plano Premium"},
            "space": {"id": "space1"},
            "url": f"https://app.clickup.com/t/{task_id}",
        }
        task.update(extra)
        return task
    return _make


@pytest.fixture
def mock_task(make_task):
    """Task de exemplo para testes."""
    return make_task(
        "abc123",
        "Notificação Extrajudicial - Pirataria - Cliente X",
        due_date="1704240000000",
        description="Descrição da task",
        priority={"id": "2", "priority": "high"},
        tags=[{"name": "urgente"}, {"name": "juridico"}],
        custom_fields=[
            {"id": "field1", "name": "Valor do Contrato", "type": "currency", "value": "1500"},
            {"id": "field2", "name": "Área", "type": "drop_down", "value": 0,
             "type_config": {"options": [{"id": "opt1", "name": "Cível", "orderindex": 0}]}},
            {"id": "field3", "name": "Observação", "type": "short_text"},
        ]
    )


@pytest.fixture
def mock_list():
    """List de exemplo (GET /list/{id})."""
    return {
        "id": "list1",
        "name": "Cliente X",
        "folder": {"id": "folder1", "name": "Plano Premium"},
        "space": {"id": "space1", "name": "Consultoria"},
        "task_count": 12
    }


@pytest.fixture
def mock_hierarchy():
    """Respostas de spaces, folders e lists sem folder do workspace."""
    return {
        "spaces": {"spaces": [{"id": "space1", "name": "Consultoria"}]},
        "folders": {
            "folders": [
                {
                    "id": "folder1",
                    "name": "Plano Premium",
                    "lists": [
                        {"id": "list1", "name": "Cliente X"},
                        {"id": "list2", "name": "Cliente Y"}
                    ]
                }
            ]
        },
        "folderless": {"lists": [{"id": "list9", "name": "Backlog"}]}
    }
