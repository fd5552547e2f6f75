"""
ClickUp Tasks MCP
=================
Camada de serviço tipada sobre a API de tasks do ClickUp, exposta como
servidor MCP:
- CRUD de tasks (criar, ler, editar, deletar, mover, duplicar)
- Resolução de tasks por ID, custom ID ou nome (com desambiguação)
- Comentários, tags, anexos e custom fields
"""

__version__ = "1.0.0"
