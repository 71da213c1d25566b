# apps/board/__init__.py

"""
Board - Quadro de tarefas do Quadro Board

Funcionalidades:
- Ordenação fracionária das tarefas dentro de cada coluna
- Estado otimista de drag-and-drop com reconciliação
- API JSON de tarefas
- WebSockets para atualizações em tempo real
"""
