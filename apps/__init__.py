# apps/__init__.py

"""
Quadro Board - Aplicações Django

Este pacote contém todas as aplicações do sistema:
- core: Models principais, membros de projeto e permissões
- board: Ordenação fracionária, estado do board e WebSockets
- relatorios: Resumo analítico dos projetos
"""

__version__ = '0.1.0'
