# apps/relatorios/__init__.py

"""
Relatórios - Resumo analítico dos projetos do Quadro Board

Funcionalidades:
- Contagem de tarefas por coluna
- Tarefas atrasadas
- Conclusões por dia
"""
