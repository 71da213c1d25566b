# apps/core/__init__.py

"""
Core - Usuários, projetos, membros e o modelo de tarefas do Quadro Board
"""
