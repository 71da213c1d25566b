# apps/board/columns.py

"""
Projeção das colunas do board a partir da coleção de tarefas
"""

from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

from apps.core.choices import STATUS_COLUNAS

from .ordering import ordem_de


def sort_key(tarefa):
    """
    Chave de ordenação: tarefas sem ordem ficam antes de todas (-inf),
    para nunca sumirem da coluna
    """
    ordem = ordem_de(tarefa)
    if ordem is None:
        return (0, 0.0)
    return (1, ordem)


def sort_tasks(tarefas: Iterable) -> Tuple:
    """Ordenação crescente e estável (empates mantêm a ordem de entrada)"""
    return tuple(sorted(tarefas, key=sort_key))


def project_columns(tarefas: Iterable, projeto_id) -> Mapping[str, Tuple]:
    """
    Agrupa as tarefas do projeto por status, cada coluna ordenada

    Devolve uma visão nova e somente leitura a cada chamada; a coleção de
    entrada não é alterada. Toda coluna conhecida aparece, mesmo vazia.
    Status desconhecidos ganham coluna própria depois das padrão.
    """
    colunas = {status: [] for status in STATUS_COLUNAS}

    for tarefa in tarefas:
        if tarefa.projeto_id != projeto_id:
            continue
        colunas.setdefault(tarefa.status, []).append(tarefa)

    return MappingProxyType({
        status: sort_tasks(itens) for status, itens in colunas.items()
    })
