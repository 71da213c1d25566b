# apps/board/reconcile.py

"""
Reconciliação do estado local com registros autoritativos do servidor

Cada registro recebido substitui por inteiro o local de mesmo id
(último a chegar vence). Sem tombstones: um `task:created` atrasado
depois de um `task:deleted` ressuscita a tarefa, comportamento aceito.
"""

import logging
from typing import Iterable, Optional, Sequence, Tuple

from .columns import sort_tasks

logger = logging.getLogger(__name__)


def merge(local: Iterable, incoming: Sequence, escopo_completo=None) -> Tuple:
    """
    Mescla `incoming` em `local` e devolve a coleção reordenada

    `escopo_completo`: id do projeto quando `incoming` é a lista completa
    desse projeto (resposta de fetch). Nesse caso, tarefas locais do
    projeto ausentes em `incoming` são descartadas como obsoletas.
    Sem ele a mescla é incremental e nada local é removido.
    """
    recebidos = {}
    for tarefa in incoming:
        # Ids repetidos no mesmo lote: vale a última ocorrência
        recebidos.pop(tarefa.id, None)
        recebidos[tarefa.id] = tarefa

    mantidos = []
    descartados = 0
    for tarefa in local:
        if tarefa.id in recebidos:
            continue
        if escopo_completo is not None and tarefa.projeto_id == escopo_completo:
            descartados += 1
            continue
        mantidos.append(tarefa)

    if descartados:
        logger.debug(f"🧹 {descartados} tarefa(s) obsoleta(s) removida(s) do projeto {escopo_completo}")

    return sort_tasks(mantidos + list(recebidos.values()))


def remove(local: Iterable, task_id) -> Tuple:
    """Remove a tarefa pelo id; id desconhecido não altera nada"""
    return tuple(t for t in local if t.id != task_id)


def find(local: Iterable, task_id) -> Optional[object]:
    for tarefa in local:
        if tarefa.id == task_id:
            return tarefa
    return None
