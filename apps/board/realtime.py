# apps/board/realtime.py

"""
Fan-out das tarefas para os inscritos na sala do projeto

As views gravam primeiro e só então publicam o registro já calculado;
o canal não calcula nada. Para um mesmo emissor o Channels entrega as
mensagens do grupo na ordem em que foram enviadas.
"""

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)

# Tipo da mensagem de grupo -> handler do consumer
EVENTOS = {
    'created': 'task.created',
    'updated': 'task.updated',
    'deleted': 'task.deleted',
}


def grupo_projeto(projeto_id) -> str:
    return f'projeto_{projeto_id}'


def notificar_tarefa(evento: str, projeto_id, payload) -> None:
    """
    Publica created/updated (payload = registro) ou deleted (payload = {'id': ...})
    """
    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.warning("⚠️ CHANNEL_LAYERS não configurado - evento de tarefa não publicado")
        return

    async_to_sync(channel_layer.group_send)(
        grupo_projeto(projeto_id),
        {
            'type': EVENTOS[evento],
            'message': payload,
        }
    )
    logger.debug(f"📡 task:{evento} publicado em {grupo_projeto(projeto_id)}")
