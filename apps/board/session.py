# apps/board/session.py

"""
Sessão de board do lado do cliente

Liga o BoardReducer aos colaboradores externos: a API de tarefas
(TaskGateway) e o canal de tempo real do projeto. Tudo roda em um único
event loop; respostas e eventos que chegam depois de um unsubscribe (ou
de uma nova inscrição) são descartados em vez de aplicados.
"""

import json
import logging
from typing import Any, Mapping, Optional, Protocol, Sequence

from .ordering import ORDER_GAP, DEFAULT_ORDER
from .reducer import BoardReducer, EventoInvalido

logger = logging.getLogger(__name__)

# Eventos do canal de tempo real -> eventos do reducer
EVENTOS_TEMPO_REAL = {
    'task:created': 'task.created',
    'task:updated': 'task.updated',
    'task:deleted': 'task.deleted',
}


class GatewayError(Exception):
    """Falha ao falar com a API de tarefas"""


class TaskGateway(Protocol):
    async def fetch_tasks(self, projeto_id) -> Sequence[Mapping[str, Any]]: ...

    async def create_task(self, projeto_id, campos: Mapping[str, Any]) -> Mapping[str, Any]: ...

    async def update_task(self, task_id, campos: Mapping[str, Any]) -> Mapping[str, Any]: ...

    async def delete_task(self, task_id) -> Any: ...


class BoardSession:
    """
    Um board aberto por um cliente

    Falha ao persistir um movimento não desfaz o estado otimista: o
    próximo fetch ou evento autoritativo reconcilia.
    """

    def __init__(self, projeto_id, gateway: TaskGateway, reducer: Optional[BoardReducer] = None,
                 gap: float = ORDER_GAP, seed: float = DEFAULT_ORDER):
        self.projeto_id = projeto_id
        self.gateway = gateway
        self.reducer = reducer or BoardReducer(projeto_id, gap=gap, seed=seed)
        self._geracao = 0
        self._inscrito = False

    @property
    def state(self):
        return self.reducer.state

    @property
    def inscrito(self) -> bool:
        return self._inscrito

    def columns(self):
        return self.reducer.columns()

    # === Inscrição ===

    def subscribe(self) -> int:
        self._geracao += 1
        self._inscrito = True
        logger.info(f"🔌 Board {self.projeto_id} inscrito (geração {self._geracao})")
        return self._geracao

    def unsubscribe(self):
        self._geracao += 1
        self._inscrito = False
        logger.info(f"🔕 Board {self.projeto_id} desinscrito")

    def _vigente(self, geracao: int) -> bool:
        return self._inscrito and geracao == self._geracao

    def _aplicar(self, geracao: int, event) -> bool:
        if not self._vigente(geracao):
            logger.debug(f"Resultado {event.get('type')} descartado: inscrição {geracao} não está mais ativa")
            return False
        self.reducer.dispatch(event)
        return True

    # === Operações autoritativas ===

    async def refresh(self) -> bool:
        """Busca a lista completa do projeto e substitui o escopo local"""
        geracao = self._geracao
        tarefas = await self.gateway.fetch_tasks(self.projeto_id)
        return self._aplicar(geracao, {
            'type': 'tasks.fetched',
            'projeto_id': self.projeto_id,
            'tasks': list(tarefas),
        })

    async def create_task(self, campos: Mapping[str, Any]):
        geracao = self._geracao
        tarefa = await self.gateway.create_task(self.projeto_id, campos)
        self._aplicar(geracao, {'type': 'task.created', 'task': tarefa})
        return tarefa

    async def delete_task(self, task_id):
        geracao = self._geracao
        await self.gateway.delete_task(task_id)
        self._aplicar(geracao, {'type': 'task.deleted', 'id': task_id})

    # === Drag-and-drop ===

    def start_drag(self, task_id):
        self._local({'type': 'drag.start', 'task_id': task_id})

    def drag_over(self, status=None, over_id=None):
        self._local({'type': 'drag.over', 'status': status, 'over_id': over_id})

    def cancel_drag(self):
        self._local({'type': 'drag.cancel'})

    async def drop(self):
        """
        Solta a tarefa arrastada e grava a nova posição

        Exatamente uma chamada a update_task por soltura concluída.
        """
        if not self._inscrito:
            logger.debug("drag.drop ignorado: board não inscrito")
            self.reducer.dispatch({'type': 'drag.cancel'})
            return None

        geracao = self._geracao
        efeitos = self.reducer.dispatch({'type': 'drag.drop'})

        resultado = None
        for pedido in efeitos:
            try:
                resultado = await self.gateway.update_task(pedido.task_id, dict(pedido.campos))
            except GatewayError as e:
                logger.error(f"❌ Falha ao gravar movimento da tarefa {pedido.task_id}: {str(e)}")
                raise
            self._aplicar(geracao, {'type': 'task.updated', 'task': resultado})

        return resultado

    def _local(self, event):
        if not self._inscrito:
            logger.debug(f"{event['type']} ignorado: board não inscrito")
            return
        self.reducer.dispatch(event)

    # === Tempo real ===

    def handle_event(self, message) -> bool:
        """
        Aplica uma mensagem recebida do canal do projeto

        Cada evento é uma mescla incremental de um único registro;
        `board_sync` traz a lista completa. Mensagens de outros tipos
        (pong, presença) são ignoradas.
        """
        if isinstance(message, (str, bytes)):
            try:
                message = json.loads(message)
            except (json.JSONDecodeError, UnicodeDecodeError):
                logger.error("❌ JSON inválido recebido do canal de tempo real")
                return False

        if not isinstance(message, dict):
            logger.warning(f"⚠️ Mensagem de tempo real ignorada: esperado objeto, recebido {type(message).__name__}")
            return False

        if not self._inscrito:
            logger.debug(f"Evento {message.get('type')} descartado: board não inscrito")
            return False

        tipo = message.get('type')

        try:
            return self._evento_tempo_real(tipo, message)
        except EventoInvalido as e:
            logger.warning(f"⚠️ Evento {tipo} malformado ignorado: {str(e)}")
            return False

    def _evento_tempo_real(self, tipo, message) -> bool:
        if tipo == 'board_sync':
            tarefas = message.get('tasks', [])
            if not isinstance(tarefas, list):
                raise EventoInvalido("board_sync sem lista de tarefas")
            return self._aplicar(self._geracao, {
                'type': 'tasks.fetched',
                'projeto_id': self.projeto_id,
                'tasks': tarefas,
            })

        evento = EVENTOS_TEMPO_REAL.get(tipo)
        if evento is None:
            return False

        if evento == 'task.deleted':
            return self._aplicar(self._geracao, {'type': evento, 'id': message.get('id')})

        tarefa = message.get('task') or {}
        if not isinstance(tarefa, dict):
            raise EventoInvalido(f"campo task deve ser um objeto, recebido {type(tarefa).__name__}")

        if tarefa.get('projeto_id') not in (None, self.projeto_id):
            logger.debug(f"Evento de outro projeto ({tarefa.get('projeto_id')}) ignorado")
            return False

        return self._aplicar(self._geracao, {'type': evento, 'task': tarefa})
