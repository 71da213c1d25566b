# apps/board/reducer.py

"""
Estado local do board e transições otimistas de drag-and-drop

O estado tem duas camadas:
- committed: tarefas confirmadas pelo servidor (sempre ordenadas)
- pending: movimentos já soltos cujo registro autoritativo ainda não chegou

e, durante um arraste, uma DragSession com a posição ao vivo da tarefa.
As colunas exibidas são sempre "committed sobreposto por pending", com a
tarefa arrastada encaixada na posição ao vivo; nenhuma camada é alterada
no lugar.

Eventos são dicts com chave `type`, despachados para a função de mesmo
nome (como nas mensagens de grupo do Channels):

    drag.start   {task_id}
    drag.over    {status, over_id?}
    drag.drop    {}
    drag.cancel  {}
    tasks.fetched {projeto_id?, tasks}
    task.created {task}
    task.updated {task}
    task.deleted {id}

Só o `drag.drop` gera efeito (um PersistRequest); o vizinho (prev, next)
vem da posição otimista em memória, não de um fetch recente, então sob
edições concorrentes pode ser um par já desatualizado no servidor.
"""

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, NamedTuple, Optional, Tuple

from .columns import project_columns, sort_tasks
from .ordering import compute_order, ORDER_GAP, DEFAULT_ORDER
from .reconcile import merge, remove, find
from .records import TaskRecord

logger = logging.getLogger(__name__)


class EventoInvalido(ValueError):
    """Evento com tipo desconhecido ou campos obrigatórios ausentes"""


@dataclass(frozen=True)
class DragSession:
    """
    Arraste em andamento

    `origem` é o registro no início do arraste; `indice` é a posição na
    coluna `status` sem contar a própria tarefa.
    """

    task_id: Any
    origem: TaskRecord
    status: str
    indice: int


@dataclass(frozen=True)
class PersistRequest:
    """Pedido de gravação emitido ao soltar: registro completo sem o id"""

    task_id: Any
    campos: Mapping[str, Any]


class Transition(NamedTuple):
    state: 'BoardState'
    effects: Tuple[PersistRequest, ...] = ()


@dataclass(frozen=True)
class BoardState:
    projeto_id: Any
    committed: Tuple[TaskRecord, ...] = ()
    pending: Mapping[Any, TaskRecord] = field(default_factory=lambda: MappingProxyType({}))
    drag: Optional[DragSession] = None
    gap: float = ORDER_GAP
    seed: float = DEFAULT_ORDER

    @property
    def fase(self) -> str:
        return 'dragging' if self.drag is not None else 'idle'

    def visible(self) -> Tuple[TaskRecord, ...]:
        """Committed sobreposto por pending, reordenado"""
        if not self.pending:
            return self.committed
        return sort_tasks(self.pending.get(t.id, t) for t in self.committed)

    def columns(self) -> Mapping[str, Tuple[TaskRecord, ...]]:
        """Colunas exibidas, com a tarefa arrastada na posição ao vivo"""
        colunas = project_columns(self.visible(), self.projeto_id)
        if self.drag is None:
            return colunas

        drag = self.drag
        arrastada = self._arrastada()
        resultado = {
            status: tuple(t for t in itens if t.id != drag.task_id)
            for status, itens in colunas.items()
        }
        alvo = list(resultado.get(drag.status, ()))
        alvo.insert(min(max(drag.indice, 0), len(alvo)), arrastada)
        resultado[drag.status] = tuple(alvo)
        return MappingProxyType(resultado)

    def _arrastada(self) -> TaskRecord:
        atual = find(self.visible(), self.drag.task_id) or self.drag.origem
        return atual.with_position(self.drag.status, atual.ordem)


# === Eventos de arraste (cliente) ===

def drag_start(state: BoardState, event) -> Transition:
    task_id = _campo(event, 'task_id')

    if state.drag is not None:
        logger.debug(f"Arraste de {state.drag.task_id} substituído por {task_id}")

    registro = find(state.visible(), task_id)
    if registro is None or registro.projeto_id != state.projeto_id:
        logger.debug(f"drag.start ignorado: tarefa {task_id} não está no board")
        return Transition(replace(state, drag=None))

    coluna = project_columns(state.visible(), state.projeto_id)[registro.status]
    indice = [t.id for t in coluna].index(task_id)

    drag = DragSession(task_id=task_id, origem=registro, status=registro.status, indice=indice)
    return Transition(replace(state, drag=drag))


def drag_over(state: BoardState, event) -> Transition:
    """
    Atualização visual intermediária; nunca gera persistência
    """
    drag = state.drag
    if drag is None:
        return Transition(state)

    over_id = event.get('over_id')
    status = event.get('status')
    colunas = state.columns()

    if over_id is not None and over_id != drag.task_id:
        over = _localizar(colunas, over_id)
        if over is not None:
            # Ocupa o lugar da tarefa sob o cursor. Na mesma coluna isso é um
            # array-move (descendo fica depois dela, subindo fica antes); em
            # coluna nova entra antes dela.
            indice = [t.id for t in colunas[over.status]].index(over_id)
            return Transition(replace(state, drag=replace(drag, status=over.status, indice=indice)))

    if over_id == drag.task_id:
        return Transition(state)

    if status is None or status not in colunas:
        logger.debug(f"drag.over ignorado: coluna {status!r} desconhecida")
        return Transition(state)

    if status == drag.status:
        return Transition(state)

    # Coluna sem tarefa sob o cursor: vai para o fim
    indice = len(colunas[status])
    return Transition(replace(state, drag=replace(drag, status=status, indice=indice)))


def drag_drop(state: BoardState, event) -> Transition:
    """
    Soltura final: calcula a ordem e emite exatamente um PersistRequest
    """
    drag = state.drag
    if drag is None:
        logger.debug("drag.drop sem arraste ativo - ignorado")
        return Transition(state)

    coluna = [t for t in state.columns()[drag.status] if t.id != drag.task_id]
    indice = min(max(drag.indice, 0), len(coluna))
    prev, next_ = _vizinhos_ordenados(coluna, indice)

    ordem = compute_order(prev, next_, gap=state.gap, seed=state.seed)
    atual = find(state.visible(), drag.task_id) or drag.origem
    movida = atual.with_position(drag.status, ordem)

    pending = dict(state.pending)
    pending[drag.task_id] = movida

    campos = movida.to_payload()
    campos.pop('id', None)

    logger.debug(
        f"🎯 Tarefa {drag.task_id} solta em {drag.status} "
        f"entre {getattr(prev, 'id', None)} e {getattr(next_, 'id', None)} (ordem {ordem})"
    )

    novo = replace(state, pending=MappingProxyType(pending), drag=None)
    return Transition(novo, (PersistRequest(task_id=drag.task_id, campos=MappingProxyType(campos)),))


def drag_cancel(state: BoardState, event) -> Transition:
    """Soltura fora de qualquer coluna: volta ao estado anterior, sem persistir"""
    return Transition(replace(state, drag=None))


# === Eventos autoritativos (servidor) ===

def tasks_fetched(state: BoardState, event) -> Transition:
    tarefas = [_registro(t) for t in _campo(event, 'tasks')]
    projeto_id = event.get('projeto_id', state.projeto_id)
    committed = merge(state.committed, tarefas, escopo_completo=projeto_id)
    return Transition(_convergir(state, committed, {t.id for t in tarefas}))


def task_created(state: BoardState, event) -> Transition:
    tarefa = _registro(_campo(event, 'task'))
    committed = merge(state.committed, [tarefa])
    return Transition(_convergir(state, committed, {tarefa.id}))


task_updated = task_created


def task_deleted(state: BoardState, event) -> Transition:
    task_id = _campo(event, 'id')
    committed = remove(state.committed, task_id)
    return Transition(_convergir(state, committed, {task_id}))


HANDLERS = {
    'drag.start': drag_start,
    'drag.over': drag_over,
    'drag.drop': drag_drop,
    'drag.cancel': drag_cancel,
    'tasks.fetched': tasks_fetched,
    'task.created': task_created,
    'task.updated': task_updated,
    'task.deleted': task_deleted,
}


def apply(state: BoardState, event) -> Transition:
    """Transição pura: (estado, evento) -> (novo estado, efeitos)"""
    handler = HANDLERS.get(event.get('type'))
    if handler is None:
        raise EventoInvalido(f"Tipo de evento desconhecido: {event.get('type')!r}")
    return handler(state, event)


class BoardReducer:
    """
    Dono do estado de um board, passado por referência a quem precisa
    """

    def __init__(self, projeto_id, tarefas=(), gap=ORDER_GAP, seed=DEFAULT_ORDER):
        self.state = BoardState(
            projeto_id=projeto_id,
            committed=sort_tasks(_registro(t) for t in tarefas),
            gap=gap,
            seed=seed,
        )

    def dispatch(self, event) -> Tuple[PersistRequest, ...]:
        transicao = apply(self.state, event)
        self.state = transicao.state
        return transicao.effects

    def columns(self):
        return self.state.columns()


# === Auxiliares ===

def _campo(event, nome):
    try:
        return event[nome]
    except KeyError:
        raise EventoInvalido(f"Evento {event.get('type')!r} sem o campo {nome!r}") from None


def _registro(tarefa) -> TaskRecord:
    if isinstance(tarefa, TaskRecord):
        return tarefa
    try:
        return TaskRecord.from_payload(tarefa)
    except (TypeError, ValueError) as e:
        raise EventoInvalido(f"Tarefa inválida no evento: {e}") from e


def _vizinhos_ordenados(coluna, indice):
    """
    Vizinhos com ordem definida mais próximos do ponto de soltura

    Tarefas sem ordem ficam sempre no topo da coluna, então não servem de
    limite: o cálculo usa a primeira tarefa ordenada de cada lado.
    """
    prev = next((t for t in reversed(coluna[:indice]) if t.ordem is not None), None)
    next_ = next((t for t in coluna[indice:] if t.ordem is not None), None)
    return prev, next_


def _localizar(colunas, task_id) -> Optional[TaskRecord]:
    for itens in colunas.values():
        for tarefa in itens:
            if tarefa.id == task_id:
                return tarefa
    return None


def _convergir(state: BoardState, committed, ids_autoritativos) -> BoardState:
    """
    Aplica o novo committed: registros autoritativos encerram os pending
    do mesmo id; tarefa arrastada que sumiu cancela o arraste
    """
    presentes = {t.id for t in committed}
    pending = {
        task_id: registro
        for task_id, registro in state.pending.items()
        if task_id not in ids_autoritativos and task_id in presentes
    }

    drag = state.drag
    if drag is not None and drag.task_id not in presentes:
        logger.info(f"🗑️ Tarefa {drag.task_id} removida durante o arraste - arraste cancelado")
        drag = None

    return replace(state, committed=committed, pending=MappingProxyType(pending), drag=drag)
