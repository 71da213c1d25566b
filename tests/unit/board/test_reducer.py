"""Testes de apps/board/reducer.py

O reducer mantém o estado otimista do board: arrastar só move a tarefa
visualmente, soltar gera exatamente um pedido de gravação e registros
autoritativos sempre prevalecem.
"""

import pytest

from apps.board.reducer import (
    BoardReducer,
    BoardState,
    EventoInvalido,
    PersistRequest,
    apply,
)
from tests.conftest import PROJETO_ID, ids, payload


# ─────────────────────────────────────────────────────────────────────────────
# Setup
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def reducer(board_inicial):
    """Board inicial com DONE ocupada por X(100) e Y(200)."""
    reducer = BoardReducer(PROJETO_ID)
    reducer.dispatch({
        'type': 'tasks.fetched',
        'tasks': board_inicial + [payload('X', 'DONE', 100.0), payload('Y', 'DONE', 200.0)],
    })
    return reducer


def _colunas(reducer):
    return {status: ids(itens) for status, itens in reducer.columns().items()}


def _arrastar(reducer, task_id, **over):
    reducer.dispatch({'type': 'drag.start', 'task_id': task_id})
    return reducer.dispatch({'type': 'drag.over', **over})


# ─────────────────────────────────────────────────────────────────────────────
# Arraste
# ─────────────────────────────────────────────────────────────────────────────


class TestDragStart:
    """Início do arraste."""

    def test_entra_em_dragging(self, reducer):
        reducer.dispatch({'type': 'drag.start', 'task_id': 'B'})

        assert reducer.state.fase == 'dragging'
        assert reducer.state.drag.status == 'TODO'
        assert reducer.state.drag.indice == 1

    def test_tarefa_desconhecida_fica_idle(self, reducer):
        """Deve ignorar arraste de tarefa que não está no board."""
        reducer.dispatch({'type': 'drag.start', 'task_id': 'Z'})
        assert reducer.state.fase == 'idle'

    def test_nao_gera_efeitos(self, reducer):
        assert reducer.dispatch({'type': 'drag.start', 'task_id': 'A'}) == ()


class TestDragOver:
    """Atualizações visuais intermediárias."""

    def test_nunca_gera_efeitos(self, reducer):
        """Deve mover visualmente sem pedir gravação."""
        efeitos = _arrastar(reducer, 'A', status='DONE', over_id='Y')
        assert efeitos == ()

    def test_sobre_tarefa_de_outra_coluna_entra_antes_dela(self, reducer):
        _arrastar(reducer, 'A', status='DONE', over_id='Y')

        colunas = _colunas(reducer)
        assert colunas['TODO'] == ['B', 'C']
        assert colunas['DONE'] == ['X', 'A', 'Y']

    def test_coluna_vazia_de_tarefas_vai_para_o_fim(self, reducer):
        """Deve colocar a tarefa no fim da coluna quando não há tarefa sob o cursor."""
        _arrastar(reducer, 'A', status='IN_PROGRESS')
        assert _colunas(reducer)['IN_PROGRESS'] == ['D', 'E', 'A']

    def test_mesma_coluna_descendo_fica_depois(self, reducer):
        """Deve seguir a semântica de array-move: A sobre C vira [B, C, A]."""
        _arrastar(reducer, 'A', status='TODO', over_id='C')
        assert _colunas(reducer)['TODO'] == ['B', 'C', 'A']

    def test_mesma_coluna_subindo_fica_antes(self, reducer):
        _arrastar(reducer, 'C', status='TODO', over_id='A')
        assert _colunas(reducer)['TODO'] == ['C', 'A', 'B']

    def test_status_desconhecido_ignorado(self, reducer):
        _arrastar(reducer, 'A', status='NAO_EXISTE')
        assert reducer.state.drag.status == 'TODO'

    def test_sem_arraste_ignorado(self, reducer):
        antes = reducer.state
        reducer.dispatch({'type': 'drag.over', 'status': 'DONE'})
        assert reducer.state is antes

    def test_estado_committed_intacto(self, reducer):
        """Deve manter o committed inalterado durante o arraste."""
        committed = reducer.state.committed
        _arrastar(reducer, 'A', status='DONE', over_id='Y')
        assert reducer.state.committed is committed


class TestDragDrop:
    """Soltura final e pedido de gravação."""

    def test_entre_tarefas_de_outra_coluna(self, reducer):
        """Deve gravar {status: DONE, ordem: 150} ao soltar entre X(100) e Y(200)."""
        _arrastar(reducer, 'A', status='DONE', over_id='Y')

        efeitos = reducer.dispatch({'type': 'drag.drop'})

        assert len(efeitos) == 1
        pedido = efeitos[0]
        assert isinstance(pedido, PersistRequest)
        assert pedido.task_id == 'A'
        assert pedido.campos['status'] == 'DONE'
        assert pedido.campos['ordem'] == 150.0

    def test_pedido_leva_registro_completo_sem_id(self, reducer):
        _arrastar(reducer, 'A', status='DONE', over_id='Y')

        campos = reducer.dispatch({'type': 'drag.drop'})[0].campos

        assert 'id' not in campos
        assert campos['titulo'] == 'Tarefa A'
        assert campos['projeto_id'] == PROJETO_ID

    def test_fim_de_coluna(self, reducer):
        _arrastar(reducer, 'A', status='IN_PROGRESS')
        campos = reducer.dispatch({'type': 'drag.drop'})[0].campos
        assert campos['ordem'] == 200.0 + 1000.0

    def test_inicio_de_coluna(self, reducer):
        _arrastar(reducer, 'C', status='TODO', over_id='A')
        campos = reducer.dispatch({'type': 'drag.drop'})[0].campos
        assert campos['ordem'] == 100.0 - 1000.0

    def test_mesma_coluna_descendo(self, reducer):
        """Deve posicionar A depois de C (300 + gap)."""
        _arrastar(reducer, 'A', status='TODO', over_id='C')
        campos = reducer.dispatch({'type': 'drag.drop'})[0].campos
        assert campos['status'] == 'TODO'
        assert campos['ordem'] == 1300.0

    def test_coluna_vazia_usa_semente(self, board_inicial):
        reducer = BoardReducer(PROJETO_ID, [])
        reducer.dispatch({'type': 'tasks.fetched', 'tasks': board_inicial})
        _arrastar(reducer, 'B', status='DONE')

        campos = reducer.dispatch({'type': 'drag.drop'})[0].campos

        assert campos['status'] == 'DONE'
        assert campos['ordem'] == 1000.0

    def test_posicao_otimista_ate_confirmacao(self, reducer):
        """Deve exibir a tarefa na nova posição antes da resposta do servidor."""
        _arrastar(reducer, 'A', status='DONE', over_id='Y')
        reducer.dispatch({'type': 'drag.drop'})

        assert reducer.state.fase == 'idle'
        assert 'A' in reducer.state.pending
        assert _colunas(reducer)['DONE'] == ['X', 'A', 'Y']
        assert _colunas(reducer)['TODO'] == ['B', 'C']

    def test_sem_arraste_nao_gera_efeito(self, reducer):
        assert reducer.dispatch({'type': 'drag.drop'}) == ()


class TestDragCancel:
    """Soltura fora de qualquer coluna."""

    def test_volta_ao_estado_anterior_sem_efeitos(self, reducer):
        """Deve restaurar as colunas e não pedir gravação."""
        antes = _colunas(reducer)
        _arrastar(reducer, 'A', status='DONE', over_id='Y')

        efeitos = reducer.dispatch({'type': 'drag.cancel'})

        assert efeitos == ()
        assert reducer.state.fase == 'idle'
        assert _colunas(reducer) == antes


# ─────────────────────────────────────────────────────────────────────────────
# Eventos autoritativos
# ─────────────────────────────────────────────────────────────────────────────


class TestEventosAutoritativos:
    """Registros vindos do servidor."""

    def test_confirmacao_encerra_pending(self, reducer):
        """Deve limpar o pending quando o registro autoritativo chega."""
        _arrastar(reducer, 'A', status='DONE', over_id='Y')
        reducer.dispatch({'type': 'drag.drop'})

        reducer.dispatch({'type': 'task.updated', 'task': payload('A', 'DONE', 150.0)})

        assert reducer.state.pending == {}
        assert _colunas(reducer)['DONE'] == ['X', 'A', 'Y']

    def test_registro_autoritativo_prevalece_sobre_otimista(self, reducer):
        """Deve exibir a posição do servidor quando ela diverge da otimista."""
        _arrastar(reducer, 'A', status='DONE', over_id='Y')
        reducer.dispatch({'type': 'drag.drop'})

        reducer.dispatch({'type': 'task.updated', 'task': payload('A', 'IN_PROGRESS', 150.0)})

        assert _colunas(reducer)['IN_PROGRESS'] == ['D', 'A', 'E']
        assert 'A' not in _colunas(reducer)['DONE']

    def test_evento_de_outra_tarefa_mantem_pending(self, reducer):
        _arrastar(reducer, 'A', status='DONE', over_id='Y')
        reducer.dispatch({'type': 'drag.drop'})

        reducer.dispatch({'type': 'task.created', 'task': payload('N', 'TODO', 5000.0)})

        assert 'A' in reducer.state.pending
        assert _colunas(reducer)['TODO'] == ['B', 'C', 'N']

    def test_fetch_remove_obsoletas(self, reducer, board_inicial):
        reducer.dispatch({'type': 'tasks.fetched', 'tasks': board_inicial[:2]})
        assert _colunas(reducer) == {'TODO': ['A', 'B'], 'IN_PROGRESS': [], 'DONE': []}

    def test_remocao_durante_arraste_cancela(self, reducer):
        """Deve encerrar o arraste se a tarefa arrastada for removida."""
        _arrastar(reducer, 'A', status='DONE', over_id='Y')

        reducer.dispatch({'type': 'task.deleted', 'id': 'A'})

        assert reducer.state.fase == 'idle'
        assert 'A' not in ids(reducer.state.visible())
        assert reducer.dispatch({'type': 'drag.drop'}) == ()

    def test_atualizacao_durante_arraste_mantem_arraste(self, reducer):
        _arrastar(reducer, 'A', status='DONE', over_id='Y')

        reducer.dispatch({'type': 'task.updated', 'task': payload('B', 'TODO', 50.0)})

        assert reducer.state.fase == 'dragging'
        assert _colunas(reducer)['TODO'] == ['B', 'C']


# ─────────────────────────────────────────────────────────────────────────────
# apply()
# ─────────────────────────────────────────────────────────────────────────────


class TestApply:
    """Função pura de transição."""

    def test_nao_altera_estado_de_entrada(self, board_inicial):
        estado = BoardState(projeto_id=PROJETO_ID)

        transicao = apply(estado, {'type': 'tasks.fetched', 'tasks': board_inicial})

        assert estado.committed == ()
        assert len(transicao.state.committed) == 5
        assert transicao.effects == ()

    def test_tipo_desconhecido(self):
        with pytest.raises(EventoInvalido):
            apply(BoardState(projeto_id=PROJETO_ID), {'type': 'task.moved'})

    def test_campo_ausente(self):
        """Deve rejeitar evento sem o campo obrigatório."""
        with pytest.raises(EventoInvalido):
            apply(BoardState(projeto_id=PROJETO_ID), {'type': 'task.created'})

    def test_tarefa_sem_id(self):
        with pytest.raises(EventoInvalido):
            apply(BoardState(projeto_id=PROJETO_ID), {'type': 'task.updated', 'task': {'status': 'TODO'}})


class TestCenarioArrasteEntreColunas:
    """T(TODO, 500) solta entre U(DONE, 100) e V(DONE, 200)."""

    def test_persiste_done_150(self):
        reducer = BoardReducer(PROJETO_ID, [
            payload('T', 'TODO', 500.0),
            payload('U', 'DONE', 100.0),
            payload('V', 'DONE', 200.0),
        ])

        _arrastar(reducer, 'T', status='DONE', over_id='V')
        efeitos = reducer.dispatch({'type': 'drag.drop'})

        assert [(e.task_id, e.campos['status'], e.campos['ordem']) for e in efeitos] == [('T', 'DONE', 150.0)]


class TestVizinhosSemOrdem:
    """Soltura perto de tarefas que ainda não têm ordem."""

    @pytest.fixture
    def reducer(self):
        """TODO: N1(sem ordem) N2(sem ordem) X(10); DONE: M(500)."""
        return BoardReducer(PROJETO_ID, [
            payload('N1', 'TODO'),
            payload('N2', 'TODO'),
            payload('X', 'TODO', 10.0),
            payload('M', 'DONE', 500.0),
        ])

    def test_usa_a_proxima_tarefa_ordenada_como_limite(self, reducer):
        """Deve ficar antes de X em vez de ir para o fim da coluna."""
        _arrastar(reducer, 'M', status='TODO', over_id='N2')

        campos = reducer.dispatch({'type': 'drag.drop'})[0].campos

        assert campos['ordem'] == 10.0 - 1000.0

    def test_posicao_apos_confirmacao(self, reducer):
        _arrastar(reducer, 'M', status='TODO', over_id='N2')
        campos = reducer.dispatch({'type': 'drag.drop'})[0].campos

        reducer.dispatch({'type': 'task.updated', 'task': payload('M', 'TODO', campos['ordem'])})

        assert _colunas(reducer)['TODO'] == ['N1', 'N2', 'M', 'X']

    def test_limite_anterior_ignora_tarefas_sem_ordem(self, reducer):
        """Deve usar X como limite inferior ao soltar depois dele."""
        _arrastar(reducer, 'M', status='TODO')
        campos = reducer.dispatch({'type': 'drag.drop'})[0].campos
        assert campos['ordem'] == 10.0 + 1000.0

    def test_coluna_so_com_tarefas_sem_ordem_usa_semente(self):
        reducer = BoardReducer(PROJETO_ID, [payload('N1', 'TODO'), payload('M', 'DONE', 500.0)])
        _arrastar(reducer, 'M', status='TODO', over_id='N1')

        campos = reducer.dispatch({'type': 'drag.drop'})[0].campos

        assert campos['ordem'] == 1000.0


class TestGapConfigurado:
    """BoardReducer com gap e semente próprios."""

    @pytest.fixture
    def reducer(self, board_inicial):
        return BoardReducer(PROJETO_ID, board_inicial, gap=10.0, seed=0.0)

    def test_fim_de_coluna(self, reducer):
        _arrastar(reducer, 'A', status='IN_PROGRESS')
        campos = reducer.dispatch({'type': 'drag.drop'})[0].campos
        assert campos['ordem'] == 210.0

    def test_inicio_de_coluna(self, reducer):
        _arrastar(reducer, 'C', status='TODO', over_id='A')
        campos = reducer.dispatch({'type': 'drag.drop'})[0].campos
        assert campos['ordem'] == 90.0

    def test_coluna_vazia(self, reducer):
        _arrastar(reducer, 'A', status='DONE')
        campos = reducer.dispatch({'type': 'drag.drop'})[0].campos
        assert campos['ordem'] == 0.0

    def test_entre_vizinhas_independe_do_gap(self, reducer):
        _arrastar(reducer, 'A', status='IN_PROGRESS', over_id='E')
        campos = reducer.dispatch({'type': 'drag.drop'})[0].campos
        assert campos['ordem'] == 150.0

    def test_configuracao_sobrevive_as_transicoes(self, reducer, board_inicial):
        reducer.dispatch({'type': 'tasks.fetched', 'tasks': board_inicial})
        assert (reducer.state.gap, reducer.state.seed) == (10.0, 0.0)
