"""Testes de apps/board/reconcile.py

Registros autoritativos substituem os locais de mesmo id; a lista
completa de um fetch descarta as tarefas locais que não vieram nela.
"""

from apps.board.reconcile import find, merge, remove
from tests.conftest import PROJETO_ID, ids, registro


class TestMergeIncremental:
    """Mescla de um único registro (eventos de tempo real)."""

    def test_atualizacao_substitui_registro(self):
        local = (registro('A', ordem=100.0), registro('B', ordem=200.0))

        resultado = merge(local, [registro('A', 'DONE', 300.0)])

        assert ids(resultado) == ['B', 'A']
        assert find(resultado, 'A').status == 'DONE'

    def test_idempotente(self):
        """Deve produzir o mesmo estado ao aplicar o mesmo registro duas vezes."""
        local = (registro('A', ordem=100.0), registro('B', ordem=200.0))
        atualizado = registro('B', 'IN_PROGRESS', 50.0)

        uma_vez = merge(local, [atualizado])
        duas_vezes = merge(uma_vez, [atualizado])

        assert uma_vez == duas_vezes

    def test_criacao_duplicada_nao_duplica(self):
        """Deve manter uma única cópia quando o mesmo created chega duas vezes."""
        local = merge((), [registro('A', ordem=100.0)])
        local = merge(local, [registro('A', ordem=100.0)])

        assert ids(local) == ['A']

    def test_ultima_ocorrencia_vence_no_lote(self):
        resultado = merge((), [registro('A', ordem=1.0), registro('A', 'DONE', 2.0)])

        assert len(resultado) == 1
        assert resultado[0].status == 'DONE'

    def test_incremental_nao_remove_nada(self):
        local = (registro('A', ordem=100.0), registro('B', ordem=200.0))
        assert ids(merge(local, [registro('C', ordem=300.0)])) == ['A', 'B', 'C']

    def test_nao_altera_local(self):
        local = (registro('A', ordem=100.0),)
        merge(local, [registro('A', 'DONE', 1.0)])
        assert local[0].status == 'TODO'


class TestMergeEscopoCompleto:
    """Mescla da lista completa de um fetch."""

    def test_descarta_tarefas_ausentes(self):
        """Deve remover B quando o fetch traz só A e C."""
        local = (registro('A', ordem=1.0), registro('B', ordem=2.0), registro('C', ordem=3.0))

        resultado = merge(local, [registro('A', ordem=1.0), registro('C', ordem=3.0)],
                          escopo_completo=PROJETO_ID)

        assert ids(resultado) == ['A', 'C']

    def test_preserva_outros_projetos(self):
        """Deve descartar apenas tarefas do projeto buscado."""
        local = (registro('A'), registro('X', projeto_id=2))

        resultado = merge(local, [], escopo_completo=PROJETO_ID)

        assert ids(resultado) == ['X']


class TestRemove:
    """Remoção por id."""

    def test_remove_pelo_id(self):
        local = (registro('A', ordem=1.0), registro('B', ordem=2.0))
        assert ids(remove(local, 'A')) == ['B']

    def test_id_desconhecido_nao_altera(self):
        local = (registro('A', ordem=1.0),)
        assert remove(local, 'Z') == local

    def test_criacao_atrasada_ressuscita(self):
        """Deve recriar a tarefa quando um created atrasado chega após o deleted."""
        local = remove((registro('A', ordem=1.0),), 'A')
        local = merge(local, [registro('A', ordem=1.0)])

        assert ids(local) == ['A']
