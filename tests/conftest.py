"""Fixtures compartilhadas dos testes do Quadro Board.

- Construtores de payload / TaskRecord para os testes do motor do board
- Usuários, projeto e clients autenticados para os testes de API
"""

import pytest
from django.test import Client

from apps.board.records import TaskRecord


# ─────────────────────────────────────────────────────────────────────────────
# Payloads e registros
# ─────────────────────────────────────────────────────────────────────────────

PROJETO_ID = 1


def payload(id, status='TODO', ordem=None, projeto_id=PROJETO_ID, **dados):
    """Payload de tarefa como chega da API ou do canal de tempo real."""
    dados.setdefault('titulo', f'Tarefa {id}')
    return {'id': id, 'status': status, 'ordem': ordem, 'projeto_id': projeto_id, **dados}


def registro(id, status='TODO', ordem=None, projeto_id=PROJETO_ID, **dados):
    return TaskRecord.from_payload(payload(id, status, ordem, projeto_id, **dados))


def ids(tarefas):
    return [t.id for t in tarefas]


@pytest.fixture
def board_inicial():
    """Board com duas colunas ocupadas e DONE vazia.

    TODO: A(100) B(200) C(300)
    IN_PROGRESS: D(100) E(200)
    """
    return [
        payload('A', 'TODO', 100.0),
        payload('B', 'TODO', 200.0),
        payload('C', 'TODO', 300.0),
        payload('D', 'IN_PROGRESS', 100.0),
        payload('E', 'IN_PROGRESS', 200.0),
    ]


# ─────────────────────────────────────────────────────────────────────────────
# Banco de dados
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def dono(django_user_model):
    return django_user_model.objects.create_user(
        username='dono', email='dono@quadro.local', password='senha123'
    )


@pytest.fixture
def membro(django_user_model):
    return django_user_model.objects.create_user(
        username='membro', email='membro@quadro.local', password='senha123'
    )


@pytest.fixture
def estranho(django_user_model):
    return django_user_model.objects.create_user(
        username='estranho', email='estranho@quadro.local', password='senha123'
    )


@pytest.fixture
def projeto(dono, membro):
    """Projeto do `dono` com `membro` participando."""
    from apps.core.choices import PAPEL_MEMBER
    from apps.core.models import MembroProjeto, Projeto

    projeto = Projeto.objects.create(nome='Quadro de testes', dono=dono)
    MembroProjeto.objects.create(projeto=projeto, usuario=membro, papel=PAPEL_MEMBER)
    return projeto


@pytest.fixture
def criar_tarefa(projeto, dono):
    """Fábrica de tarefas gravadas no projeto."""
    from apps.core.models import Tarefa

    def _criar(titulo, status='TODO', ordem=None, **campos):
        return Tarefa.objects.create(
            projeto=campos.pop('projeto', projeto),
            titulo=titulo,
            status=status,
            ordem=ordem,
            criado_por=campos.pop('criado_por', dono),
            **campos,
        )

    return _criar


def _client_logado(usuario):
    client = Client()
    client.force_login(usuario)
    return client


@pytest.fixture
def client_dono(dono):
    return _client_logado(dono)


@pytest.fixture
def client_membro(membro):
    return _client_logado(membro)


@pytest.fixture
def client_estranho(estranho):
    return _client_logado(estranho)
