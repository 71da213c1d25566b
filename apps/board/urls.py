# apps/board/urls.py

from django.urls import path
from . import views

app_name = 'board'

urlpatterns = [
    # Tarefas do projeto (lista completa / criação)
    path('projetos/<int:projeto_id>/tarefas/', views.tarefas_api, name='tarefas'),

    # Detalhe, movimento (PATCH status + ordem) e remoção
    path('tarefas/<int:tarefa_id>/', views.tarefa_api, name='tarefa'),
]
