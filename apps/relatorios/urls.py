# apps/relatorios/urls.py

from django.urls import path
from . import views

app_name = 'relatorios'

urlpatterns = [
    path('projetos/<int:projeto_id>/resumo/', views.resumo_projeto_api, name='resumo_projeto'),
]
