# apps/core/urls.py

from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    # Autenticação por sessão
    path('api/auth/login/', views.login_api, name='login'),
    path('api/auth/logout/', views.logout_api, name='logout'),
    path('api/auth/registro/', views.registro_api, name='registro'),
    path('api/auth/sessao/', views.sessao_api, name='sessao'),

    # Projetos
    path('api/projetos/', views.projetos_api, name='projetos'),
    path('api/projetos/<int:projeto_id>/', views.projeto_detalhe_api, name='projeto_detalhe'),

    # Membros
    path('api/projetos/<int:projeto_id>/membros/', views.membros_api, name='membros'),
    path('api/projetos/<int:projeto_id>/membros/<int:usuario_id>/', views.membro_remover_api, name='membro_remover'),

    # Monitoramento
    path('health/', views.health_check, name='health'),
]
