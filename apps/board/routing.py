# apps/board/routing.py

from django.urls import re_path
from . import consumers

# Rotas WebSocket para a aplicação board
websocket_urlpatterns = [
    # Sala do projeto - eventos task:created / task:updated / task:deleted
    re_path(r'ws/projeto/(?P<projeto_id>\d+)/$', consumers.ProjetoConsumer.as_asgi()),
]
