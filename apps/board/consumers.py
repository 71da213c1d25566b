# apps/board/consumers.py

import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.conf import settings
from django.utils import timezone

from apps.core.models import Projeto, Tarefa
from apps.core.permissions import QuadroPermissions

from .realtime import grupo_projeto

logger = logging.getLogger(__name__)


class ProjetoConsumer(AsyncWebsocketConsumer):
    """
    Consumer WebSocket da sala de um projeto

    Funcionalidades:
    - Repasse dos registros de tarefa criados, atualizados e removidos
    - Sincronização completa sob demanda (sync_board)
    - Heartbeat (ping/pong)
    """

    async def connect(self):
        """
        Conecta usuário ao grupo do projeto
        Verifica participação antes de aceitar conexão
        """
        self.projeto_id = int(self.scope['url_route']['kwargs']['projeto_id'])
        self.grupo = grupo_projeto(self.projeto_id)
        self.user = self.scope.get('user')

        if self.user is None or not self.user.is_authenticated:
            logger.warning("❌ Conexão WebSocket rejeitada - usuário não autenticado")
            await self.close()
            return

        has_access = await self.check_projeto_access()
        if not has_access:
            logger.warning(f"❌ Conexão WebSocket rejeitada - {self.user.username} sem acesso ao projeto {self.projeto_id}")
            await self.close()
            return

        await self.channel_layer.group_add(self.grupo, self.channel_name)
        await self.accept()

        logger.info(f"✅ WebSocket conectado - {self.user.username} no projeto {self.projeto_id}")

    async def disconnect(self, close_code):
        """
        Sai do grupo do projeto
        """
        if hasattr(self, 'grupo'):
            await self.channel_layer.group_discard(self.grupo, self.channel_name)

        username = getattr(self.user, 'username', None) if hasattr(self, 'user') else None
        logger.info(f"🔌 WebSocket desconectado - {username} do projeto {getattr(self, 'projeto_id', None)}")

    async def receive(self, text_data=None, bytes_data=None):
        """
        Recebe mensagens do cliente WebSocket
        """
        try:
            data = json.loads(text_data or '')
        except json.JSONDecodeError:
            logger.error(f"❌ JSON inválido recebido via WebSocket de {self.user.username}")
            return

        if not isinstance(data, dict):
            logger.error(f"❌ Mensagem WebSocket inesperada de {self.user.username}")
            return

        message_type = data.get('type')

        # Heartbeat/Ping
        if message_type == 'ping':
            await self.send(text_data=json.dumps({
                'type': 'pong',
                'intervalo': getattr(settings, 'QUADRO_WS_HEARTBEAT_INTERVAL', 30),
                'timestamp': self.get_timestamp()
            }))

        # Sincronização completa do board
        elif message_type == 'sync_board':
            tarefas = await self.get_board_state()
            await self.send(text_data=json.dumps({
                'type': 'board_sync',
                'projeto_id': self.projeto_id,
                'tasks': tarefas,
                'timestamp': self.get_timestamp()
            }))

        else:
            logger.debug(f"Mensagem WebSocket ignorada: {message_type!r}")

    # === Handlers das mensagens de grupo ===

    async def task_created(self, event):
        """
        Repassa tarefa criada
        """
        await self.send(text_data=json.dumps({
            'type': 'task:created',
            'task': event['message']
        }))

    async def task_updated(self, event):
        """
        Repassa tarefa atualizada (inclui movimentos de coluna/ordem)
        """
        await self.send(text_data=json.dumps({
            'type': 'task:updated',
            'task': event['message']
        }))

    async def task_deleted(self, event):
        """
        Repassa remoção de tarefa
        """
        await self.send(text_data=json.dumps({
            'type': 'task:deleted',
            'id': event['message']['id']
        }))

    # === Métodos auxiliares ===

    @database_sync_to_async
    def check_projeto_access(self):
        """
        Verifica se usuário participa do projeto
        """
        try:
            projeto = Projeto.objects.get(id=self.projeto_id)
        except Projeto.DoesNotExist:
            return False
        return QuadroPermissions.tem_acesso_projeto(self.user, projeto)

    @database_sync_to_async
    def get_board_state(self):
        """
        Lista completa de tarefas do projeto
        """
        tarefas = Tarefa.objects.filter(projeto_id=self.projeto_id).ordenadas()
        return [t.to_payload() for t in tarefas]

    def get_timestamp(self):
        """
        Retorna timestamp atual em formato ISO
        """
        return timezone.now().isoformat()
