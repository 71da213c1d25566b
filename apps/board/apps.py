# apps/board/apps.py

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class BoardConfig(AppConfig):
    """Configuração da app Board"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.board'
    verbose_name = 'Board - Quadro de tarefas'

    def ready(self):
        from django.conf import settings

        logger.info(
            f"🔌 Board App inicializada - gap de ordem {getattr(settings, 'QUADRO_ORDER_GAP', None)}"
        )
