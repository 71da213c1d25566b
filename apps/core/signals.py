# apps/core/signals.py

import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from .choices import PAPEL_OWNER
from .models import Projeto, MembroProjeto

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Projeto)
def adicionar_dono_como_membro(sender, instance, created, **kwargs):
    """
    Todo projeto novo tem o dono registrado como participante OWNER
    """
    if created:
        MembroProjeto.objects.get_or_create(
            projeto=instance,
            usuario=instance.dono,
            defaults={'papel': PAPEL_OWNER}
        )
        logger.info(f"📁 Projeto {instance.id} criado por {instance.dono.username}")
