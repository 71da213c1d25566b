# apps/relatorios/views.py

import logging

from django.http import JsonResponse
from django.views.decorators.http import require_GET

from apps.core.permissions import api_login_required, requer_acesso_projeto

from .utils import resumo_projeto

logger = logging.getLogger(__name__)


@api_login_required
@require_GET
@requer_acesso_projeto
def resumo_projeto_api(request, projeto_id):
    """
    API JSON com o resumo do projeto
    Contagens por coluna, atrasadas, conclusões por dia e atualizações recentes
    """
    resumo = resumo_projeto(request.projeto)
    logger.debug(f"📊 Resumo do projeto {projeto_id} gerado para {request.user.username}")
    return JsonResponse(resumo)
