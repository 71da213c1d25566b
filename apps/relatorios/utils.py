# apps/relatorios/utils.py

from datetime import timedelta
from typing import Dict, List

from django.conf import settings
from django.db.models import Count
from django.db.models.functions import TruncDate
from django.utils import timezone

from apps.core.choices import STATUS_COLUNAS, STATUS_DONE
from apps.core.models import Projeto, Tarefa


def contar_por_status(projeto: Projeto) -> Dict[str, int]:
    """
    Quantidade de tarefas por coluna (toda coluna aparece, mesmo vazia)
    """
    contagem = {status: 0 for status in STATUS_COLUNAS}

    linhas = (
        Tarefa.objects.filter(projeto=projeto)
        .values('status')
        .annotate(total=Count('id'))
        .order_by()
    )
    for linha in linhas:
        contagem[linha['status']] = linha['total']

    return contagem


def conclusoes_por_dia(projeto: Projeto, dias: int = 30) -> List[Dict]:
    """
    Tarefas concluídas por dia no período, usando a última atualização
    como data de conclusão. Dias sem conclusão aparecem com zero.
    """
    fim = timezone.localdate()
    inicio = fim - timedelta(days=dias - 1)

    linhas = (
        Tarefa.objects.filter(
            projeto=projeto,
            status=STATUS_DONE,
            atualizado_em__date__gte=inicio,
        )
        .annotate(dia=TruncDate('atualizado_em'))
        .values('dia')
        .annotate(total=Count('id'))
        .order_by('dia')
    )
    por_dia = {linha['dia']: linha['total'] for linha in linhas}

    serie = []
    for i in range(dias):
        data = inicio + timedelta(days=i)
        serie.append({
            'data': data.isoformat(),
            'count': por_dia.get(data, 0),
        })
    return serie


def resumo_projeto(projeto: Projeto) -> Dict:
    """
    Resumo do projeto para o dashboard

    Atrasada: prazo anterior a hoje e fora da coluna DONE.
    """
    dias = getattr(settings, 'QUADRO_RELATORIO_DIAS', 30)
    limite_recentes = getattr(settings, 'QUADRO_RELATORIO_RECENTES', 10)

    por_status = contar_por_status(projeto)

    atrasadas = (
        Tarefa.objects.filter(projeto=projeto, prazo__lt=timezone.localdate())
        .exclude(status=STATUS_DONE)
        .count()
    )

    recentes = Tarefa.objects.filter(projeto=projeto).order_by('-atualizado_em', '-id')[:limite_recentes]

    return {
        'projeto': {
            'id': projeto.id,
            'nome': projeto.nome,
        },
        'por_status': por_status,
        'total': sum(por_status.values()),
        'atrasadas': atrasadas,
        'conclusoes_por_dia': conclusoes_por_dia(projeto, dias),
        'recentes': [t.to_payload() for t in recentes],
        'gerado_em': timezone.now().isoformat(),
    }
