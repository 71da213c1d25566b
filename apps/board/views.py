# apps/board/views.py

import logging

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from apps.core.forms import TarefaForm
from apps.core.models import Tarefa
from apps.core.permissions import QuadroPermissions, api_login_required, requer_acesso_projeto
from apps.core.utils import ler_json, erros_formulario, CorpoInvalido

from .ordering import seed_order, gap_exhausted, ORDER_GAP, DEFAULT_ORDER, ORDER_EPSILON
from .realtime import notificar_tarefa

logger = logging.getLogger(__name__)

CAMPOS_TAREFA = ('titulo', 'descricao', 'status', 'prioridade', 'prazo', 'responsavel', 'ordem')


@csrf_exempt
@api_login_required
@require_http_methods(['GET', 'POST'])
@requer_acesso_projeto
def tarefas_api(request, projeto_id):
    """
    GET: lista completa das tarefas do projeto
    POST: cria tarefa; sem ordem informada, entra no fim da coluna
    """
    projeto = request.projeto

    if request.method == 'GET':
        tarefas = Tarefa.objects.filter(projeto=projeto).ordenadas()
        return JsonResponse([t.to_payload() for t in tarefas], safe=False)

    try:
        data = ler_json(request)
    except CorpoInvalido as e:
        return JsonResponse({'error': str(e)}, status=400)

    dados = {'status': 'TODO', 'prioridade': 'MEDIUM'}
    dados.update(_dados_formulario(data))

    form = TarefaForm(dados, projeto=projeto)
    if not form.is_valid():
        return JsonResponse({'errors': erros_formulario(form)}, status=400)

    tarefa = form.save(commit=False)
    tarefa.projeto = projeto
    tarefa.criado_por = request.user

    if tarefa.ordem is None:
        ultima = (
            Tarefa.objects.da_coluna(projeto, tarefa.status)
            .exclude(ordem=None)
            .order_by('-ordem')
            .values('ordem')[:1]
        )
        tarefa.ordem = seed_order(
            ultima,
            gap=getattr(settings, 'QUADRO_ORDER_GAP', ORDER_GAP),
            seed=getattr(settings, 'QUADRO_DEFAULT_ORDER', DEFAULT_ORDER),
        )

    tarefa.save()

    logger.info(f"✨ Tarefa {tarefa.id} criada em {projeto.id}/{tarefa.status} (ordem {tarefa.ordem})")
    payload = tarefa.to_payload()
    notificar_tarefa('created', projeto.id, payload)

    return JsonResponse(payload, status=201)


@csrf_exempt
@api_login_required
@require_http_methods(['GET', 'PATCH', 'DELETE'])
def tarefa_api(request, tarefa_id):
    """
    Detalhe, atualização parcial e remoção de uma tarefa

    Um movimento no board é um PATCH com status + ordem: só o registro
    da tarefa movida é gravado.
    """
    try:
        tarefa = Tarefa.objects.select_related('projeto').get(id=tarefa_id)
    except Tarefa.DoesNotExist:
        return JsonResponse({'error': 'Tarefa não encontrada'}, status=404)

    if not QuadroPermissions.pode_editar_tarefa(request.user, tarefa):
        return JsonResponse({'error': 'Você não tem acesso a esta tarefa'}, status=403)

    if request.method == 'GET':
        return JsonResponse(tarefa.to_payload())

    projeto_id = tarefa.projeto_id

    if request.method == 'DELETE':
        tarefa.delete()
        logger.info(f"🗑️ Tarefa {tarefa_id} removida por {request.user.username}")
        notificar_tarefa('deleted', projeto_id, {'id': tarefa_id})
        return JsonResponse({'id': tarefa_id})

    try:
        data = ler_json(request)
    except CorpoInvalido as e:
        return JsonResponse({'error': str(e)}, status=400)

    atual = {
        'titulo': tarefa.titulo,
        'descricao': tarefa.descricao,
        'status': tarefa.status,
        'prioridade': tarefa.prioridade,
        'prazo': tarefa.prazo,
        'responsavel': tarefa.responsavel_id,
        'ordem': tarefa.ordem,
    }
    atual.update(_dados_formulario(data))

    form = TarefaForm(atual, instance=tarefa)
    if not form.is_valid():
        return JsonResponse({'errors': erros_formulario(form)}, status=400)

    tarefa = form.save()
    _verificar_precisao(tarefa)

    payload = tarefa.to_payload()
    notificar_tarefa('updated', projeto_id, payload)

    return JsonResponse(payload)


# === Auxiliares ===

def _dados_formulario(data):
    """
    Converte o payload da API nos campos do TarefaForm
    Campos desconhecidos são ignorados
    """
    dados = dict(data)
    if 'responsavel_id' in dados:
        dados['responsavel'] = dados.pop('responsavel_id')
    return {campo: valor for campo, valor in dados.items() if campo in CAMPOS_TAREFA}


def _verificar_precisao(tarefa):
    """
    Alerta quando a tarefa ficou colada a uma vizinha: a coluna está
    perto do limite de precisão e deveria ser renormalizada
    """
    if tarefa.ordem is None:
        return

    epsilon = getattr(settings, 'QUADRO_ORDER_EPSILON', ORDER_EPSILON)
    coluna = Tarefa.objects.da_coluna(tarefa.projeto_id, tarefa.status).exclude(id=tarefa.id).exclude(ordem=None)

    anterior = coluna.filter(ordem__lte=tarefa.ordem).order_by('-ordem').values_list('ordem', flat=True).first()
    seguinte = coluna.filter(ordem__gte=tarefa.ordem).order_by('ordem').values_list('ordem', flat=True).first()

    if gap_exhausted(anterior, tarefa.ordem, epsilon) or gap_exhausted(tarefa.ordem, seguinte, epsilon):
        logger.warning(
            f"⚠️ Coluna {tarefa.projeto_id}/{tarefa.status} sem precisão de ordem perto de "
            f"{tarefa.ordem!r} - renormalização recomendada"
        )
