# apps/core/views.py

import logging

from django.contrib.auth import authenticate, login, logout
from django.db import transaction
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from apps import __version__

from .choices import PAPEL_MEMBER
from .forms import LoginForm, RegistroForm, ProjetoForm, ConviteMembroForm
from .models import Usuario, Projeto, MembroProjeto
from .permissions import QuadroPermissions, api_login_required, requer_acesso_projeto
from .utils import ler_json, erros_formulario, CorpoInvalido

logger = logging.getLogger(__name__)


# === Autenticação ===

@csrf_exempt
@require_http_methods(['POST'])
def login_api(request):
    """
    Login por sessão com usuário ou email + senha
    """
    try:
        data = ler_json(request)
    except CorpoInvalido as e:
        return JsonResponse({'error': str(e)}, status=400)

    form = LoginForm(data)
    if not form.is_valid():
        return JsonResponse({'errors': erros_formulario(form)}, status=400)

    usuario = _autenticar_usuario(form.cleaned_data['username'], form.cleaned_data['password'])
    if usuario is None:
        logger.warning(f"🔒 Login recusado para {form.cleaned_data['username']!r}")
        return JsonResponse({'error': 'Credenciais inválidas'}, status=401)

    login(request, usuario)
    logger.info(f"🔑 {usuario.username} entrou")
    return JsonResponse(usuario.to_payload())


@csrf_exempt
@require_http_methods(['POST'])
def registro_api(request):
    """
    Cadastro de novo usuário; a sessão já sai autenticada
    """
    try:
        data = ler_json(request)
    except CorpoInvalido as e:
        return JsonResponse({'error': str(e)}, status=400)

    form = RegistroForm(data)
    if not form.is_valid():
        return JsonResponse({'errors': erros_formulario(form)}, status=400)

    usuario = form.save()
    login(request, usuario)

    logger.info(f"🆕 Usuário {usuario.username} registrado")
    return JsonResponse(usuario.to_payload(), status=201)


@csrf_exempt
@require_http_methods(['POST'])
def logout_api(request):
    if request.user.is_authenticated:
        logger.info(f"👋 {request.user.username} saiu")
    logout(request)
    return JsonResponse({'ok': True})


@csrf_exempt
@api_login_required
@require_http_methods(['GET'])
def sessao_api(request):
    """Usuário da sessão atual"""
    return JsonResponse(request.user.to_payload())


def _autenticar_usuario(username, password):
    """Autentica por username e, se falhar, pelo email"""
    usuario = authenticate(username=username, password=password)
    if usuario is not None:
        return usuario

    conta = Usuario.objects.filter(email__iexact=username, is_active=True).first()
    if conta is None:
        return None
    return authenticate(username=conta.username, password=password)


# === Projetos ===

@csrf_exempt
@api_login_required
@require_http_methods(['GET', 'POST'])
def projetos_api(request):
    """
    GET: projetos onde o usuário é dono ou membro
    POST: cria projeto com o usuário como dono
    """
    if request.method == 'GET':
        projetos = request.user.get_projetos_acessiveis().select_related('dono')
        return JsonResponse([p.to_payload() for p in projetos], safe=False)

    try:
        data = ler_json(request)
    except CorpoInvalido as e:
        return JsonResponse({'error': str(e)}, status=400)

    form = ProjetoForm(data)
    if not form.is_valid():
        return JsonResponse({'errors': erros_formulario(form)}, status=400)

    projeto = form.save(commit=False)
    projeto.dono = request.user
    projeto.save()

    return JsonResponse(projeto.to_payload(), status=201)


@csrf_exempt
@api_login_required
@require_http_methods(['GET', 'PATCH', 'DELETE'])
@requer_acesso_projeto
def projeto_detalhe_api(request, projeto_id):
    """
    Detalhe, edição e exclusão de projeto
    Edição e exclusão apenas pelo dono
    """
    projeto = request.projeto

    if request.method == 'GET':
        return JsonResponse(projeto.to_payload())

    if not QuadroPermissions.pode_editar_projeto(request.user, projeto):
        return JsonResponse({'error': 'Apenas o dono pode alterar o projeto'}, status=403)

    if request.method == 'DELETE':
        projeto.delete()
        logger.info(f"🗑️ Projeto {projeto_id} excluído por {request.user.username}")
        return JsonResponse({'id': projeto_id})

    try:
        data = ler_json(request)
    except CorpoInvalido as e:
        return JsonResponse({'error': str(e)}, status=400)

    atual = {'nome': projeto.nome, 'descricao': projeto.descricao, 'cor': projeto.cor}
    form = ProjetoForm({**atual, **data}, instance=projeto)
    if not form.is_valid():
        return JsonResponse({'errors': erros_formulario(form)}, status=400)

    projeto = form.save()
    return JsonResponse(projeto.to_payload())


@csrf_exempt
@api_login_required
@require_http_methods(['POST'])
@requer_acesso_projeto
def membros_api(request, projeto_id):
    """
    Convida um usuário existente para o projeto pelo email
    """
    projeto = request.projeto

    if not QuadroPermissions.pode_editar_projeto(request.user, projeto):
        return JsonResponse({'error': 'Apenas o dono pode convidar membros'}, status=403)

    try:
        data = ler_json(request)
    except CorpoInvalido as e:
        return JsonResponse({'error': str(e)}, status=400)

    form = ConviteMembroForm(data, projeto=projeto)
    if not form.is_valid():
        return JsonResponse({'errors': erros_formulario(form)}, status=400)

    if form.usuario is None:
        return JsonResponse({'error': 'Usuário não encontrado'}, status=404)

    with transaction.atomic():
        membro = MembroProjeto.objects.create(
            projeto=projeto,
            usuario=form.usuario,
            papel=PAPEL_MEMBER
        )

    logger.info(f"👥 {form.usuario.username} adicionado ao projeto {projeto.id}")

    return JsonResponse({
        'projeto_id': projeto.id,
        'usuario_id': membro.usuario_id,
        'username': form.usuario.username,
        'email': form.usuario.email,
        'papel': membro.papel,
    }, status=201)


@csrf_exempt
@api_login_required
@require_http_methods(['DELETE'])
@requer_acesso_projeto
def membro_remover_api(request, projeto_id, usuario_id):
    """
    Remove um membro do projeto (o dono não pode ser removido)
    """
    projeto = request.projeto

    if not QuadroPermissions.pode_editar_projeto(request.user, projeto):
        return JsonResponse({'error': 'Apenas o dono pode remover membros'}, status=403)

    if usuario_id == projeto.dono_id:
        return JsonResponse({'error': 'O dono não pode ser removido do projeto'}, status=400)

    usuario = get_object_or_404(Usuario, id=usuario_id)
    removidos, _ = MembroProjeto.objects.filter(projeto=projeto, usuario=usuario).delete()
    if removidos == 0:
        return JsonResponse({'error': 'Membro não encontrado'}, status=404)

    logger.info(f"👋 {usuario.username} removido do projeto {projeto.id}")
    return JsonResponse({'usuario_id': usuario_id})


def health_check(request):
    """
    Health check para monitoramento
    """
    try:
        # Verificar conexão com banco
        Usuario.objects.count()

        # Verificar cache (Redis em produção)
        from django.core.cache import cache
        cache.set('health_check', 'ok', 60)
        cache.get('health_check')

        status = {
            'status': 'healthy',
            'database': 'ok',
            'cache': 'ok',
            'timestamp': timezone.now().isoformat(),
            'version': __version__
        }

        return JsonResponse(status)

    except Exception as e:
        logger.error(f"❌ Health check falhou: {str(e)}")
        status = {
            'status': 'unhealthy',
            'error': str(e),
            'timestamp': timezone.now().isoformat(),
            'version': __version__
        }

        return JsonResponse(status, status=500)
