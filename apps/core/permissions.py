# apps/core/permissions.py

from functools import wraps

from django.http import JsonResponse


class QuadroPermissions:
    """
    Sistema de permissões do Quadro Board
    Baseado em participação no projeto: dono ou membro
    """

    @staticmethod
    def tem_acesso_projeto(user, projeto):
        """Verifica se tem acesso ao projeto (dono ou membro)"""
        if not user.is_authenticated:
            return False

        if user.is_superuser:
            return True

        return projeto.tem_membro(user)

    @staticmethod
    def pode_editar_projeto(user, projeto):
        """Apenas o dono altera dados e membros do projeto"""
        if not user.is_authenticated:
            return False

        return projeto.dono_id == user.id or user.is_superuser

    @staticmethod
    def pode_editar_tarefa(user, tarefa):
        """Qualquer membro do projeto pode mover e editar tarefas"""
        return QuadroPermissions.tem_acesso_projeto(user, tarefa.projeto)


# Decoradores para views JSON

def api_login_required(view_func):
    """
    Equivalente ao login_required para a API
    Retorna 401 ao invés de redirecionar para o login
    """

    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'error': 'Autenticação necessária'}, status=401)
        return view_func(request, *args, **kwargs)

    return wrapped_view


def requer_acesso_projeto(view_func):
    """
    Decorador que verifica acesso ao projeto
    Espera que a view receba projeto_id como parâmetro
    """

    @wraps(view_func)
    def wrapped_view(request, projeto_id, *args, **kwargs):
        from .models import Projeto

        try:
            projeto = Projeto.objects.select_related('dono').get(id=projeto_id)
        except Projeto.DoesNotExist:
            return JsonResponse({'error': 'Projeto não encontrado'}, status=404)

        if not QuadroPermissions.tem_acesso_projeto(request.user, projeto):
            return JsonResponse({'error': 'Você não tem acesso a este projeto'}, status=403)

        # Adiciona o projeto ao request para uso na view
        request.projeto = projeto
        return view_func(request, projeto_id, *args, **kwargs)

    return wrapped_view
