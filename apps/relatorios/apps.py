# apps/relatorios/apps.py

from django.apps import AppConfig


class RelatoriosConfig(AppConfig):
    """Configuração da app Relatórios"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.relatorios'
    verbose_name = 'Relatórios - Resumo de projetos'
