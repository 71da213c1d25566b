# apps/core/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html

from .models import Usuario, Projeto, MembroProjeto, Tarefa


@admin.register(Usuario)
class UsuarioAdmin(BaseUserAdmin):
    """Admin customizado para o modelo Usuario"""

    list_display = ['username', 'email', 'get_full_name', 'is_active', 'date_joined']
    list_filter = ['is_staff', 'is_active', 'date_joined']
    search_fields = ['username', 'first_name', 'last_name', 'email']
    ordering = ['-date_joined']


class MembroProjetoInline(admin.TabularInline):
    """Participantes do projeto"""
    model = MembroProjeto
    extra = 0
    fields = ['usuario', 'papel', 'criado_em']
    readonly_fields = ['criado_em']


class TarefaInline(admin.TabularInline):
    """Tarefas do projeto, na ordem das colunas"""
    model = Tarefa
    fk_name = 'projeto'
    extra = 0
    fields = ['titulo', 'status', 'ordem', 'responsavel', 'prioridade']
    ordering = ['status', 'ordem']


@admin.register(Projeto)
class ProjetoAdmin(admin.ModelAdmin):
    """Admin para gerenciamento de projetos"""

    list_display = ['nome', 'dono', 'membros_count', 'tarefas_count', 'cor_preview', 'criado_em']
    list_filter = ['criado_em']
    search_fields = ['nome', 'descricao', 'dono__username']
    readonly_fields = ['criado_em', 'atualizado_em']
    inlines = [MembroProjetoInline, TarefaInline]

    def membros_count(self, obj):
        """Conta quantidade de membros"""
        return obj.participacoes.count()

    membros_count.short_description = 'Membros'

    def tarefas_count(self, obj):
        return obj.tarefas.count()

    tarefas_count.short_description = 'Tarefas'

    def cor_preview(self, obj):
        """Preview da cor do projeto"""
        return format_html(
            '<div style="width: 20px; height: 20px; background-color: {}; '
            'border-radius: 3px; border: 1px solid #ccc;"></div>',
            obj.cor
        )

    cor_preview.short_description = 'Cor'


@admin.register(Tarefa)
class TarefaAdmin(admin.ModelAdmin):
    """Admin para tarefas"""

    list_display = ['titulo', 'projeto', 'status', 'ordem', 'prioridade', 'responsavel', 'atualizado_em']
    list_filter = ['status', 'prioridade', 'projeto']
    search_fields = ['titulo', 'descricao']
    ordering = ['projeto', 'status', 'ordem']
    readonly_fields = ['criado_em', 'atualizado_em']
