# apps/core/models.py

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone

from .choices import (
    STATUS_CHOICES, STATUS_TODO, STATUS_DONE,
    PRIORIDADE_CHOICES, PAPEL_CHOICES, PAPEL_MEMBER,
)


class Usuario(AbstractUser):
    """
    Modelo de usuário customizado

    Convites para projetos são feitos por email, por isso o email é único.
    """

    email = models.EmailField(unique=True)

    # === METADADOS ===
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'usuario'

    def get_projetos_acessiveis(self):
        """
        Retorna projetos onde o usuário é dono ou membro
        """
        return Projeto.objects.filter(
            models.Q(dono=self) | models.Q(membros=self)
        ).distinct()

    def to_payload(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'nome': self.get_full_name(),
        }

    def __str__(self):
        nome_completo = self.get_full_name()
        return nome_completo or self.username


class Projeto(models.Model):
    """Projeto - agrega as tarefas de um board"""

    nome = models.CharField(max_length=200)
    descricao = models.TextField(blank=True)
    cor = models.CharField(max_length=7, default='#6366F1')
    dono = models.ForeignKey(
        Usuario,
        on_delete=models.PROTECT,
        related_name='projetos_criados'
    )
    membros = models.ManyToManyField(
        Usuario,
        through='MembroProjeto',
        related_name='projetos_membro'
    )
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'projeto'
        ordering = ['-criado_em']

    def __str__(self):
        return self.nome

    def tem_membro(self, usuario):
        """Dono ou membro explícito"""
        if not usuario.is_authenticated:
            return False
        if self.dono_id == usuario.id:
            return True
        return self.participacoes.filter(usuario=usuario).exists()

    def to_payload(self):
        return {
            'id': self.id,
            'nome': self.nome,
            'descricao': self.descricao,
            'cor': self.cor,
            'dono_id': self.dono_id,
            'membros': [
                {
                    'usuario_id': m.usuario_id,
                    'username': m.usuario.username,
                    'email': m.usuario.email,
                    'papel': m.papel,
                }
                for m in self.participacoes.select_related('usuario').order_by('criado_em', 'id')
            ],
            'criado_em': self.criado_em.isoformat() if self.criado_em else None,
            'atualizado_em': self.atualizado_em.isoformat() if self.atualizado_em else None,
        }


class MembroProjeto(models.Model):
    """Participação de um usuário em um projeto"""

    projeto = models.ForeignKey(
        Projeto,
        on_delete=models.CASCADE,
        related_name='participacoes'
    )
    usuario = models.ForeignKey(
        Usuario,
        on_delete=models.CASCADE,
        related_name='participacoes'
    )
    papel = models.CharField(max_length=10, choices=PAPEL_CHOICES, default=PAPEL_MEMBER)
    criado_em = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'membro_projeto'
        unique_together = ['projeto', 'usuario']

    def __str__(self):
        return f"{self.usuario} em {self.projeto} ({self.papel})"


class TarefaQuerySet(models.QuerySet):

    def ordenadas(self):
        """Ordem das colunas: sem ordem primeiro, depois crescente"""
        return self.order_by('status', models.F('ordem').asc(nulls_first=True), 'id')

    def da_coluna(self, projeto, status):
        return self.filter(projeto=projeto, status=status)


class Tarefa(models.Model):
    """
    Tarefa do board

    A posição dentro da coluna é dada por `ordem`, um número real:
    mover uma tarefa altera apenas o registro dela (status + ordem),
    nunca a ordem das vizinhas.
    """

    titulo = models.CharField(max_length=200)
    descricao = models.TextField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_TODO
    )
    prioridade = models.CharField(
        max_length=10,
        choices=PRIORIDADE_CHOICES,
        default='MEDIUM'
    )
    prazo = models.DateField(null=True, blank=True)
    projeto = models.ForeignKey(
        Projeto,
        on_delete=models.CASCADE,
        related_name='tarefas'
    )
    responsavel = models.ForeignKey(
        Usuario,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tarefas_responsavel'
    )
    criado_por = models.ForeignKey(
        Usuario,
        on_delete=models.PROTECT,
        related_name='tarefas_criadas'
    )
    ordem = models.FloatField(null=True, blank=True)

    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    objects = TarefaQuerySet.as_manager()

    class Meta:
        db_table = 'tarefa'
        ordering = ['status', 'ordem', 'id']
        indexes = [
            models.Index(fields=['projeto', 'status', 'ordem'], name='tarefa_proj_status_ordem_idx'),
        ]

    def __str__(self):
        return self.titulo

    def esta_atrasada(self):
        """Prazo vencido e ainda não concluída"""
        if self.prazo and self.status != STATUS_DONE:
            return timezone.localdate() > self.prazo
        return False

    def to_payload(self):
        """
        Representação usada na API HTTP e nos eventos de tempo real
        """
        return {
            'id': self.id,
            'titulo': self.titulo,
            'descricao': self.descricao,
            'status': self.status,
            'prioridade': self.prioridade,
            'prazo': self.prazo.isoformat() if self.prazo else None,
            'projeto_id': self.projeto_id,
            'responsavel_id': self.responsavel_id,
            'criado_por_id': self.criado_por_id,
            'ordem': self.ordem,
            'criado_em': self.criado_em.isoformat() if self.criado_em else None,
            'atualizado_em': self.atualizado_em.isoformat() if self.atualizado_em else None,
        }
