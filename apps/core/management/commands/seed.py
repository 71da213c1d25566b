# apps/core/management/commands/seed.py

from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.board.ordering import seed_order, ORDER_GAP, DEFAULT_ORDER
from apps.core.choices import PAPEL_MEMBER, STATUS_TODO, STATUS_IN_PROGRESS, STATUS_DONE
from apps.core.models import Usuario, Projeto, MembroProjeto, Tarefa

NOME_PROJETO_DEMO = 'Projeto Demo'

TAREFAS_DEMO = [
    (STATUS_TODO, 'Definir escopo do MVP', 'HIGH'),
    (STATUS_TODO, 'Desenhar wireframes do quadro', 'MEDIUM'),
    (STATUS_TODO, 'Escrever documentação da API', 'LOW'),
    (STATUS_IN_PROGRESS, 'Implementar arrastar e soltar', 'URGENT'),
    (STATUS_IN_PROGRESS, 'Configurar WebSockets', 'HIGH'),
    (STATUS_DONE, 'Criar repositório', 'LOW'),
    (STATUS_DONE, 'Configurar CI', 'MEDIUM'),
]


class Command(BaseCommand):
    help = 'Cria um projeto demo com tarefas já ordenadas em cada coluna'

    def add_arguments(self, parser):
        parser.add_argument(
            '--limpar',
            action='store_true',
            help='Remove o projeto demo existente antes de recriar',
        )
        parser.add_argument(
            '--senha',
            default='demo123',
            help='Senha dos usuários demo (padrão: demo123)',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write('🌱 Populando banco com dados demo...')

        dono = self._usuario('demo', 'demo@quadro.local', options['senha'], 'Demo')
        membro = self._usuario('ana', 'ana@quadro.local', options['senha'], 'Ana')

        if options['limpar']:
            removidos = Projeto.objects.filter(nome=NOME_PROJETO_DEMO, dono=dono)
            for projeto in removidos:
                projeto.delete()
            self.stdout.write('  🗑️  Projeto demo anterior removido')

        projeto, criado = Projeto.objects.get_or_create(
            nome=NOME_PROJETO_DEMO,
            dono=dono,
            defaults={'descricao': 'Projeto de demonstração do quadro de tarefas'},
        )

        if not criado:
            self.stdout.write(self.style.WARNING(
                f'⚠️  "{NOME_PROJETO_DEMO}" já existe (id {projeto.id}) - use --limpar para recriar'
            ))
            return

        MembroProjeto.objects.get_or_create(
            projeto=projeto,
            usuario=membro,
            defaults={'papel': PAPEL_MEMBER},
        )

        gap = getattr(settings, 'QUADRO_ORDER_GAP', ORDER_GAP)
        semente = getattr(settings, 'QUADRO_DEFAULT_ORDER', DEFAULT_ORDER)

        for status, titulo, prioridade in TAREFAS_DEMO:
            coluna = Tarefa.objects.da_coluna(projeto, status)
            Tarefa.objects.create(
                projeto=projeto,
                titulo=titulo,
                status=status,
                prioridade=prioridade,
                criado_por=dono,
                responsavel=membro if status == STATUS_IN_PROGRESS else None,
                ordem=seed_order(coluna, gap=gap, seed=semente),
            )

        self.stdout.write(self.style.SUCCESS(
            f'✅ Projeto demo criado (id {projeto.id}) com {len(TAREFAS_DEMO)} tarefas\n'
            f'🔑 Acesse com: demo/{options["senha"]} ou ana/{options["senha"]}'
        ))

    def _usuario(self, username, email, senha, nome):
        usuario, criado = Usuario.objects.get_or_create(
            username=username,
            defaults={'email': email, 'first_name': nome},
        )
        if criado:
            usuario.set_password(senha)
            usuario.save()
            self.stdout.write(f'  👤 Usuário {username} criado')
        return usuario
