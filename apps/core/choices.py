# apps/core/choices.py

"""
Constantes de domínio compartilhadas entre models e o motor do board.

Ficam fora de models.py para que o motor de ordenação (apps.board)
possa importá-las sem carregar o registro de apps do Django.
"""

STATUS_TODO = 'TODO'
STATUS_IN_PROGRESS = 'IN_PROGRESS'
STATUS_DONE = 'DONE'

STATUS_CHOICES = [
    (STATUS_TODO, 'A Fazer'),
    (STATUS_IN_PROGRESS, 'Em Progresso'),
    (STATUS_DONE, 'Concluído'),
]

# Ordem visual das colunas no board
STATUS_COLUNAS = (STATUS_TODO, STATUS_IN_PROGRESS, STATUS_DONE)

PRIORIDADE_CHOICES = [
    ('LOW', '🟢 Baixa'),
    ('MEDIUM', '🟡 Média'),
    ('HIGH', '🟠 Alta'),
    ('URGENT', '🔴 Urgente'),
]

PAPEL_OWNER = 'OWNER'
PAPEL_MEMBER = 'MEMBER'

PAPEL_CHOICES = [
    (PAPEL_OWNER, 'Dono'),
    (PAPEL_MEMBER, 'Membro'),
]
