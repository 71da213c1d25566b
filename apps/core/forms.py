# apps/core/forms.py

from django import forms
from django.core.exceptions import ValidationError
from django.db.models import Q

from .models import Usuario, Projeto, Tarefa


class LoginForm(forms.Form):
    """Login por usuário ou email"""

    username = forms.CharField(label='Usuário ou Email', max_length=254)
    password = forms.CharField(label='Senha')


class RegistroForm(forms.ModelForm):
    """Cadastro de novo usuário"""

    password = forms.CharField(label='Senha', min_length=6)

    class Meta:
        model = Usuario
        fields = ['username', 'email', 'first_name', 'last_name']

    def clean_email(self):
        """Valida se email já não está em uso"""
        email = self.cleaned_data['email'].strip().lower()
        if Usuario.objects.filter(email__iexact=email).exists():
            raise ValidationError('Este email já está em uso.')
        return email

    def save(self, commit=True):
        usuario = super().save(commit=False)
        usuario.set_password(self.cleaned_data['password'])
        if commit:
            usuario.save()
        return usuario


class ProjetoForm(forms.ModelForm):
    """Criação e edição de projeto"""

    class Meta:
        model = Projeto
        fields = ['nome', 'descricao', 'cor']

    def clean_nome(self):
        nome = self.cleaned_data['nome'].strip()
        if not nome:
            raise ValidationError('Nome é obrigatório.')
        return nome

    def clean_cor(self):
        cor = self.cleaned_data.get('cor') or '#6366F1'
        if not (cor.startswith('#') and len(cor) == 7):
            raise ValidationError('Cor deve estar no formato #RRGGBB.')
        return cor


class ConviteMembroForm(forms.Form):
    """Convite de membro por email"""

    email = forms.EmailField(label='Email')

    def __init__(self, *args, projeto=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.projeto = projeto
        self.usuario = None

    def clean_email(self):
        email = self.cleaned_data['email'].strip().lower()

        try:
            self.usuario = Usuario.objects.get(email__iexact=email)
        except Usuario.DoesNotExist:
            # Tratado pela view como 404
            return email

        if self.projeto and self.usuario.id == self.projeto.dono_id:
            raise ValidationError('Usuário já é o dono do projeto.')

        if self.projeto and self.projeto.participacoes.filter(usuario=self.usuario).exists():
            raise ValidationError('Usuário já é membro do projeto.')

        return email


class TarefaForm(forms.ModelForm):
    """
    Validação dos campos de tarefa recebidos pela API

    O responsável precisa participar do projeto; a ordem é opcional
    (a view semeia uma ordem ao final da coluna quando ausente).
    Na edição o responsável atual continua aceito mesmo que tenha saído
    do projeto, para que a tarefa ainda possa ser movida.
    """

    class Meta:
        model = Tarefa
        fields = ['titulo', 'descricao', 'status', 'prioridade', 'prazo', 'responsavel', 'ordem']

    def __init__(self, *args, projeto=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.projeto = projeto or getattr(self.instance, 'projeto', None)
        if self.projeto is not None:
            participantes = Q(participacoes__projeto=self.projeto)
            if self.instance.responsavel_id is not None:
                participantes |= Q(id=self.instance.responsavel_id)
            self.fields['responsavel'].queryset = Usuario.objects.filter(participantes).distinct()

    def clean_titulo(self):
        titulo = self.cleaned_data['titulo'].strip()
        if not titulo:
            raise ValidationError('Título é obrigatório.')
        return titulo
