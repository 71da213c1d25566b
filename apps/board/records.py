# apps/board/records.py

"""
Registro imutável de tarefa usado pelo estado local do board
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .ordering import ordem_de

# Campos que o motor do board interpreta; o restante do payload é opaco
CAMPOS_POSICAO = ('id', 'status', 'ordem', 'projeto_id')


@dataclass(frozen=True)
class TaskRecord:
    """
    Uma tarefa como o cliente a enxerga

    `dados` guarda os demais campos do payload (título, prioridade...)
    sem interpretá-los.
    """

    id: Any
    status: str
    ordem: Optional[float]
    projeto_id: Any
    dados: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'dados', MappingProxyType(dict(self.dados)))

    def __hash__(self):
        return hash((self.id, self.status, self.ordem, self.projeto_id))

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> 'TaskRecord':
        """
        Constrói o registro a partir do payload da API ou do evento

        Ordem malformada ou ausente vira None (ordena antes de todas).
        """
        if 'id' not in payload:
            raise ValueError('Payload de tarefa sem id')

        dados = {k: v for k, v in payload.items() if k not in CAMPOS_POSICAO}
        return cls(
            id=payload['id'],
            status=payload.get('status'),
            ordem=ordem_de(payload),
            projeto_id=payload.get('projeto_id'),
            dados=dados,
        )

    def to_payload(self) -> Dict[str, Any]:
        payload = dict(self.dados)
        payload.update({
            'id': self.id,
            'status': self.status,
            'ordem': self.ordem,
            'projeto_id': self.projeto_id,
        })
        return payload

    def with_position(self, status: str, ordem: Optional[float]) -> 'TaskRecord':
        """Cópia em outra coluna/posição"""
        return replace(self, status=status, ordem=ordem)
