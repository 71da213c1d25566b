# apps/board/ordering.py

"""
Ordenação fracionária das tarefas dentro de uma coluna

Cada tarefa guarda um número real em `ordem`; a coluna é exibida em ordem
crescente. Inserir entre duas vizinhas exige apenas um novo valor para a
tarefa movida, nunca renumerar a coluna inteira.

Bissecções repetidas no mesmo ponto esgotam a precisão do float depois de
~50 inserções. Nesse caso o alocador devolve a ordem da vizinha anterior
(empate tolerado: a ordenação estável preserva a posição relativa).
"""

import logging
import math
from collections.abc import Mapping
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

# Semente de coluna vazia e distância usada ao inserir nas pontas
DEFAULT_ORDER = 1000.0
ORDER_GAP = 1000.0

# Abaixo disso o intervalo entre vizinhas é considerado esgotado
ORDER_EPSILON = 1e-9


def ordem_de(tarefa) -> Optional[float]:
    """
    Extrai a ordem de um registro, instância de model ou dict

    Valores ausentes, não numéricos ou não finitos viram None.
    """
    if tarefa is None:
        return None

    if isinstance(tarefa, Mapping):
        valor = tarefa.get('ordem')
    else:
        valor = getattr(tarefa, 'ordem', None)

    if valor is None or isinstance(valor, bool):
        return None

    try:
        valor = float(valor)
    except (TypeError, ValueError):
        return None

    return valor if math.isfinite(valor) else None


def compute_order(prev, next_, gap: float = ORDER_GAP, seed: float = DEFAULT_ORDER) -> float:
    """
    Calcula a ordem de uma tarefa posicionada entre `prev` e `next_`

    - coluna vazia (ambos None): `seed`
    - fim da coluna: prev.ordem + gap
    - início da coluna: next_.ordem - gap
    - entre as duas: ponto médio

    Vizinha sem ordem conta como ausente. Se o ponto médio não cabe
    estritamente entre as duas (precisão esgotada ou vizinhas fora de
    ordem), devolve prev.ordem sem levantar exceção.
    """
    a = ordem_de(prev)
    b = ordem_de(next_)

    if a is None and b is None:
        return float(seed)

    if b is None:
        return a + gap

    if a is None:
        return b - gap

    if a < b:
        meio = (a + b) / 2
        if a < meio < b:
            return meio

    logger.warning(
        f"⚠️ Intervalo de ordem esgotado entre {a!r} e {b!r} - "
        f"tarefa empatará com a anterior"
    )
    return a


def seed_order(coluna: Iterable, gap: float = ORDER_GAP, seed: float = DEFAULT_ORDER) -> float:
    """
    Ordem inicial de uma tarefa criada na coluna: logicamente a última
    """
    ordens = [o for o in (ordem_de(t) for t in coluna) if o is not None]
    if not ordens:
        return float(seed)
    return max(ordens) + gap


def gap_exhausted(prev_ordem: Optional[float], next_ordem: Optional[float],
                  epsilon: float = ORDER_EPSILON) -> bool:
    """
    Indica se o intervalo entre duas ordens vizinhas está perto do limite
    de precisão. Usado para alertar que a coluna precisa ser renormalizada.
    """
    if prev_ordem is None or next_ordem is None:
        return False
    return (next_ordem - prev_ordem) < epsilon
