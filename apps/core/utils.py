# apps/core/utils.py

import json
from typing import Dict, List


class CorpoInvalido(ValueError):
    """Corpo da requisição não é um objeto JSON"""


def ler_json(request) -> Dict:
    """
    Lê o corpo JSON da requisição
    Corpo vazio equivale a um objeto vazio
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CorpoInvalido(f'JSON inválido: {e}') from e

    if not isinstance(data, dict):
        raise CorpoInvalido('O corpo deve ser um objeto JSON')

    return data


def erros_formulario(form) -> Dict[str, List[str]]:
    """
    Converte os erros de um formulário Django em dict serializável
    """
    return {campo: [str(msg) for msg in mensagens] for campo, mensagens in form.errors.items()}
