#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

Quadro Board - Quadro de tarefas colaborativo
"""

import os
import sys


def main():
    """Run administrative tasks."""

    # Configuração padrão para desenvolvimento
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    # Comandos customizados do Quadro Board
    if len(sys.argv) > 1:
        command = sys.argv[1]

        # Comando de setup inicial
        if command == 'setup':
            print("🚀 Configurando Quadro Board...")

            print("📊 Aplicando migrações...")
            if os.system(f'{sys.executable} manage.py migrate') != 0:
                print("❌ Erro nas migrações")
                return

            print("📁 Coletando arquivos estáticos...")
            os.system(f'{sys.executable} manage.py collectstatic --noinput')

            print("🌱 Populando banco com dados demo...")
            if os.system(f'{sys.executable} manage.py seed') == 0:
                print("✅ Setup concluído!")
            else:
                print("⚠️  Setup parcial concluído (sem dados demo)")
            return

        # Comando de reset
        elif command == 'reset':
            confirm = input("⚠️  Isso irá apagar TODOS os dados. Continuar? (y/N): ")
            if confirm.lower() == 'y':
                print("🗑️  Resetando banco de dados...")
                os.system(f'{sys.executable} manage.py flush --noinput')
                os.system(f'{sys.executable} manage.py migrate')
                os.system(f'{sys.executable} manage.py seed')
                print("✅ Reset concluído!")
            return

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
