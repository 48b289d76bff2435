"""
Точка входа для запуска модуля.

Позволяет запускать экспортер как:
    python -m mikrotik_exporter [опции]

Примеры:
    python -m mikrotik_exporter --config config.yml
    python -m mikrotik_exporter --port 9436 --log-format json
"""

from .cli import main

if __name__ == "__main__":
    main()
