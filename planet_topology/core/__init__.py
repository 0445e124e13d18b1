# ==============================================================================
# Файл: planet_topology/core/__init__.py
# Назначение: Константы, типы, ошибки, диагностики, пресеты и экспорт кэша.
# ==============================================================================
