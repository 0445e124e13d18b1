import logging
import sys
from pathlib import Path


def setup_logging(level: int = logging.INFO, log_file: str | None = "logs/topology.log"):
    """
    Настраивает глобальный логгер для приложения.
    - Устанавливает формат сообщений.
    - Выводит логи в консоль (stdout).
    - Если задан log_file, дублирует логи в файл (папка создаётся).
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.insert(0, logging.FileHandler(path, mode="w", encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s:%(lineno)d | %(message)s",
        datefmt="%H:%M:%S",
        handlers=handlers,
        force=True,  # убирает старые хендлеры, чтобы не было дублей
    )

    # детальные логи только нашего пакета, остальное приглушим
    logging.getLogger("planet_topology").setLevel(level)
    logging.getLogger("numba").setLevel(logging.WARNING)
