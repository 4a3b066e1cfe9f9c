import logging
import os
from pathlib import Path

from utils.config import config


def prepare_log_file(log_file):
    """ログファイルのディレクトリを作成する。作れない場合はカレントディレクトリを使う"""
    log_dir = Path(log_file).parent
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        return os.path.join(os.getcwd(), Path(log_file).name)
    return str(log_file)


def init_logging(log_file=None, level=None):
    log_file = prepare_log_file(log_file or config.log_file)
    level = level or config.log_level

    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, level, logging.INFO))
    console_handler.setFormatter(logging.Formatter("%(levelname)s - %(message)s"))
    logging.getLogger().addHandler(console_handler)

    logging.info("Countdown overlay starting (log file: %s)", log_file)
