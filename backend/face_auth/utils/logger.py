import logging
import os
import sys
from datetime import datetime


def setup_logging(level=logging.INFO, log_dir: str = "logs"):

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        root_logger.handlers.clear()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    # Empty log_dir keeps logging on stdout only
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(
            os.path.join(log_dir, f'app_{datetime.now().strftime("%Y%m%d")}.log')
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for noisy in ('httpx', 'httpcore', 'urllib3', 'google'):
        logging.getLogger(noisy).setLevel(logging.WARNING)
