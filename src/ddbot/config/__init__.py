"""Application configuration"""

import logging
from dotenv import load_dotenv

from .loader import load_config
from .core import Core
from .quotes import Quotes
from .reminders import Reminders
from .trivia import Trivia

load_dotenv()

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(format=LOG_FORMAT, datefmt=DATE_FORMAT, level=logging.INFO)
logging.getLogger("discord.http").setLevel(logging.WARNING)

_CONFIG = load_config()

core = Core(_CONFIG)
quotes = Quotes(_CONFIG)
reminders = Reminders(_CONFIG)
trivia = Trivia(_CONFIG)


class Config:
    core = core
    quotes = quotes
    reminders = reminders
    trivia = trivia


__all__ = ["core", "quotes", "reminders", "trivia", "Config"]
