import os

from .loader import section


class Trivia:
    def __init__(self, config: dict | None = None) -> None:
        trivia_cfg = section(config, "trivia")
        self.API_BASE: str = str(trivia_cfg.get("api_base", os.getenv("TRIVIA_API_BASE", "https://opentdb.com"))).rstrip("/")
        self.ANSWER_TIMEOUT: float = float(trivia_cfg.get("answer_timeout", os.getenv("TRIVIA_ANSWER_TIMEOUT", "25")))
        self.REQUEST_TIMEOUT: float = float(trivia_cfg.get("request_timeout", os.getenv("TRIVIA_REQUEST_TIMEOUT", "10")))
