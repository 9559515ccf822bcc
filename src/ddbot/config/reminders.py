import os

from .loader import section


class Reminders:
    def __init__(self, config: dict | None = None) -> None:
        rem_cfg = section(config, "reminders")
        self.POLL_INTERVAL: float = float(rem_cfg.get("poll_interval", os.getenv("REMINDER_POLL_INTERVAL", "30")))
        self.MIN_DELAY: int = int(rem_cfg.get("min_delay", os.getenv("REMINDER_MIN_DELAY", "10")))
        self.MAX_DELAY: int = int(rem_cfg.get("max_delay", os.getenv("REMINDER_MAX_DELAY", str(365 * 24 * 3600))))
        self.MAX_PENDING: int = int(rem_cfg.get("max_pending", os.getenv("REMINDER_MAX_PENDING", "25")))
        self.MAX_LENGTH: int = int(rem_cfg.get("max_length", os.getenv("REMINDER_MAX_LENGTH", "1000")))
