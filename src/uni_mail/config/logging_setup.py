from __future__ import annotations

import logging
from typing import Optional, Union

from pythonjsonlogger import jsonlogger

from uni_mail.config.paths import log_level


def setup_logging(level: Optional[Union[int, str]] = None) -> None:
    """
    Configure root logger to emit structured JSON logs.
    Level defaults to UNI_MAIL_LOG_LEVEL.
    """
    handler = logging.StreamHandler()
    fmt = jsonlogger.JsonFormatter(
        "%(asctime) %(levelname) %(name) %(message)"
    )
    handler.setFormatter(fmt)
    root = logging.getLogger()
    root.handlers = []      # remove default handlers
    root.addHandler(handler)
    root.setLevel(level if level is not None else log_level())
