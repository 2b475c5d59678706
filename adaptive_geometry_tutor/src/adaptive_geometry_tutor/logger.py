"""
Logging for the tutoring engine.

One line per record: time, component icon, level, logger name, message.
Policy decisions and request payloads are printed as indented blocks under
the message line.
"""

import logging
import sys
from datetime import datetime
from typing import Any, Dict, Optional

ANSI_RESET = '\033[0m'
ANSI_BOLD = '\033[1m'
ANSI_DIM = '\033[90m'

# level -> (ansi color, fallback icon)
LEVEL_STYLES = {
    'DEBUG': ('\033[36m', '🔍'),
    'INFO': ('\033[32m', 'ℹ️'),
    'WARNING': ('\033[33m', '⚠️'),
    'ERROR': ('\033[31m', '❌'),
    'CRITICAL': ('\033[35m', '🚨'),
}

# Keyed by module name, the last segment of the logger name
COMPONENT_ICONS = {
    'tutoring_engine': '🎓',
    'policy_engine': '🧭',
    'difficulty_adapter': '📊',
    'hint_gate': '💡',
    'ai_adapter': '🤖',
    'ai_providers': '🤖',
    'rate_limiter': '⏱️',
    'response_cache': '💾',
    'question_parser': '🧩',
    'question_validator': '📐',
    'template_questions': '📝',
    'repository': '🗄️',
    'config': '⚙️',
}


class ColoredFormatter(logging.Formatter):
    """Single-line formatter; colors only when writing to a terminal."""

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def _paint(self, text: str, code: str) -> str:
        return f"{code}{text}{ANSI_RESET}" if self.use_colors else text

    def format(self, record: logging.LogRecord) -> str:
        color, level_icon = LEVEL_STYLES.get(record.levelname, (ANSI_RESET, '•'))
        icon = COMPONENT_ICONS.get(record.name.rsplit('.', 1)[-1], level_icon)
        clock = datetime.fromtimestamp(record.created).strftime('%H:%M:%S.%f')[:-3]

        line = " ".join((
            self._paint(f"[{clock}]", ANSI_DIM),
            icon,
            self._paint(f"{record.levelname:8s}", color),
            self._paint(record.name, ANSI_BOLD),
            f"| {record.getMessage()}",
        ))
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class StructuredLogger:
    """Wraps a stdlib logger; optional dict payloads are rendered under the message."""

    MAX_LIST_ITEMS = 5

    def __init__(self, name: str, logger: Optional[logging.Logger] = None):
        self.name = name
        self.logger = logger or logging.getLogger(name)

    def _format_data(self, data: Any, indent: int = 2) -> str:
        if isinstance(data, dict):
            pad = ' ' * indent
            body = "\n".join(
                f"{pad}{key}: {self._format_data(value, indent + 2) if isinstance(value, dict) else value}"
                for key, value in data.items()
            )
            return f"{{\n{body}\n{' ' * (indent - 2)}}}"
        if isinstance(data, list) and len(data) > self.MAX_LIST_ITEMS:
            head = ", ".join(map(str, data[:3]))
            return f"[{head}, ... ({len(data)} items total)]"
        if isinstance(data, list):
            return f"[{', '.join(map(str, data))}]"
        return str(data)

    def _log(self, level: int, message: str, data: Optional[Dict[str, Any]] = None, **kwargs):
        if data:
            message = f"{message}\n{self._format_data(data)}"
        self.logger.log(level, message, **kwargs)

    def debug(self, message: str, data: Optional[Dict[str, Any]] = None):
        self._log(logging.DEBUG, message, data)

    def info(self, message: str, data: Optional[Dict[str, Any]] = None):
        self._log(logging.INFO, message, data)

    def warning(self, message: str, data: Optional[Dict[str, Any]] = None):
        self._log(logging.WARNING, message, data)

    def error(self, message: str, error: Optional[Exception] = None, data: Optional[Dict[str, Any]] = None):
        if error is not None:
            message = f"{message} ({type(error).__name__}: {error})"
        self._log(logging.ERROR, message, data, exc_info=error)

    def success(self, message: str, data: Optional[Dict[str, Any]] = None):
        self._log(logging.INFO, f"✅ {message}", data)

    def decision(
        self,
        action: str,
        reason: str,
        before: Dict[str, Any],
        after: Dict[str, Any],
        reward: Optional[int] = None,
    ):
        """Log one policy decision with the state it was made on."""
        data: Dict[str, Any] = {"reason": reason, "before": before, "after": after}
        if reward is not None:
            data["reward"] = reward
        self._log(logging.INFO, f"🧭 DECISION: {action}", data)


QUIET_LOGGERS = ('asyncio', 'httpx', 'httpcore', 'openai')


def setup_logging(level: int = logging.INFO, use_colors: bool = True) -> logging.Logger:
    """Replace root handlers with one stdout handler using ColoredFormatter."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(use_colors=use_colors))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    # HTTP client chatter
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(name)
