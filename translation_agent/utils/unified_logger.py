"""
Unified logging system for translation-agent

One logger serves the CLI and library callers: entries are printed to the
console (colored when the terminal allows it) and handed as structured dicts
to an optional storage callback.
"""
import os
import sys
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


class LogLevel(Enum):
    """Log levels with priority values"""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50


class LogType(Enum):
    """Pipeline events with a dedicated console layout"""
    GENERAL = "general"
    LLM_RESPONSE = "llm_response"
    CHUNK_INFO = "chunk_info"
    STAGE_PROGRESS = "stage_progress"
    TRANSLATION_START = "translation_start"
    TRANSLATION_END = "translation_end"
    ERROR_DETAIL = "error_detail"


class Colors:
    """ANSI color codes for terminal output"""
    NO_COLOR = os.environ.get('NO_COLOR') is not None or not sys.stdout.isatty()

    YELLOW = '' if NO_COLOR else '\033[93m'       # headers
    WHITE = '' if NO_COLOR else '\033[97m'        # main text
    GRAY = '' if NO_COLOR else '\033[90m'         # details
    ORANGE = '' if NO_COLOR else '\033[38;5;214m' # prompts sent
    GREEN = '' if NO_COLOR else '\033[92m'        # responses received
    RED = '' if NO_COLOR else '\033[91m'          # errors
    ENDC = '' if NO_COLOR else '\033[0m'

    @classmethod
    def disable(cls):
        cls.YELLOW = cls.WHITE = cls.GRAY = cls.ORANGE = cls.GREEN = cls.RED = cls.ENDC = ''


_LEVEL_COLORS = {
    LogLevel.DEBUG: 'GRAY',
    LogLevel.INFO: 'WHITE',
    LogLevel.WARNING: 'YELLOW',
    LogLevel.ERROR: 'RED',
    LogLevel.CRITICAL: 'RED',
}


def _paint(color: str, text: str) -> str:
    return f"{getattr(Colors, color)}{text}{Colors.ENDC}"


class UnifiedLogger:
    """
    Logger shared by the pipeline, the completion client and the CLI.

    Args:
        name: Logger name
        console_output: Print entries to stdout
        enable_colors: Use ANSI colors (disabled globally when False)
        min_level: Entries below this level are dropped
        storage_callback: Receives every kept entry as a dict with
            timestamp, level, type, message and data keys
        to_stderr: Print to stderr instead of stdout, keeping stdout free for
            the translation itself
    """

    def __init__(self,
                 name: str = "translation-agent",
                 console_output: bool = True,
                 enable_colors: bool = True,
                 min_level: LogLevel = LogLevel.INFO,
                 storage_callback: Optional[Callable[[Dict[str, Any]], None]] = None,
                 to_stderr: bool = False):
        self.name = name
        self.console_output = console_output
        self.min_level = min_level
        self.storage_callback = storage_callback
        self.to_stderr = to_stderr

        # Run context, filled by TRANSLATION_START / CHUNK_INFO entries
        self.total_chunks = 0
        self.started_at: Optional[datetime] = None

        if not enable_colors:
            Colors.disable()

        self._formatters = {
            LogType.LLM_RESPONSE: self._format_llm_response,
            LogType.CHUNK_INFO: self._format_chunk_info,
            LogType.STAGE_PROGRESS: self._format_stage_progress,
            LogType.TRANSLATION_START: self._format_translation_start,
            LogType.TRANSLATION_END: self._format_translation_end,
            LogType.ERROR_DETAIL: self._format_error_detail,
        }

    @staticmethod
    def _clock() -> str:
        return datetime.now().strftime("%H:%M:%S")

    # ------------------------------------------------------------------
    # Console layouts
    # ------------------------------------------------------------------

    def _format_general(self, level: LogLevel, message: str, data: Dict[str, Any]) -> str:
        prefix = "" if level == LogLevel.INFO else f"[{level.name}] "
        return _paint(_LEVEL_COLORS[level], f"[{self._clock()}] {prefix}{message}")

    def _format_llm_response(self, level: LogLevel, message: str, data: Dict[str, Any]) -> str:
        line = f"[{self._clock()}] {message}"
        if 'prompt_tokens' in data or 'completion_tokens' in data:
            line += f" ({data.get('prompt_tokens', 0)} prompt + {data.get('completion_tokens', 0)} completion tokens)"
        return _paint('GRAY', line)

    def _format_chunk_info(self, level: LogLevel, message: str, data: Dict[str, Any]) -> str:
        return _paint('WHITE', f"[{self._clock()}] {message}")

    def _format_stage_progress(self, level: LogLevel, message: str, data: Dict[str, Any]) -> str:
        stage = str(data.get('stage', '?')).upper()
        line = _paint('WHITE', f"[{self._clock()}] STAGE {stage}: {data.get('completed', 0)}/{data.get('total', 0)} units")
        if data.get('failed'):
            line += " " + _paint('YELLOW', f"({data['failed']} failed)")
        return line

    def _format_translation_start(self, level: LogLevel, message: str, data: Dict[str, Any]) -> str:
        lines = [
            _paint('YELLOW', message.upper()),
            _paint('WHITE', f"Languages: {data.get('source_lang', '?')} → {data.get('target_lang', '?')}"),
            _paint('GRAY', f"Model: {data.get('model', 'Unknown')}"),
        ]
        if data.get('country'):
            lines.append(_paint('WHITE', f"Region: {data['country']}"))
        return '\n'.join(lines)

    def _format_translation_end(self, level: LogLevel, message: str, data: Dict[str, Any]) -> str:
        lines: List[str] = [_paint('WHITE', message.upper())]
        if self.total_chunks > 1:
            lines.append(_paint('GRAY', f"Chunks: {self.total_chunks}"))
        if self.started_at:
            lines.append(_paint('GRAY', f"Duration: {datetime.now() - self.started_at}"))
        stats = data.get('stats')
        if stats:
            lines.append(_paint('WHITE', f"Completed units: {stats.get('completed', 0)}"))
            if stats.get('failed'):
                lines.append(_paint('YELLOW', f"Failed units: {stats['failed']}"))
        if data.get('output_file'):
            lines.append(_paint('WHITE', f"Output saved to: {data['output_file']}"))
        return '\n'.join(lines)

    def _format_error_detail(self, level: LogLevel, message: str, data: Dict[str, Any]) -> str:
        lines = [_paint('RED', f"[{self._clock()}] ERROR: {message}")]
        for key in ('details', 'stage', 'chunk'):
            if key in data:
                lines.append(_paint('RED', f"{key.capitalize()}: {data[key]}"))
        return '\n'.join(lines)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def _track(self, log_type: LogType, data: Dict[str, Any]) -> None:
        if log_type == LogType.TRANSLATION_START:
            self.started_at = datetime.now()
            self.total_chunks = data.get('total_chunks', self.total_chunks)
        elif log_type == LogType.CHUNK_INFO and 'total_chunks' in data:
            self.total_chunks = data['total_chunks']

    def log(self, level: LogLevel, message: str,
            log_type: LogType = LogType.GENERAL,
            data: Optional[Dict[str, Any]] = None):
        """
        Record one entry.

        Args:
            level: Log level
            message: Log message
            log_type: Event type selecting the console layout
            data: Event payload
        """
        if level.value < self.min_level.value:
            return

        data = data or {}
        self._track(log_type, data)

        if self.console_output:
            formatter = self._formatters.get(log_type)
            text = formatter(level, message, data) if formatter else self._format_general(level, message, data)
            stream = sys.stderr if self.to_stderr else sys.stdout
            try:
                print(text, file=stream, flush=True)
            except UnicodeEncodeError:
                # Narrow console codecs (e.g. cp1252)
                print(text.encode('ascii', 'replace').decode('ascii'), file=stream, flush=True)

        if self.storage_callback:
            self.storage_callback({
                'timestamp': datetime.now().isoformat(),
                'level': level.name,
                'type': log_type.value,
                'message': message,
                'data': data,
            })

    def debug(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.DEBUG, message, log_type, data)

    def info(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.INFO, message, log_type, data)

    def warning(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.WARNING, message, log_type, data)

    def error(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.ERROR, message, log_type, data)

    def critical(self, message: str, log_type: LogType = LogType.GENERAL, data: Optional[Dict[str, Any]] = None):
        self.log(LogLevel.CRITICAL, message, log_type, data)


# Global logger instance
_global_logger: Optional[UnifiedLogger] = None


def get_logger(name: str = "translation-agent", **kwargs) -> UnifiedLogger:
    """
    Get or create the process-wide logger.

    kwargs are passed to UnifiedLogger on first creation only.
    """
    global _global_logger
    if _global_logger is None:
        _global_logger = UnifiedLogger(name, **kwargs)
    return _global_logger


def setup_cli_logger(enable_colors: bool = True, to_stderr: bool = False) -> UnifiedLogger:
    """
    Logger for CLI usage: console output, DEBUG level when DEBUG_MODE is on.

    to_stderr is applied on every call since the logger is process-wide.
    """
    # Import here to avoid circular dependencies
    from translation_agent.config import DEBUG_MODE

    logger = get_logger(
        console_output=True,
        enable_colors=enable_colors,
        min_level=LogLevel.DEBUG if DEBUG_MODE else LogLevel.INFO
    )
    logger.to_stderr = to_stderr
    if not enable_colors:
        Colors.disable()
    return logger
