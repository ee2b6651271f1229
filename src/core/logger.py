"""Structured logging: console lines plus a JSONL event file for search requests."""

import contextvars
import json
import logging
import os
import sys
import threading
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from src.core.config import Config


def _format_duration(seconds: float) -> str:
    if seconds < 0:
        return "0s"
    if seconds >= 60:
        m = int(seconds // 60)
        s = seconds % 60
        if s < 0.05:
            return f"{m}m"
        return f"{m}m {s:.0f}s" if s >= 1 else f"{m}m {s:.1f}s"
    if seconds >= 0.05:
        return f"{seconds:.1f}s"
    if seconds > 0:
        return "<0.1s"
    return "0s"


_llm_ctx: contextvars.ContextVar[tuple[float, str] | None] = contextvars.ContextVar(
    "llm_request", default=None
)
_log_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "log_step", default=None
)

_ALLOWED_LOG_KWARGS = {"exc_info", "stack_info", "stacklevel", "extra"}


def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    try:
        return sys.stdout.isatty()
    except Exception:
        return False


def _c(role: str) -> str:
    if not _use_color():
        return ""
    # 38;5;N = foreground 256-color
    codes = {
        "dim": "\033[38;5;239m",
        "source": "\033[38;5;81m",  # cyan for source / step names
        "ok": "\033[38;5;78m",
        "fail": "\033[38;5;203m",
        "duration": "\033[38;5;221m",
        "model": "\033[38;5;245m",
    }
    return codes.get(role, "")


def _reset() -> str:
    if not _use_color():
        return ""
    return "\033[0m"


@dataclass
class LogEvent:
    event_type: str
    timestamp: str
    data: dict[str, Any]

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class FinderLogger:
    def __init__(self, config: Config | None = None):
        cfg = config or Config.load()
        cfg.logs_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = cfg.logs_dir / "search.log"
        self._file_lock = threading.Lock()
        self._log_file_handle = open(self.log_file, "a", encoding="utf-8")
        self._setup_console_logger()

    def _setup_console_logger(self):
        self.console = logging.getLogger("finder")
        self.console.setLevel(logging.DEBUG)
        self._console_formatter = logging.Formatter(
            "%(asctime)s │ %(message)s", datefmt="%H:%M:%S"
        )
        if not self.console.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(logging.INFO)
            handler.setFormatter(self._console_formatter)
            self.console.addHandler(handler)
        self._setup_module_console_logging()

    def _setup_module_console_logging(self):
        # Pipeline modules log via logging.getLogger(__name__) under "src.*"
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        handler.setFormatter(self._console_formatter)
        log = logging.getLogger("src")
        log.setLevel(logging.INFO)
        if not log.handlers:
            log.addHandler(handler)

    def log_event(self, event: LogEvent) -> None:
        with self._file_lock:
            self._log_file_handle.write(event.to_json() + "\n")
            self._log_file_handle.flush()

    def _timestamp(self) -> str:
        return datetime.now().isoformat()

    def set_step(self, step: str | None) -> None:
        _log_step.set(step)

    def search_request(self, query: str, platform: str):
        event = LogEvent(
            event_type="SEARCH_REQUEST",
            timestamp=self._timestamp(),
            data={"query": query[:500], "platform": platform},
        )
        self.log_event(event)
        self.console.info(
            f"Search: {query[:100]}{'...' if len(query) > 100 else ''}  "
            f"{_c('dim')}[{platform}]{_reset()}"
        )

    def source_result(
        self,
        source: str,
        fetched: int,
        accepted: int,
        duration_seconds: float,
        *,
        error_reason: str | None = None,
    ) -> None:
        event = LogEvent(
            event_type="SOURCE_RESULT",
            timestamp=self._timestamp(),
            data={
                "source": source,
                "fetched": fetched,
                "accepted": accepted,
                "duration_seconds": round(duration_seconds, 3),
                "error": error_reason,
            },
        )
        self.log_event(event)
        dur = f"{_c('duration')}{_format_duration(duration_seconds)}{_reset()}"
        label = f"{_c('source')}{source}{_reset()}"
        if error_reason:
            reason = error_reason.strip().replace("\n", " ")
            if len(reason) > 80:
                reason = reason[:80] + "..."
            self.console.info(
                f"  │ {label}  {_c('fail')}[failed]{_reset()} {reason}  {dur}"
            )
        else:
            self.console.info(
                f"  │ {label}  {_c('ok')}{accepted}/{fetched} kept{_reset()}  {dur}"
            )

    def llm_request(self, model: str, prompt_preview: str = ""):
        _llm_ctx.set((time.monotonic(), model))
        event = LogEvent(
            event_type="LLM_REQUEST",
            timestamp=self._timestamp(),
            data={
                "model": model,
                "step": _log_step.get(),
                "prompt_preview": prompt_preview[:200],
            },
        )
        self.log_event(event)
        step = _log_step.get() or "llm"
        self.console.debug(
            f"  │ {_c('source')}LLM call ({step}){_reset()}  [{_c('model')}{model}{_reset()}]"
        )

    def llm_response(self, token_count: int, *, response_chars: int | None = None):
        pair = _llm_ctx.get()
        if pair is not None:
            _llm_ctx.set(None)
            start, model = pair
            elapsed = time.monotonic() - start
        else:
            elapsed = 0.0
            model = "?"
        event = LogEvent(
            event_type="LLM_RESPONSE",
            timestamp=self._timestamp(),
            data={
                "model": model,
                "step": _log_step.get(),
                "tokens": token_count,
                "response_chars": response_chars,
                "duration_seconds": round(elapsed, 3),
            },
        )
        self.log_event(event)
        step = _log_step.get() or "llm"
        dur = f"{_c('duration')}{_format_duration(elapsed)}{_reset()}"
        self.console.info(
            f"  │ {_c('source')}{step}{_reset()}  in {dur}  {_c('model')}[{model}]{_reset()}"
        )

    def rewriter_fallback(self, step: str, reason: str):
        event = LogEvent(
            event_type="REWRITER_FALLBACK",
            timestamp=self._timestamp(),
            data={"step": step, "reason": reason[:500]},
        )
        self.log_event(event)
        self.console.warning(f"⚠️ Rewriter {step} unavailable, using fallback: {reason[:120]}")

    def search_complete(
        self,
        total_results: int,
        sources: list[str],
        errors: int,
        duration_seconds: float,
    ):
        event = LogEvent(
            event_type="SEARCH_COMPLETE",
            timestamp=self._timestamp(),
            data={
                "total_results": total_results,
                "sources": sources,
                "errors": errors,
                "duration_seconds": round(duration_seconds, 3),
            },
        )
        self.log_event(event)
        dur = f"{_c('duration')}{_format_duration(duration_seconds)}{_reset()}"
        self.console.info(
            f"Done: {total_results} results from {len(sources)} sources "
            f"({errors} failed)  {dur}"
        )

    def error(self, message: str, *args, exception: Exception | None = None, **kwargs):
        event = LogEvent(
            event_type="ERROR",
            timestamp=self._timestamp(),
            data={
                "message": message,
                "exception": str(exception) if exception else None,
            },
        )
        self.log_event(event)

        log_kwargs = {k: v for k, v in kwargs.items() if k in _ALLOWED_LOG_KWARGS}
        if exception and "exc_info" not in log_kwargs:
            log_kwargs["exc_info"] = exception

        self.console.error(f"❌ Error: {message}", *args, **log_kwargs)

    def info(self, message: str, *args, **kwargs):
        log_kwargs = {k: v for k, v in kwargs.items() if k in _ALLOWED_LOG_KWARGS}
        self.console.info(message, *args, **log_kwargs)

    def warning(self, message: str, *args, **kwargs):
        event = LogEvent(
            event_type="WARNING",
            timestamp=self._timestamp(),
            data={"message": message[:500]},
        )
        self.log_event(event)

        log_kwargs = {k: v for k, v in kwargs.items() if k in _ALLOWED_LOG_KWARGS}
        self.console.warning(f"⚠️ {message}", *args, **log_kwargs)

    def debug(self, message: str, *args, **kwargs):
        event = LogEvent(
            event_type="DEBUG", timestamp=self._timestamp(), data={"message": message}
        )
        self.log_event(event)

        log_kwargs = {k: v for k, v in kwargs.items() if k in _ALLOWED_LOG_KWARGS}
        self.console.debug(message, *args, **log_kwargs)


logger = FinderLogger()
