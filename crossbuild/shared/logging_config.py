# crossbuild/shared/logging_config.py
import sys
import logging
import structlog
from opentelemetry import trace
from crossbuild.shared.config import settings, LogFormat


def add_open_telemetry_spans(_, __, event_dict):
    """
    Processor to inject the current TraceID and SpanID into the log entry.
    Lets a failed toolchain step be matched to the pipeline span that ran it.
    """
    span = trace.get_current_span()
    if not span.is_recording():
        event_dict["trace_id"] = None
        event_dict["span_id"] = None
        return event_dict

    ctx = span.get_span_context()
    event_dict["trace_id"] = format(ctx.trace_id, "032x")
    event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict


def _stderr_logger(*args):
    # Resolved per logger so a redirected sys.stderr is honoured
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(level: str = None, log_format: LogFormat = None):
    """
    Configures structlog and the standard logging library to emit
    structured JSON logs or colored console logs.

    Logs go to stderr: stdout is reserved for output relayed from
    external tools (simulator listings, device logs).
    """
    level = (level or settings.LOG_LEVEL).upper()
    log_format = log_format or settings.LOG_FORMAT

    # 1. Define the chain of processors
    processors = [
        structlog.contextvars.merge_contextvars,
        add_open_telemetry_spans,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    # 2. Determine the Output Format
    if log_format == LogFormat.JSON:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    # 3. Configure Structlog
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level)
        ),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )

    # 4. Standard library logging (third-party noise) follows the same level
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )
