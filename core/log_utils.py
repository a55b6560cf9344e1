#!/usr/bin/env python3
"""
core/log_utils.py: Logging setup shared by the mdpage entry points.
This module contains:
- setup_logging: Installs console/file handlers and per-topic debug levels.
- RichLogFormatter: A custom logging formatter for aligned, colorful output.
"""

import logging

PROJECT_TOPICS = {
    "mdpage": {
        "main",
        "parse",
        "inline",
        "runs",
        "layout",
        "dimensions",
        "fonts",
        "canvas",
        "api",
        "config",
        "server",
    },
}


def setup_logging(
    project_name: str,
    level=logging.INFO,
    color_logs=False,
    debug_topics=None,
    log_file: str = None,
):
    """Configures logging for the application."""
    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        for h in root_logger.handlers[:]:
            root_logger.removeHandler(h)
            h.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(RichLogFormatter(use_color=color_logs))
    root_logger.addHandler(console_handler)
    root_logger.setLevel(level)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="w")
            # File logs should not be colored
            file_handler.setFormatter(RichLogFormatter(use_color=False))
            root_logger.addHandler(file_handler)
            logging.getLogger(f"{project_name}.main").info("Logging to file: %s", log_file)
        except IOError as e:
            logging.getLogger(project_name).error(
                "Could not open log file %s: %s", log_file, e
            )

    # Silence noisy libraries
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("waitress").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)
    logging.getLogger("markdown_it").setLevel(logging.WARNING)

    if debug_topics:
        for topic in resolve_debug_topics(project_name, debug_topics):
            logging.getLogger(f"{project_name}.{topic}").setLevel(logging.DEBUG)


def resolve_debug_topics(project_name: str, debug_topics: str) -> set:
    """Expands a comma-separated topic list ('all' or prefixes) to known topics."""
    valid_topics = PROJECT_TOPICS.get(project_name, set())
    user_topics = [t.strip() for t in debug_topics.split(",") if t.strip()]
    if "all" in user_topics:
        return set(valid_topics)
    return {full for u in user_topics for full in valid_topics if full.startswith(u)}


# --- CUSTOM LOGGING FORMATTER ---
class RichLogFormatter(logging.Formatter):
    """A custom logging formatter for rich, colorful, and aligned console output.
    Each line of a message is prefixed with the level and the logger topic
    (the part of the logger name after the project name).
    Args:
        use_color (bool): If True, ANSI color codes are used. Defaults to False.
    """

    def __init__(self, use_color=False):
        super().__init__()
        if use_color:
            # ANSI escape codes for 256-color terminal
            self.COLORS = {
                logging.DEBUG: "\033[38;5;252m",  # Light Grey
                logging.INFO: "\033[38;5;111m",  # Pastel Blue
                logging.WARNING: "\033[38;5;229m",  # Pale Yellow
                logging.ERROR: "\033[38;5;210m",  # Soft Red
                logging.CRITICAL: "\033[38;5;217m",  # Light Magenta
            }
            self.BOLD = "\033[1m"
            self.RESET = "\033[0m"
        else:
            self.COLORS = {}
            self.BOLD = ""
            self.RESET = ""

    def format(self, record):
        """Formats a log record into an aligned, optionally colored string."""
        if record.__dict__.get("raw"):
            return super().format(record)

        color = self.COLORS.get(record.levelno, "")
        level_name = record.levelname[:5]
        name_parts = record.name.split(".")
        topic = name_parts[1][:6] if len(name_parts) > 1 else record.name[:6]

        prefix = (
            f"{color}{level_name:<5}{self.RESET}:"
            f"{self.BOLD}{topic:<6}{self.RESET}: "
        )
        message = super().format(record)
        return "\n".join(f"{prefix}{line}" for line in message.split("\n"))
