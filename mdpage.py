#!/usr/bin/env python3
"""
mdpage: Lays out Markdown as styled text runs on fixed-size pages.

This script reads a Markdown document, runs it through the page layout
pipeline (handled by mdpage_lib) and writes the resulting pages as a single
SVG document. It can also serve the same build operation over HTTP.
"""

import argparse
import logging
import os
import sys
import time

# --- Dependency Imports ---
try:
    from rich.console import Console
    from rich.table import Table
    from rich.theme import Theme
except ImportError as e:
    print(f"Error: Missing required library. -> {e}")
    print("Please install all core dependencies with:")
    print("pip install -e .")
    sys.exit(1)

# --- Local Application Imports ---
from mdpage_lib.api import handle_message
from mdpage_lib.canvas import SVGCanvas
from mdpage_lib.config import DEFAULT_CONFIG_PATH, ConfigService, font_dirs_from
from mdpage_lib.constants import (
    DEFAULT_FONT_FAMILY,
    MARKDOWN_ELEMENTS,
    PAGE_FORMATS,
)
from mdpage_lib.fonts import FontProvider
from core.log_utils import setup_logging

log = logging.getLogger("mdpage.main")


# --- CUSTOM ARGPARSE FORMATTER ---
class CustomHelpFormatter(
    argparse.ArgumentDefaultsHelpFormatter, argparse.RawTextHelpFormatter
):
    """
    A custom argparse formatter that combines showing default values with
    preserving newline formatting in help text.
    """

    pass


class Application:
    """Orchestrates a Markdown to pages build based on command-line arguments."""

    STDIN_MARKER = "-"

    def __init__(self, args):
        self.args = args
        self.stats = {}
        self.settings = {}

    def run(self):
        """Main entry point for the application logic."""
        self.stats["start_time"] = time.monotonic()
        setup_logging(
            project_name="mdpage",
            level=logging.INFO if self.args.verbose else logging.WARNING,
            color_logs=self.args.color_logs,
            debug_topics=self.args.debug_topics,
            log_file=self.args.log_file,
        )
        self.settings = ConfigService(self.args.config).get_settings()

        if self.args.serve:
            self._serve()
            return

        if not self.args.input_file:
            log.error("An input file (or '-' for stdin) is required unless --serve is given.")
            sys.exit(1)
        self._build()

    def _build(self):
        markdown = self._read_source()
        family = self.settings.get("Fonts", {}).get("family") or DEFAULT_FONT_FAMILY
        font_provider = FontProvider(font_dirs_from(self.settings))
        canvas = SVGCanvas(font_provider, family)
        if self.args.update_run:
            canvas.create_selected_run(MARKDOWN_ELEMENTS["paragraph"]["font_size"])

        message = {"command": "build", "markdownSource": markdown}
        optional = {
            "dpi": self.args.dpi,
            "pageFormat": self.args.page_format,
            "paddingPercent": self.args.padding,
            "highlightColor": self.args.highlight_color,
            "linkColor": self.args.link_color,
        }
        message.update({k: v for k, v in optional.items() if v is not None})

        result = handle_message(message, canvas, font_provider, self.settings)
        if result["type"] != "done":
            log.error("Build failed: %s", result.get("message", result["type"]))
            sys.exit(1)

        output_path = self._resolve_output_filename()
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(canvas.render())
        log.info("SVG document saved to: %s", output_path)
        self._display_summary(result, output_path)

    def _read_source(self) -> str:
        if self.args.input_file == self.STDIN_MARKER:
            log.info("Reading Markdown from stdin...")
            return sys.stdin.read()
        with open(self.args.input_file, "r", encoding="utf-8") as f:
            return f.read()

    def _resolve_output_filename(self) -> str:
        if self.args.output:
            base = self.args.output
        elif self.args.input_file == self.STDIN_MARKER:
            base = "mdpage"
        else:
            base = os.path.splitext(self.args.input_file)[0]
        return base if base.lower().endswith(".svg") else f"{base}.svg"

    def _display_summary(self, result, output_path):
        """Prints a table summarising the build."""
        duration = time.monotonic() - self.stats.get("start_time", time.monotonic())
        console = Console(theme=Theme({"table.header": "bold sky_blue2"}))
        table = Table(title="mdpage build")
        table.add_column("Item", style="grey74")
        table.add_column("Value", style="grey93")
        table.add_row("Mode", result["mode"])
        table.add_row("Pages", str(result["pages"]))
        table.add_row("Text runs", str(result["runs"]))
        failures = result.get("fontFailures") or []
        table.add_row("Missing fonts", ", ".join(failures) if failures else "none")
        table.add_row("Output", output_path)
        table.add_row("Duration", f"{duration:.2f}s")
        console.print(table)

    def _serve(self):
        from waitress import serve

        from mdpage_lib.server import create_app

        app = create_app({"CONFIG_PATH": self.args.config})
        log.info("Starting mdpage server at http://%s:%d...", self.args.host, self.args.port)
        log.info("Press CTRL+C to stop the server.")
        serve(app, host=self.args.host, port=self.args.port)

    @staticmethod
    def parse_arguments(args=None):
        """Parses command-line arguments for the script."""
        examples = [
            "\nExamples:",
            "  python mdpage.py notes.md -o notes",
            "  cat notes.md | python mdpage.py - --page-format a4 --dpi 150",
            "  python mdpage.py notes.md --update-run -d layout,runs --color-logs",
            "  python mdpage.py --serve --port 8080",
        ]
        parser = argparse.ArgumentParser(
            description="Lay out Markdown as styled text on fixed-size pages.",
            formatter_class=CustomHelpFormatter,
            add_help=False,
            epilog="\n".join(examples),
        )

        g_opts = parser.add_argument_group("Main Options")
        g_opts.add_argument(
            "input_file", nargs="?", help="Markdown file to lay out, or '-' for stdin."
        )
        g_opts.add_argument(
            "-o",
            "--output",
            metavar="FILE",
            help="Output SVG file name; '.svg' is appended if missing.",
        )
        g_opts.add_argument(
            "--config",
            metavar="FILE",
            default=DEFAULT_CONFIG_PATH,
            help="Settings file. (default: %(default)s)",
        )
        g_opts.add_argument(
            "-h",
            "--help",
            action="help",
            help="Show this help message and exit.",
        )

        g_page = parser.add_argument_group("Page Options (override settings)")
        g_page.add_argument("--dpi", type=float, help="Page resolution in dots per inch.")
        g_page.add_argument(
            "--page-format",
            choices=sorted(PAGE_FORMATS.keys()),
            help="Named page format.",
        )
        g_page.add_argument(
            "--padding", type=float, metavar="PERCENT", help="Page padding in percent."
        )
        g_page.add_argument("--highlight-color", metavar="HEX", help="Highlight fill.")
        g_page.add_argument("--link-color", metavar="HEX", help="Hyperlink fill.")
        g_page.add_argument(
            "--update-run",
            action="store_true",
            help="Write everything into one selected text run instead of pages.",
        )

        g_srv = parser.add_argument_group("Server")
        g_srv.add_argument(
            "--serve", action="store_true", help="Serve the build endpoint over HTTP."
        )
        g_srv.add_argument("--host", default="127.0.0.1", help="Bind address.")
        g_srv.add_argument("--port", type=int, default=5000, help="Bind port.")

        g_log = parser.add_argument_group("Logging & Output")
        g_log.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Enable INFO logging for detailed progress. (default: %(default)s)",
        )
        g_log.add_argument(
            "--color-logs",
            action="store_true",
            help="Enable colored logging output. (default: %(default)s)",
        )
        g_log.add_argument(
            "--log-file",
            metavar="FILE",
            default=None,
            help="Redirect all logging output to a specified file.",
        )
        g_log.add_argument(
            "-d",
            "--debug",
            nargs="?",
            const="all",
            dest="debug_topics",
            metavar="TOPICS",
            help="Enable DEBUG logging (all,parse,inline,runs,layout,fonts,canvas,api).",
        )

        return parser.parse_args(args)


def main():
    """Main entry point for the script."""
    # Basic logging config for early errors before full setup
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        args = Application.parse_arguments(sys.argv[1:])
        app = Application(args)
        app.run()
    except FileNotFoundError as e:
        logging.getLogger("mdpage").critical(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logging.getLogger("mdpage").info("\nProcess interrupted by user. Exiting.")
        sys.exit(0)
    except Exception as e:
        logging.getLogger("mdpage").critical(
            "\nAn unexpected error occurred: %s", e, exc_info=True
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
