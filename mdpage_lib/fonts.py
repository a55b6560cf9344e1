# --- mdpage_lib/fonts.py ---
"""
mdpage_lib/fonts.py: Font resolution and measurement with Pillow.

Fonts are made available up front, concurrently and best-effort: a weight
that cannot be found is reported and logged, and text in that weight is then
measured with Pillow's default font.
"""
import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from PIL import ImageFont

from .constants import FONT_FAMILIES, FONT_LOAD_WORKERS

log = logging.getLogger("mdpage.fonts")

FONT_EXTENSIONS = (".ttf", ".otf")


class FontProvider:
    """Locates font files for (family, weight) pairs and measures text.

    Args:
        font_dirs (list[str]): Directories searched before Pillow's own
            system font lookup.
    """

    def __init__(self, font_dirs: Optional[List[str]] = None):
        self.font_dirs = [os.path.expanduser(d) for d in (font_dirs or []) if d]
        self._paths: Dict[Tuple[str, str], str] = {}
        self._fonts: Dict[Tuple[str, str, float], object] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _candidate_names(family: str, weight: str) -> List[str]:
        compact_family = family.replace(" ", "")
        names = [
            f"{compact_family}-{weight.replace(' ', '')}",
            f"{family}-{weight}",
            f"{compact_family}{weight.replace(' ', '')}",
        ]
        if weight == "Regular":
            names.append(compact_family)
        return list(dict.fromkeys(names))

    def ensure_font_available(self, family: str, weight: str) -> str:
        """Resolves the font file for a family and weight.

        Raises:
            OSError: If no matching font file can be found.
        """
        key = (family, weight)
        with self._lock:
            if key in self._paths:
                return self._paths[key]

        for name in self._candidate_names(family, weight):
            for ext in FONT_EXTENSIONS:
                for font_dir in self.font_dirs:
                    path = os.path.join(font_dir, name + ext)
                    if os.path.isfile(path):
                        return self._register(key, path)
                try:
                    # Pillow searches the platform font directories itself
                    ImageFont.truetype(name + ext, 12)
                    return self._register(key, name + ext)
                except OSError:
                    continue
        raise OSError(f"Font '{family} {weight}' not found")

    def _register(self, key: Tuple[str, str], path: str) -> str:
        with self._lock:
            self._paths[key] = path
        log.debug("Resolved font %s %s -> %s", key[0], key[1], path)
        return path

    def get_font(self, family: str, weight: str, size: float):
        """Returns a cached Pillow font, or Pillow's default font as fallback."""
        cache_key = (family, weight, size)
        with self._lock:
            font = self._fonts.get(cache_key)
            path = self._paths.get((family, weight))
        if font is not None:
            return font

        if path:
            try:
                font = ImageFont.truetype(path, size)
            except OSError as e:
                log.warning("Could not open font file %s: %s", path, e)
        if font is None:
            font = ImageFont.load_default(size=size)

        with self._lock:
            self._fonts[cache_key] = font
        return font

    def measure(self, text: str, family: str, weight: str, size: float) -> float:
        """Advance width of a single line of text in pixels."""
        if not text:
            return 0.0
        return float(self.get_font(family, weight, size).getlength(text))


@dataclass
class FontLoadReport:
    """Outcome of a bulk font load; failures never abort the build."""

    loaded: List[Tuple[str, str]] = field(default_factory=list)
    failures: List[Tuple[str, str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def load_fonts(
    provider, families=None, max_workers: int = FONT_LOAD_WORKERS
) -> FontLoadReport:
    """Requests every (family, weight) concurrently and waits for all of them."""
    families = FONT_FAMILIES if families is None else families
    requests = [(f["name"], weight) for f in families for weight in f["weights"]]
    report = FontLoadReport()
    if not requests:
        return report

    log.info("Loading %d font styles...", len(requests))
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_request = {
            executor.submit(provider.ensure_font_available, family, weight): (family, weight)
            for family, weight in requests
        }
        for future in as_completed(future_to_request):
            family, weight = future_to_request[future]
            try:
                future.result()
                report.loaded.append((family, weight))
            except Exception as e:
                log.warning("Font '%s %s' unavailable: %s", family, weight, e)
                report.failures.append((family, weight, str(e)))

    # Keep the report in request order regardless of completion order
    order = {req: i for i, req in enumerate(requests)}
    report.loaded.sort(key=lambda r: order[r])
    report.failures.sort(key=lambda r: order[(r[0], r[1])])
    log.info(
        "Fonts ready: %d loaded, %d unavailable.", len(report.loaded), len(report.failures)
    )
    return report
