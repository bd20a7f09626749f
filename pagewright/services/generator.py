"""Build driver: collect content, run every phase, copy static files."""

import logging
import time
from dataclasses import dataclass

from pagewright.services.site import Site

logger = logging.getLogger(__name__)


@dataclass
class BuildSummary:
    pages: int
    static_files: int
    elapsed: float


class Generator:
    def __init__(self, site: Site) -> None:
        self.site = site

    async def build(self) -> BuildSummary:
        """Build the site once into the output root."""
        site = self.site
        logger.debug("Generator: building from content root '%s'", site.content_root)
        started = time.perf_counter()

        content_paths = site.collect_content_files()
        logger.debug("Generator: content files to ingest: %s", content_paths)

        for content_path in content_paths:
            site.add_content(content_path)

        await site.ingest()
        await site.classify()
        await site.transform()
        await site.output()

        static_files = await site.copy_static()

        elapsed = time.perf_counter() - started
        page_count = len(site.pages)
        logger.info(
            "Build complete; generated %d %s in %.4fs",
            page_count,
            "page" if page_count == 1 else "pages",
            elapsed,
        )
        return BuildSummary(pages=page_count, static_files=static_files, elapsed=elapsed)
