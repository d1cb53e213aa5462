"""
HTML to PDF renderer using headless Chromium.

Launches a fresh browser per document so a crashed render never leaks
into the next job.

Dependencies: playwright
System role: Rendering step of the report pipeline
"""

import logging

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from quizfunnel.configs.renderer import RendererSettings
from quizfunnel.core.exceptions import RenderingError

logger = logging.getLogger(__name__)


class PdfRenderer:
    """
    Renders generated HTML documents to PDF bytes.

    Usage:
        renderer = PdfRenderer.from_settings(settings.renderer)
        pdf_bytes = await renderer.render(html)
    """

    def __init__(
        self,
        page_format: str = "A4",
        print_background: bool = True,
        margin: str = "12mm",
        chromium_args: list[str] | None = None,
    ) -> None:
        """
        Initialize renderer options.

        Args:
            page_format: Paper size passed to page.pdf
            print_background: Whether CSS backgrounds are printed
            margin: Margin applied to every side
            chromium_args: Extra Chromium launch flags
        """
        self._page_format = page_format
        self._print_background = print_background
        self._margin = margin
        self._chromium_args = list(chromium_args or [])

    @classmethod
    def from_settings(cls, settings: RendererSettings) -> "PdfRenderer":
        """Build a renderer from renderer settings."""
        return cls(
            page_format=settings.page_format,
            print_background=settings.print_background,
            margin=settings.margin,
            chromium_args=settings.chromium_args,
        )

    async def render(self, html: str) -> bytes:
        """
        Render an HTML document to PDF.

        Args:
            html: Complete HTML document or fragment

        Returns:
            bytes: PDF document

        Raises:
            RenderingError: Browser launch, page load, or printing failed
        """
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=True, args=self._chromium_args)
                try:
                    page = await browser.new_page()
                    await page.set_content(html, wait_until="networkidle")
                    pdf_bytes = await page.pdf(
                        format=self._page_format,
                        print_background=self._print_background,
                        margin={
                            "top": self._margin,
                            "right": self._margin,
                            "bottom": self._margin,
                            "left": self._margin,
                        },
                    )
                finally:
                    await browser.close()
        except PlaywrightError as e:
            logger.error(f"{__name__}:render - Chromium failed: {e}")
            raise RenderingError(f"PDF rendering failed: {e}") from e

        if not pdf_bytes:
            raise RenderingError("PDF rendering produced an empty document")

        logger.info(f"{__name__}:render - Rendered {len(pdf_bytes)} bytes ({self._page_format})")
        return pdf_bytes
