"""
High-level utilities for rendering generated MoralBook stories into printable PDFs.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional, Sequence

import requests
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import inch, mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas
from reportlab.platypus import Frame, Paragraph

from moralbook.pipeline.story import GeneratedStory, StoryPage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageLayoutConfig:
    text_background: colors.Color
    image_background: colors.Color
    cover_background: colors.Color
    accent_color: colors.Color
    text_color: colors.Color
    caption_color: colors.Color


DEFAULT_LAYOUT = PageLayoutConfig(
    text_background=colors.HexColor("#FDF6EC"),
    image_background=colors.HexColor("#EEF6FB"),
    cover_background=colors.HexColor("#7BA7C9"),
    accent_color=colors.HexColor("#F4B6C2"),
    text_color=colors.HexColor("#2F2A40"),
    caption_color=colors.HexColor("#4B506D"),
)


PAGE_SIZES = {
    "a4": A4,
    "letter": LETTER,
    "square": (8 * inch, 8 * inch),
}


class StorybookPDFBuilder:
    """
    Render generated stories into printable PDFs.

    The builder creates:
      * A cover page with the story title.
      * For every story page, a text page followed by its illustration page. Pages
        whose illustration is missing get a soft placeholder panel instead.
    """

    def __init__(
        self,
        *,
        page_size: tuple[float, float] = PAGE_SIZES["square"],
        margin_mm: float = 18.0,
        layout: PageLayoutConfig = DEFAULT_LAYOUT,
        request_timeout: float = 30.0,
    ) -> None:
        self.page_size = page_size
        self.margin = margin_mm * mm
        self.layout = layout
        self.request_timeout = request_timeout

        self.body_font, self.body_bold_font = self._configure_story_fonts()

        self.title_style = ParagraphStyle(
            name="StoryTitle",
            fontName="Helvetica-Bold",
            fontSize=28,
            leading=32,
            alignment=TA_CENTER,
            textColor=colors.white,
            spaceAfter=12,
        )
        self.subtitle_style = ParagraphStyle(
            name="StorySubtitle",
            fontName="Helvetica",
            fontSize=16,
            leading=20,
            alignment=TA_CENTER,
            textColor=colors.white,
            spaceAfter=18,
        )
        self.body_style = ParagraphStyle(
            name="Body",
            fontName=self.body_font,
            fontSize=18,
            leading=27,
            alignment=TA_JUSTIFY,
            textColor=self.layout.text_color,
            spaceAfter=16,
        )
        self.placeholder_style = ParagraphStyle(
            name="Placeholder",
            fontName=self.body_bold_font,
            fontSize=16,
            leading=20,
            alignment=TA_CENTER,
            textColor=self.layout.caption_color,
        )
        self.footer_style = ParagraphStyle(
            name="Footer",
            fontName="Helvetica-Oblique",
            fontSize=10,
            leading=12,
            alignment=TA_CENTER,
            textColor=self.layout.caption_color,
        )

    def build_from_yaml(
        self,
        story_path: Path | str,
        output_path: Path | str,
        *,
        child_name: str | None = None,
    ) -> None:
        story = GeneratedStory.from_yaml(story_path)
        self.build(story, output_path, child_name=child_name)

    def build(
        self,
        story: GeneratedStory,
        output_path: Path | str,
        *,
        child_name: str | None = None,
    ) -> None:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        pdf = canvas.Canvas(str(output_file), pagesize=self.page_size)
        pdf.setTitle(story.title)
        width, height = self.page_size

        self._draw_cover_page(pdf, story, width, height, child_name)

        for page in story.pages:
            self._draw_text_page(pdf, page, width, height, child_name)
            self._draw_image_page(pdf, page, width, height)

        pdf.save()
        logger.info("Rendered %d story pages to %s", len(story.pages), output_file)

    # ------------------------------------------------------------------ cover rendering

    def _draw_cover_page(
        self,
        pdf: canvas.Canvas,
        story: GeneratedStory,
        width: float,
        height: float,
        child_name: str | None,
    ) -> None:
        pdf.setFillColor(self.layout.cover_background)
        pdf.rect(0, 0, width, height, stroke=0, fill=1)

        frame = Frame(
            self.margin,
            self.margin,
            width - 2 * self.margin,
            height - 2 * self.margin,
            showBoundary=0,
        )

        intro = [Paragraph(story.title, self.title_style)]
        if child_name:
            intro.append(Paragraph(f"A story made especially for {child_name}", self.subtitle_style))

        frame.addFromList(intro, pdf)
        pdf.showPage()

    # ------------------------------------------------------------------ text pages

    def _draw_text_page(
        self,
        pdf: canvas.Canvas,
        page: StoryPage,
        width: float,
        height: float,
        child_name: str | None,
    ) -> None:
        pdf.setFillColor(self.layout.text_background)
        pdf.rect(0, 0, width, height, stroke=0, fill=1)

        bubble_width = width - (self.margin * 2 * 0.6)
        bubble_height = height - (self.margin * 2 * 0.6)
        bubble_x = (width - bubble_width) / 2
        bubble_y = (height - bubble_height) / 2

        pdf.saveState()
        pdf.setFillColor(self._lighten(self.layout.accent_color, 0.75))
        pdf.roundRect(bubble_x, bubble_y, bubble_width, bubble_height, 26, stroke=0, fill=1)
        pdf.restoreState()

        content_width = bubble_width - (self.margin * 2 * 0.3)
        content_height = bubble_height - (self.margin * 2 * 0.3)
        frame = Frame(
            bubble_x + (bubble_width - content_width) / 2,
            bubble_y + (bubble_height - content_height) / 2,
            content_width,
            content_height,
            showBoundary=0,
        )
        frame.addFromList([Paragraph(page.text.replace("\n", "<br/>"), self.body_style)], pdf)

        footer_text = f"Page {page.page_number}"
        if child_name:
            footer_text += f" • {child_name}'s Story"
        self._draw_footer(pdf, footer_text, width)
        pdf.showPage()

    # ------------------------------------------------------------------ image pages

    def _draw_image_page(
        self,
        pdf: canvas.Canvas,
        page: StoryPage,
        width: float,
        height: float,
    ) -> None:
        pdf.setFillColor(self.layout.image_background)
        pdf.rect(0, 0, width, height, stroke=0, fill=1)

        image_reader = self._load_image(page)

        if image_reader is not None:
            img_width, img_height = image_reader.getSize()
            scale = max(width / img_width, height / img_height)
            draw_width = img_width * scale
            draw_height = img_height * scale
            pdf.drawImage(
                image_reader,
                (width - draw_width) / 2,
                (height - draw_height) / 2,
                draw_width,
                draw_height,
                preserveAspectRatio=True,
                mask="auto",
            )
        else:
            self._draw_placeholder(pdf, width, height)

        self._draw_footer(pdf, f"Illustration for Page {page.page_number}", width)
        pdf.showPage()

    # ------------------------------------------------------------------ helpers

    def _load_image(self, page: StoryPage) -> Optional[ImageReader]:
        for candidate in (page.image_base64, page.image_url):
            if not candidate:
                continue
            if candidate.startswith("data:image/"):
                reader = self._decode_data_uri(candidate)
            elif candidate.lower().startswith(("http://", "https://")):
                reader = self._fetch_image(candidate)
            else:
                reader = None
            if reader is not None:
                return reader
        return None

    @staticmethod
    def _decode_data_uri(data_uri: str) -> Optional[ImageReader]:
        _, _, payload = data_uri.partition(",")
        try:
            return ImageReader(BytesIO(base64.b64decode(payload)))
        except (binascii.Error, OSError, ValueError):
            logger.warning("Could not decode embedded illustration.")
            return None

    def _fetch_image(self, url: str) -> Optional[ImageReader]:
        try:
            response = requests.get(url, timeout=self.request_timeout)
            response.raise_for_status()
        except requests.RequestException:
            logger.warning("Could not fetch illustration from %s", url[:80])
            return None
        return ImageReader(BytesIO(response.content))

    def _draw_placeholder(self, pdf: canvas.Canvas, width: float, height: float) -> None:
        panel_width = width - 4 * self.margin
        panel_height = height - 4 * self.margin
        panel_x = (width - panel_width) / 2
        panel_y = (height - panel_height) / 2

        pdf.saveState()
        pdf.setFillColor(self._lighten(self.layout.accent_color, 0.6))
        pdf.roundRect(panel_x, panel_y, panel_width, panel_height, 26, stroke=0, fill=1)
        pdf.restoreState()

        frame = Frame(panel_x, panel_y + panel_height / 2 - 20, panel_width, 40, showBoundary=0)
        frame.addFromList([Paragraph("Illustration coming soon", self.placeholder_style)], pdf)

    def _draw_footer(self, pdf: canvas.Canvas, text: str, width: float) -> None:
        footer_frame = Frame(
            self.margin,
            10,
            width - 2 * self.margin,
            20,
            showBoundary=0,
        )
        footer_frame.addFromList([Paragraph(text, self.footer_style)], pdf)

    @staticmethod
    def _lighten(color: colors.Color, amount: float = 0.5) -> colors.Color:
        amount = max(0.0, min(amount, 1.0))
        r = color.red + (1 - color.red) * amount
        g = color.green + (1 - color.green) * amount
        b = color.blue + (1 - color.blue) * amount
        return colors.Color(r, g, b)

    def _configure_story_fonts(self) -> tuple[str, str]:
        playful_options = [
            (
                "ComicSansMS",
                "ComicSansMS-Bold",
                ["Comic Sans MS.ttf", "ComicSansMS.ttf"],
                ["Comic Sans MS Bold.ttf", "ComicSansMS-Bold.ttf"],
            ),
            (
                "ChalkboardSE-Light",
                "ChalkboardSE-Bold",
                ["ChalkboardSE-Light.ttf", "ChalkboardSE.ttc"],
                ["ChalkboardSE-Bold.ttf"],
            ),
        ]

        search_roots = [
            Path("/Library/Fonts"),
            Path("/System/Library/Fonts"),
            Path.home() / "Library" / "Fonts",
            Path("C:/Windows/Fonts"),
            Path("/usr/share/fonts"),
            Path("/usr/local/share/fonts"),
        ]

        for regular_name, bold_name, regular_candidates, bold_candidates in playful_options:
            regular_ready = self._register_font_if_available(regular_name, regular_candidates, search_roots)
            bold_ready = self._register_font_if_available(bold_name, bold_candidates, search_roots)
            if regular_ready and bold_ready:
                return regular_name, bold_name

        return "Helvetica", "Helvetica-Bold"

    @staticmethod
    def _register_font_if_available(
        font_name: str,
        candidate_filenames: Sequence[str],
        search_roots: Sequence[Path],
    ) -> bool:
        if font_name in pdfmetrics.getRegisteredFontNames():
            return True

        for root in search_roots:
            for candidate in candidate_filenames:
                font_path = root / candidate
                if font_path.exists():
                    try:
                        pdfmetrics.registerFont(TTFont(font_name, str(font_path)))
                        return True
                    except Exception:
                        logger.debug("Could not register font %s", font_path, exc_info=True)
                        continue
        return False
