"""Document layout analysis over positioned text blocks."""

import logging
import re
from dataclasses import replace
from typing import List, Optional, Sequence

from ..config import DEFAULT_SETTINGS, ExtractionSettings
from ..models.data_structures import (
    BoundingBox, BulletPoint, DocumentLayout, DocumentSection, ImageSize,
    NumberedItem, NumberedList, TableData, TextBlock,
)
from .table_detector import TableDetector, within_tolerance
from .text_processor import TextProcessor

logger = logging.getLogger(__name__)


BULLET_GLYPHS = ("•", "◦", "▪", "▫", "‣", "-", "*", "·")

NUMBER_PATTERNS = [
    re.compile(r'^\d+\.'),
    re.compile(r'^\d+\)'),
    re.compile(r'^[a-z]\.'),
    re.compile(r'^[A-Z]\.'),
    re.compile(r'^[ivx]+\.'),
    re.compile(r'^[IVX]+\.'),
]

HEADING_INDICATORS = (
    "title", "heading", "section", "chapter", "part", "summary",
    "introduction", "conclusion", "overview", "details", "information",
)


class DocumentLayoutAnalyzer:
    """Recovers reading order, title, sections, lists and tables from OCR blocks"""

    def __init__(self, table_detector: Optional[TableDetector] = None,
                 settings: ExtractionSettings = DEFAULT_SETTINGS):
        self.settings = settings
        self.table_detector = table_detector or TableDetector(settings)

    def analyze_document_layout(self, text_blocks: Sequence[TextBlock],
                                image_size: Optional[ImageSize] = None) -> DocumentLayout:
        content_blocks = self.sort_text_blocks([b for b in text_blocks if b.text.strip()])

        title = self.detect_title(content_blocks)
        sections = self.extract_sections(content_blocks)
        bullet_points = self.extract_bullet_points(content_blocks)
        numbered_lists = self.extract_numbered_lists(content_blocks)
        tables = self.table_detector.detect_tables(content_blocks, image_size or ImageSize())

        score = self.structure_score(title, sections, bullet_points, numbered_lists, tables)
        is_structured = score >= 3
        confidence = self.calculate_layout_confidence(text_blocks, is_structured)

        logger.debug("Layout: title=%s sections=%d bullets=%d lists=%d tables=%d score=%d",
                     title is not None, len(sections), len(bullet_points),
                     len(numbered_lists), len(tables), score)
        return DocumentLayout(
            title=title,
            sections=sections,
            bullet_points=bullet_points,
            numbered_lists=numbered_lists,
            tables=tables,
            is_structured=is_structured,
            confidence=confidence,
        )

    # ========================================================================
    # Reading order
    # ========================================================================

    def sort_text_blocks(self, text_blocks: Sequence[TextBlock]) -> List[TextBlock]:
        """Top-to-bottom lines, left-to-right within a line."""
        by_height = sorted(text_blocks, key=lambda b: b.bounding_box.min_y, reverse=True)
        lines: List[List[TextBlock]] = []
        for block in by_height:
            if lines and within_tolerance(lines[-1][0].bounding_box.min_y, block.bounding_box.min_y,
                                        self.settings.line_tolerance):
                lines[-1].append(block)
            else:
                lines.append([block])
        return [block for line in lines for block in sorted(line, key=lambda b: b.bounding_box.min_x)]

    # ========================================================================
    # Title and sections
    # ========================================================================

    @staticmethod
    def detect_title(blocks: Sequence[TextBlock]) -> Optional[str]:
        if not blocks:
            return None

        for block in blocks[:3]:
            text = block.text.strip()
            words = text.split()
            is_centered = 0.3 < block.bounding_box.mid_x < 0.7
            is_short = len(words) <= 10
            is_contact = '@' in text or 'phone' in text.lower()
            capitalized = sum(1 for w in words if TextProcessor.starts_capitalized(w))

            if is_centered and is_short and not is_contact and capitalized * 2 >= len(words):
                return text
            if TextProcessor.is_all_caps(text) and is_short:
                return text

        fallback = blocks[0].text.strip()
        if 3 < len(fallback) < 100 and '@' not in fallback:
            return fallback
        return None

    def extract_sections(self, blocks: Sequence[TextBlock]) -> List[DocumentSection]:
        sections: List[DocumentSection] = []
        current: Optional[DocumentSection] = None

        for block in blocks:
            text = block.text.strip()
            if self.is_section_header(text):
                if current is not None:
                    sections.append(current)
                current = DocumentSection(
                    title=text,
                    content="",
                    level=self.determine_section_level(text),
                    bounding_box=block.bounding_box,
                )
            elif current is not None:
                content = f"{current.content} {text}" if current.content else text
                current = replace(current, content=content)

        if current is not None:
            sections.append(current)
        return sections

    @staticmethod
    def is_section_header(text: str) -> bool:
        lower = text.lower()
        if TextProcessor.contains_any(lower, HEADING_INDICATORS):
            return True

        words = text.split()
        if TextProcessor.is_all_caps(text) and len(words) <= 5:
            return True

        title_case = sum(1 for w in words if TextProcessor.is_title_case_word(w))
        if words and title_case * 2 >= len(words) and len(words) <= 8:
            return True

        return text.endswith(':') and len(words) <= 6

    @staticmethod
    def determine_section_level(text: str) -> int:
        lower = text.lower()
        if 'title' in lower or 'main' in lower or TextProcessor.is_all_caps(text):
            return 1
        if 'section' in lower or 'part' in lower:
            return 2
        return 3

    # ========================================================================
    # Lists
    # ========================================================================

    @staticmethod
    def extract_bullet_points(blocks: Sequence[TextBlock]) -> List[BulletPoint]:
        bullets = []
        for block in blocks:
            text = block.text.strip()
            glyph = next((g for g in BULLET_GLYPHS if text.startswith(g)), None)
            if glyph is None:
                continue
            content = text[len(glyph):].strip()
            if content:
                bullets.append(BulletPoint(
                    text=content,
                    level=DocumentLayoutAnalyzer.determine_bullet_level(block.bounding_box),
                    bounding_box=block.bounding_box,
                ))
        return bullets

    @staticmethod
    def determine_bullet_level(box: BoundingBox) -> int:
        if box.min_x < 0.1:
            return 1
        if box.min_x < 0.2:
            return 2
        return 3

    @staticmethod
    def extract_numbered_lists(blocks: Sequence[TextBlock]) -> List[NumberedList]:
        """Consecutive numbered blocks form one list, renumbered from 1 in reading order."""
        lists: List[NumberedList] = []
        current: List[NumberedItem] = []

        for block in blocks:
            text = block.text.strip()
            content = None
            for pattern in NUMBER_PATTERNS:
                match = pattern.match(text)
                if match and text[match.end():].strip():
                    content = text[match.end():].strip()
                    break

            if content is not None:
                current.append(NumberedItem(number=len(current) + 1, text=content,
                                            bounding_box=block.bounding_box))
            elif current:
                lists.append(NumberedList(items=current))
                current = []

        if current:
            lists.append(NumberedList(items=current))
        return lists

    # ========================================================================
    # Scoring
    # ========================================================================

    @staticmethod
    def structure_score(title: Optional[str], sections: Sequence[DocumentSection],
                        bullet_points: Sequence[BulletPoint], numbered_lists: Sequence[NumberedList],
                        tables: Sequence[TableData]) -> int:
        score = 0
        if title is not None:
            score += 1
        if len(sections) >= 2:
            score += 2
        if bullet_points:
            score += 1
        if numbered_lists:
            score += 1
        if tables:
            score += 2
        return score

    @staticmethod
    def calculate_layout_confidence(text_blocks: Sequence[TextBlock], is_structured: bool) -> float:
        confidence = 0.6
        if is_structured:
            confidence += 0.3
        mean_ocr = sum(b.confidence for b in text_blocks) / len(text_blocks) if text_blocks else 0.0
        return min(max((confidence + mean_ocr) / 2, 0.0), 1.0)
