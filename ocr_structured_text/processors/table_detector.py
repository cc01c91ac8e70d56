"""Table detection from spatially aligned text blocks."""

import logging
from typing import List, Optional, Sequence, Set

from ..config import DEFAULT_SETTINGS, ExtractionSettings
from ..models.data_structures import BoundingBox, ImageSize, TableData, TextBlock
from .text_processor import TextProcessor

logger = logging.getLogger(__name__)

# Absorbs float error so an offset of exactly the tolerance still counts
TOLERANCE_EPSILON = 1e-9


def within_tolerance(a: float, b: float, tolerance: float) -> bool:
    return abs(a - b) <= tolerance + TOLERANCE_EPSILON


class TableDetector:
    """Groups text blocks into rows and columns and cleans up the resulting tables"""

    def __init__(self, settings: ExtractionSettings = DEFAULT_SETTINGS):
        self.settings = settings

    # ========================================================================
    # Detection
    # ========================================================================

    def detect_tables(self, text_blocks: Sequence[TextBlock], image_size: Optional[ImageSize] = None) -> List[TableData]:
        """
        Find tables among the blocks.

        Block coordinates are normalized, so ``image_size`` only matters to callers
        that want to map the returned bounding boxes back to pixels.
        """
        blocks = sorted(text_blocks, key=lambda b: b.bounding_box.min_y, reverse=True)
        row_tolerance = self.settings.row_tolerance
        processed: Set[int] = set()
        tables: List[TableData] = []

        for index, block in enumerate(blocks):
            if index in processed:
                continue

            row_y = block.bounding_box.min_y
            row_indices = [index] + [
                other for other, candidate in enumerate(blocks)
                if other != index and other not in processed
                and within_tolerance(candidate.bounding_box.min_y, row_y, row_tolerance)
            ]
            if len(row_indices) < 2:
                continue

            row_indices.sort(key=lambda i: blocks[i].bounding_box.min_x)
            processed.update(row_indices)

            header_blocks = [blocks[i] for i in row_indices]
            column_positions = [b.bounding_box.min_x for b in header_blocks]
            table_rows = [[b.text for b in header_blocks]]
            table_blocks = list(row_indices)
            table_box = header_blocks[0].bounding_box
            for b in header_blocks[1:]:
                table_box = table_box.union(b.bounding_box)

            for search_index, search_block in enumerate(blocks):
                if search_index in processed:
                    continue
                if not search_block.bounding_box.min_y < row_y - self.settings.row_gap:
                    continue

                row_cells = self._match_columns(blocks, processed, column_positions, search_block.bounding_box.min_y)
                matched = [i for i in row_cells if i is not None]
                if len(matched) < max(2, len(column_positions) - 1):
                    continue

                table_rows.append([blocks[i].text if i is not None else "" for i in row_cells])
                processed.update(matched)
                table_blocks.extend(matched)
                for i in matched:
                    table_box = table_box.union(blocks[i].bounding_box)

            if len(table_rows) < 2:
                continue

            confidence = sum(b.confidence for b in header_blocks) / len(header_blocks)
            raw_table = TableData(
                title=self.detect_table_title(table_box, blocks, set(table_blocks)),
                headers=table_rows[0],
                rows=table_rows[1:],
                bounding_box=table_box,
                confidence=confidence,
            )
            table = self.validate_and_correct_table(raw_table)
            if table.is_valid and table.confidence > self.settings.min_table_confidence:
                logger.debug("Table detected: %d columns, %d rows, confidence %.2f",
                             len(table.headers), len(table.rows), table.confidence)
                tables.append(table)
            else:
                logger.debug("Discarding degenerate table with confidence %.2f", table.confidence)

        return tables

    def _match_columns(self, blocks: Sequence[TextBlock], processed: Set[int],
                       column_positions: List[float], row_y: float) -> List[Optional[int]]:
        """For each column slot pick an unused block on the given row, or None."""
        used: Set[int] = set()
        cells: List[Optional[int]] = []
        for column_x in column_positions:
            found = None
            for i, candidate in enumerate(blocks):
                if i in processed or i in used:
                    continue
                box = candidate.bounding_box
                if (within_tolerance(box.min_x, column_x, self.settings.column_tolerance) and
                        within_tolerance(box.min_y, row_y, self.settings.row_tolerance)):
                    found = i
                    break
            if found is not None:
                used.add(found)
            cells.append(found)
        return cells

    def detect_table_title(self, table_box: BoundingBox, blocks: Sequence[TextBlock],
                           table_block_indices: Set[int]) -> Optional[str]:
        margin = self.settings.title_search_margin
        search_area = BoundingBox(
            x=table_box.min_x - margin,
            y=table_box.max_y,
            width=table_box.width + 2 * margin,
            height=self.settings.title_search_height,
        )
        candidates = [
            b for i, b in enumerate(blocks)
            if i not in table_block_indices and b.text.strip() and search_area.intersects(b.bounding_box)
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda b: b.bounding_box.min_y).text

    # ========================================================================
    # Validation and correction
    # ========================================================================

    def validate_and_correct_table(self, table: TableData) -> TableData:
        """Normalize a table's shape and text; applying it twice changes nothing further."""
        source_confidence = table.source_confidence if table.source_confidence is not None else table.confidence

        headers = self.validate_headers([TextProcessor.clean_cell_text(h) for h in table.headers])
        rows = [[TextProcessor.clean_cell_text(cell) for cell in row] for row in table.rows]
        rows = self.validate_rows(rows, len(headers))
        rows = [row for row in rows if any(row)]
        rows = self.merge_split_rows(rows)

        return TableData(
            title=table.title.strip() if table.title else table.title,
            headers=headers,
            rows=rows,
            bounding_box=table.bounding_box,
            confidence=self.calculate_corrected_confidence(source_confidence, headers, rows),
            source_confidence=source_confidence,
        )

    @staticmethod
    def validate_headers(headers: List[str]) -> List[str]:
        validated = list(headers)
        while validated and not validated[-1]:
            validated.pop()
        validated = [h if h else f"Column {i + 1}" for i, h in enumerate(validated)]
        while len(validated) < 2:
            validated.append(f"Column {len(validated) + 1}")
        return validated

    @staticmethod
    def validate_rows(rows: List[List[str]], column_count: int) -> List[List[str]]:
        return [(row + [""] * (column_count - len(row)))[:column_count] for row in rows]

    def merge_split_rows(self, rows: List[List[str]]) -> List[List[str]]:
        """Fold OCR line-wrap continuation rows into the row above until nothing changes."""
        current = rows
        while True:
            merged: List[List[str]] = []
            for row in current:
                if merged and self.should_merge_with_previous(row, merged[-1]):
                    merged[-1] = self.merge_rows(merged[-1], row)
                else:
                    merged.append(row)
            if merged == current:
                return merged
            current = merged

    @staticmethod
    def should_merge_with_previous(row: List[str], previous: List[str]) -> bool:
        current_filled = sum(1 for cell in row if cell)
        previous_filled = sum(1 for cell in previous if cell)
        if 0 < current_filled and current_filled * 2 < previous_filled:
            return True

        first = next((cell for cell in row if cell), None)
        if first is None:
            return False
        starts_lowercase = first[0].islower()
        has_terminal_punctuation = any(p in first for p in ".!?")
        return starts_lowercase and not has_terminal_punctuation and len(first) < 30

    @staticmethod
    def merge_rows(first: List[str], second: List[str]) -> List[str]:
        merged = []
        for i in range(max(len(first), len(second))):
            a = first[i] if i < len(first) else ""
            b = second[i] if i < len(second) else ""
            merged.append(f"{a} {b}" if a and b else a or b)
        return merged

    @staticmethod
    def calculate_corrected_confidence(source_confidence: float, headers: List[str], rows: List[List[str]]) -> float:
        total_cells = len(headers) * (len(rows) + 1)
        empty_cells = sum(1 for h in headers if not h) + sum(1 for row in rows for cell in row if not cell)
        empty_ratio = empty_cells / total_cells if total_cells else 0.0

        confidence = source_confidence * (1.0 - 0.5 * empty_ratio)
        if len(rows) >= 3 and len(headers) >= 2:
            confidence *= 1.1
        return min(max(confidence, 0.0), 1.0)
