"""Tuning constants for the extraction heuristics."""

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "OCR_STRUCT_"


@dataclass(frozen=True)
class ExtractionSettings:
    """
    Empirically tuned thresholds used across the pipeline.

    Every value is named so callers can override it; the defaults are the
    policy the test-suite pins.
    """

    # Table detection
    row_tolerance: float = 0.02
    column_tolerance: float = 0.03
    row_gap: float = 0.05
    min_table_confidence: float = 0.3
    title_search_height: float = 0.1
    title_search_margin: float = 0.1

    # Layout analysis
    line_tolerance: float = 0.02

    # Business card gating
    card_score_threshold: int = 10
    card_max_words: int = 100
    card_min_contact_methods: int = 2
    card_aspect_ratio_bonus: int = 1

    # Classification and generation
    classification_min_score: int = 2
    max_tags: int = 8
    max_products: int = 10

    # Context windows for contact confidence boosts
    context_radius: int = 20
    address_context_radius: int = 30

    def validate(self) -> None:
        for name in ("row_tolerance", "column_tolerance", "row_gap", "min_table_confidence",
                     "title_search_height", "title_search_margin", "line_tolerance"):
            value = getattr(self, name)
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        for name in ("card_score_threshold", "card_max_words", "card_min_contact_methods",
                     "classification_min_score", "max_tags", "max_products",
                     "context_radius", "address_context_radius"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be > 0, got {value}")
        if self.card_aspect_ratio_bonus < 0:
            raise ValueError("card_aspect_ratio_bonus must be >= 0")

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX, env_file: Optional[str] = None) -> "ExtractionSettings":
        """Load overrides such as ``OCR_STRUCT_CARD_SCORE_THRESHOLD=12`` from the environment."""
        load_dotenv(env_file)
        overrides = {}
        for f in fields(cls):
            raw = os.getenv(prefix + f.name.upper())
            if raw is None:
                continue
            try:
                overrides[f.name] = type(f.default)(raw)
            except ValueError as e:
                raise ValueError(f"Invalid value for {prefix + f.name.upper()}: {raw!r}") from e
            logger.debug("Setting override %s=%s", f.name, overrides[f.name])

        settings = replace(cls(), **overrides)
        settings.validate()
        return settings


DEFAULT_SETTINGS = ExtractionSettings()
