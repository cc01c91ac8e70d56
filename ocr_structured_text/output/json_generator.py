"""JSON output generation utilities."""

import datetime
import json
import os
from dataclasses import asdict, fields, is_dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from ..config import ExtractionSettings
from ..models.data_structures import ExtractionOptions, StructuredTextData


class JSONGenerator:
    """JSON output generation utilities"""

    @staticmethod
    def to_jsonable(value: Any) -> Any:
        """Recursively convert dataclasses, enums, dates and decimals into JSON-safe values."""
        if is_dataclass(value) and not isinstance(value, type):
            return {f.name: JSONGenerator.to_jsonable(getattr(value, f.name)) for f in fields(value)}
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, (datetime.date, datetime.datetime)):
            return value.isoformat()
        if isinstance(value, Decimal):
            return str(value)
        if isinstance(value, dict):
            return {JSONGenerator.to_jsonable(k): JSONGenerator.to_jsonable(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [JSONGenerator.to_jsonable(v) for v in value]
        return value

    @staticmethod
    def to_dict(data: StructuredTextData) -> Dict[str, Any]:
        result = JSONGenerator.to_jsonable(data)
        result["confidence"] = data.confidence
        return result

    @staticmethod
    def create_metadata(source: Optional[str], options: ExtractionOptions,
                        settings: ExtractionSettings, block_count: int) -> Dict[str, Any]:
        """Create the processing metadata block."""
        from .. import __version__

        return {
            'source_file': os.path.basename(source) if source else None,
            'source_path': source,
            'processing_timestamp': datetime.datetime.now().isoformat(),
            'processing_version': __version__,
            'block_count': block_count,
            'options': asdict(options),
            'processing_parameters': asdict(settings),
        }

    @staticmethod
    def create_output(data: StructuredTextData, metadata: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'metadata': metadata,
            'result': JSONGenerator.to_dict(data),
        }

    @staticmethod
    def dumps(payload: Any) -> str:
        return json.dumps(JSONGenerator.to_jsonable(payload), indent=2, ensure_ascii=False)

    @staticmethod
    def save_json(payload: Any, output_path: str) -> str:
        """Write a payload as JSON, creating the parent directory when needed."""
        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(JSONGenerator.dumps(payload))
        return output_path
