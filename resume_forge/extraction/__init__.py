from .response_extractor import ResponseExtractor
from .schema_validator import validate_payload

__all__ = ["ResponseExtractor", "validate_payload"]
