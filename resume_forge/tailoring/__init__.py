from .ingest_service import IngestService
from .skill_gap_service import SkillGapService
from .tailor_service import TailorService

__all__ = ["IngestService", "SkillGapService", "TailorService"]
