from .resume_store import ResumeStore

__all__ = ["ResumeStore"]
