from .change_path import CategoryPath, ChangePath, ItemPath, ScalarPath, document_paths, parse_change_path
from .changeset import Change, ChangeSet, compute_changes
from .merge_engine import resolve
from .session import ReviewSession, SessionRegistry, SessionState

__all__ = [
    "CategoryPath",
    "Change",
    "ChangePath",
    "ChangeSet",
    "ItemPath",
    "ReviewSession",
    "ScalarPath",
    "SessionRegistry",
    "SessionState",
    "compute_changes",
    "document_paths",
    "parse_change_path",
    "resolve",
]
