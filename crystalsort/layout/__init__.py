from .crystal import CommitCallback, Crystal
from .grid import GridSnapshot, GridState, InsertionKind, InsertionPoint, PendingSet, Placement
from .relations import RelationMatrix
from .score import ScoreConfig, TrialView, score, score_candidates
from .selection import ColumnWeights, select_column

__all__ = [
    "ColumnWeights",
    "CommitCallback",
    "Crystal",
    "GridSnapshot",
    "GridState",
    "InsertionKind",
    "InsertionPoint",
    "PendingSet",
    "Placement",
    "RelationMatrix",
    "ScoreConfig",
    "TrialView",
    "score",
    "score_candidates",
    "select_column",
]
