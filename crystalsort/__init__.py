from .errors import ConfigurationError, CrystalError, InvariantViolation
from .layout import Crystal, GridSnapshot, Placement, RelationMatrix, ScoreConfig

__all__ = [
    "ConfigurationError",
    "Crystal",
    "CrystalError",
    "GridSnapshot",
    "InvariantViolation",
    "Placement",
    "RelationMatrix",
    "ScoreConfig",
]
