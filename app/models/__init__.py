# models package for SQLModel models
from .worker import Worker  # noqa: F401  (import for metadata registration)
from .hazard import Hazard  # noqa: F401
from .repair_tracker import RepairTracker  # noqa: F401
