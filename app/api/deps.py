from app.core.config import settings
from app.services.repair_state import RepairPolicy


def get_repair_policy() -> RepairPolicy:
    """Dependency returning the configured repair workflow policy."""
    return RepairPolicy.from_settings(settings)
