# Application Index Package
from .builder import build_index, get_due_cards, get_new_cards
from .projector import project_cards
from .replayer import replay

__all__ = ["build_index", "get_due_cards", "get_new_cards", "project_cards", "replay"]
