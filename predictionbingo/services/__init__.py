"""Domain services for groups, predictions and the bingo card."""

from .completion_service import BingoService, CompletionService
from .group_service import GroupService
from .prediction_service import PredictionService

__all__ = ["BingoService", "CompletionService", "GroupService", "PredictionService"]
