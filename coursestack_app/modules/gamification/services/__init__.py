from .scoring_service import ScoreService

__all__ = ['ScoreService']
