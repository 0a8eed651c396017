from typing import Any, Dict

from .services.scoring_service import ScoreService


def award_quiz_pass(user_id: int, quiz_id: int, quiz_title: str, points: int, commit: bool = True) -> Dict[str, Any]:
    """Credit the points of a quiz passed for the first time."""
    return ScoreService.award_points(
        user_id,
        points,
        f'Passed quiz "{quiz_title}"',
        item_type=ScoreService.ITEM_TYPE_QUIZ_PASS,
        reference_id=quiz_id,
        commit=commit,
    )
