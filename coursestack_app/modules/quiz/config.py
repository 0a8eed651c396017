# File: coursestack_app/modules/quiz/config.py
from datetime import timedelta


class QuizModuleConfig:
    """
    Defaults for the quiz module.
    """
    DEFAULT_PASSING_SCORE = 70

    # Oldest client-reported start time accepted for an attempt
    MAX_ATTEMPT_DURATION = timedelta(hours=24)
    # Tolerated clock skew for a client-reported start time
    CLIENT_CLOCK_SKEW = timedelta(seconds=30)
