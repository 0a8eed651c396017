"""
Central Signal Registry for Event-Driven Architecture.

Uses Flask's built-in blinker integration to enable decoupled
communication between modules.

Usage:
    # Publisher (sender)
    from coursestack_app.core.signals import quiz_submitted
    quiz_submitted.send(None, user_id=1, quiz_id=2, attempt_id=3, ...)

    # Subscriber (receiver) - in module's events.py
    @quiz_submitted.connect
    def on_quiz_submitted(sender, **kwargs):
        ...
"""
from blinker import Namespace

# ============================================
# Assessment Signals
# ============================================
assessment_signals = Namespace()

# Signal: Fired after a quiz attempt has been finalized and committed
# Payload: user_id, course_id, quiz_id, attempt_id, score, is_passed,
#          earned_points, total_points
quiz_submitted = assessment_signals.signal('quiz_submitted')

# Signal: Fired after the first passing attempt of a user on a quiz is committed
# Payload: user_id, course_id, quiz_id, attempt_id, score, points_awarded
quiz_passed = assessment_signals.signal('quiz_passed')

# Signal: Fired when quiz content is created or updated by staff
# Payload: user_id, course_id, quiz_id, action ('quiz_created', 'quiz_updated'), details
quiz_changed = assessment_signals.signal('quiz_changed')

# ============================================
# Account Signals
# ============================================
account_signals = Namespace()

# Signal: Fired after a new account is committed
# Payload: user
user_registered = account_signals.signal('user_registered')
