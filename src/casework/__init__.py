"""Casework: content director for a housing-compliance scenario training game.

The Director decides, each simulated day, which scripted event the learner
faces, at what difficulty, with what contextual modifiers and time budgets.

Usage:
    from casework.engine import create_director
    from casework.models import DifficultyCurve, PlanInput

    director = create_director(events, DifficultyCurve(), seed=1)
    decision = director.plan_next(PlanInput(day=1))
"""

__version__ = "0.1.0"
