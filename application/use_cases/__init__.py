"""
Application Use Cases for the FitLife workout API.

Part of FL-11: Gamification engine

Use cases orchestrate domain logic across the core components. Dependencies
are injected via constructors for testability; use cases return result
objects, not API responses.

Usage:
    from application.use_cases import CompleteWorkoutUseCase

    use_case = CompleteWorkoutUseCase(cache=cache, gamification=engine)
    result = use_case.execute(profile_id="p-1", date="2024-03-04")
"""

from application.use_cases.complete_workout import (
    CompleteWorkoutResult,
    CompleteWorkoutUseCase,
)

__all__ = [
    "CompleteWorkoutUseCase",
    "CompleteWorkoutResult",
]
