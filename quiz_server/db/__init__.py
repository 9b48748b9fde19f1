from .store import QuizRecord, QuizStore, seed_quizzes

__all__ = [
    "QuizRecord",
    "QuizStore",
    "seed_quizzes",
]
