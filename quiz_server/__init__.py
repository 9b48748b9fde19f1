"""
quiz-server: a multi-client quiz CLI served over TCP.

Each connection gets its own line-oriented session to list, show, add, edit,
delete and test quizzes, or to play a randomized round against the store.
"""

__version__ = "1.0.0"
