"""
Quiz model: one question and its expected answer.

Answers are compared case-insensitively and whitespace-trimmed when played,
so they are stored exactly as entered.
"""
from __future__ import annotations

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Quiz(Base):
    """Question/answer pair with a store-assigned integer id."""

    __tablename__ = "quizzes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    answer: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Quiz(id={self.id}, question={self.question!r})>"

    def validate(self) -> list[str]:
        """
        Validate the question and answer fields.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []
        if not (self.question or "").strip():
            errors.append("Question must not be empty.")
        if not (self.answer or "").strip():
            errors.append("Answer must not be empty.")
        return errors
