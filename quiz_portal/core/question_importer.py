"""Utilities for importing questions from a human-friendly text file.

File format (repeat blocks separated by blank lines or '---'):

    Q: Question text (supports markdown). Additional lines until the next
       marker are treated as part of the question.
    A: First option text
    B: Second option text
    C: Third option text
    D: Fourth option text
    CORRECT: A|B|C|D
    TIMELIMIT: seconds   (optional, defaults to 30)
    POINTS: points       (optional, defaults to 1)
    IMAGE: url           (optional)
    ID: identifier       (optional, generated when omitted)

Example:

    Q: Which HTML tag is used to create a hyperlink?
    A: <a>
    B: <link>
    C: <href>
    D: <url>
    CORRECT: A
    TIMELIMIT: 20
    POINTS: 2
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from quiz_portal.constants.quiz_constants import DEFAULT_QUESTION_POINTS, DEFAULT_TIME_LIMIT_SECONDS
from quiz_portal.core.models import Question


class QuestionImportError(Exception):
    """Raised when a question file cannot be parsed."""


@dataclass(slots=True)
class ImportedQuestions:
    """Container for imported questions and where they came from."""

    source_path: Path | None
    questions: list[Question]


_OPTION_ORDER = ["A", "B", "C", "D"]


def load_questions_from_file(file_path: Path) -> ImportedQuestions:
    text = file_path.read_text(encoding="utf-8")
    imported = parse_questions(text)
    return ImportedQuestions(source_path=file_path, questions=imported.questions)


def parse_questions(text: str) -> ImportedQuestions:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    questions = [_parse_block(block) for block in blocks if block]
    if not questions:
        raise QuestionImportError("Question file did not contain any questions.")
    return ImportedQuestions(source_path=None, questions=questions)


def _parse_positive_int(raw_value: str, label: str) -> int:
    if not raw_value:
        raise QuestionImportError(f"{label} must include an integer value.")
    try:
        parsed_value = int(raw_value)
    except ValueError as exc:
        raise QuestionImportError(f"{label} must be an integer.") from exc
    if parsed_value <= 0:
        raise QuestionImportError(f"{label} must be a positive integer.")
    return parsed_value


def _parse_block(block: str) -> Question:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    time_limit_seconds = DEFAULT_TIME_LIMIT_SECONDS
    points = DEFAULT_QUESTION_POINTS
    image_url: str | None = None
    question_id = ""
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        value = line.split(":", 1)[1].strip() if ":" in line else ""
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
        elif upper.startswith("CORRECT:"):
            correct_letter = value.upper()
            current_section = None
        elif upper.startswith("TIMELIMIT:"):
            time_limit_seconds = _parse_positive_int(value, "TIMELIMIT")
            current_section = None
        elif upper.startswith("POINTS:"):
            points = _parse_positive_int(value, "POINTS")
            current_section = None
        elif upper.startswith("IMAGE:"):
            image_url = value or None
            current_section = None
        elif upper.startswith("ID:"):
            question_id = value
            current_section = None
        elif len(line) > 2 and line[0].upper() in _OPTION_ORDER and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
        elif current_section == "Q":
            question_lines.append(line)
        elif current_section in _OPTION_ORDER:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuestionImportError(f"Encountered text outside of a known section: '{line}'.")

    if not question_lines:
        raise QuestionImportError("Question text missing (Q: ...)")
    if len(options) != len(_OPTION_ORDER):
        raise QuestionImportError("Each question must define exactly four options (A-D).")

    option_list = tuple(options[letter].strip() for letter in _OPTION_ORDER)
    if any(not opt for opt in option_list):
        raise QuestionImportError("Option text cannot be empty.")

    if correct_letter is None:
        raise QuestionImportError("CORRECT is required for every question.")
    if correct_letter not in _OPTION_ORDER:
        raise QuestionImportError("CORRECT must be one of A, B, C, or D.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuestionImportError("Question text cannot be empty.")

    return Question(
        id=question_id,  # assigned by the question bank when empty
        question_text=question_text,
        options=option_list,
        correct_option_index=_OPTION_ORDER.index(correct_letter),
        time_limit_seconds=time_limit_seconds,
        points=points,
        image_url=image_url,
    )
