"""Static metadata describing Quiz Portal."""

APP_NAME = "Quiz Portal"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "Quiz Portal runs proctored multiple-choice quizzes. Students answer timed questions "
    "in fullscreen mode and their results are stored for review by administrators."
)

INSTRUCTIONS_TEXT = (
    "Each question has its own time limit. When the timer reaches zero the quiz moves on "
    "with whatever option you selected.\n\n"
    "Switching to another window or using blocked shortcuts shows a warning the first time. "
    "Any further attempt submits your quiz immediately.\n\n"
    "Leaving fullscreen pauses the question timer. Return within the countdown or your quiz "
    "is submitted automatically."
)
