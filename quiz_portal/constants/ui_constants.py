"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "Quiz Portal"

LOGIN_TITLE: str = "Sign in to Quiz Portal"
LOGIN_BUTTON: str = "Sign In"
LOGIN_FAILED_MESSAGE: str = "Invalid email or password."

LOADING_TITLE: str = "Preparing Your Quiz"
LOADING_MESSAGE: str = "Please wait while we load your questions..."
LOAD_FAILED_TITLE: str = "Could Not Load Questions"
NO_QUESTIONS_TITLE: str = "No Questions Available"
NO_QUESTIONS_MESSAGE: str = (
    "There are no quiz questions available at this time. "
    "Please try again later or contact your instructor."
)
SUBMITTING_TITLE: str = "Submitting Your Answers"
SUBMITTING_MESSAGE: str = "Please wait while we process your results..."
SUBMIT_FAILED_MESSAGE: str = "An error occurred while submitting your quiz. Please try again."
RETRY_BUTTON: str = "Try Again"

FULLSCREEN_PROMPT_TITLE: str = "Fullscreen Mode Required"
FULLSCREEN_PROMPT_MESSAGE: str = (
    "This quiz requires fullscreen mode to maintain academic integrity. "
    "Exiting fullscreen during the test will pause the timer and give you {seconds} seconds "
    "to return. If you don't return in time, your quiz will be submitted automatically."
)
FULLSCREEN_ENTER_BUTTON: str = "Enter Fullscreen && Begin Quiz"
FULLSCREEN_SKIP_BUTTON: str = "Continue Without Fullscreen"
FULLSCREEN_UNSUPPORTED_MESSAGE: str = (
    "Unable to enter fullscreen mode. Would you like to continue the quiz without fullscreen? "
    "Choose No to try again."
)
FULLSCREEN_EXIT_MESSAGE: str = (
    "You have exited fullscreen mode. The quiz timer has been paused. "
    "Please return to fullscreen mode to continue with your quiz."
)
FULLSCREEN_RETURN_BUTTON: str = "Return to Fullscreen"

NEXT_QUESTION_BUTTON: str = "Next Question"
SUBMIT_QUIZ_BUTTON: str = "Submit Quiz"
QUESTION_COUNTER_TEMPLATE: str = "Question {current} of {total}"
IMAGE_UNAVAILABLE_MESSAGE: str = "The image for this question could not be loaded."

RESULT_TITLE: str = "Quiz Results"
REVIEW_SHOW_BUTTON: str = "Review Answers"
REVIEW_HIDE_BUTTON: str = "Hide Answers"
SIGN_OUT_BUTTON: str = "Sign Out"
NO_PREVIOUS_ATTEMPTS: str = "No previous attempts."
