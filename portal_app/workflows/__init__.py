from .login import landing_page, sign_in_and_route
from .review import DecisionOutcome, ReviewState, ReviewView, ReviewWorkflow
from .submission import SubmissionState, SubmissionWorkflow

__all__ = [
    "DecisionOutcome", "ReviewState", "ReviewView", "ReviewWorkflow",
    "SubmissionState", "SubmissionWorkflow", "landing_page", "sign_in_and_route",
]
