"""Evaluator side: browse every submission and record one decision each.

Decisions are persisted first and notified second. A failed notification
never undoes the stored decision; it comes back as a warning on the
``DecisionOutcome``.

Other evaluators write to the same table, so the list is refreshed from
change events. Events may arrive coalesced or out of order; a refresh
always reloads the whole list.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional
import logging

from ..errors import NotificationError, PersistenceError, PortalError, ValidationError
from ..models import Actor, Decision, Notification, Role, Status, Submission, Verdict
from ..ports import AuthProvider, Notifier, ProfileDirectory, SubmissionStore
from ..services.changes import ChangeSubscription
from .login import require_actor

logger = logging.getLogger(__name__)


class ReviewState(str, Enum):
    LOADING = "loading"
    BROWSING = "browsing"
    REVIEWING = "reviewing"
    DECIDING = "deciding"


@dataclass(frozen=True)
class ReviewView:
    submission: Submission
    feedback: str
    read_only: bool


@dataclass(frozen=True)
class DecisionOutcome:
    submission: Submission
    notified: bool
    warning: Optional[str] = None


def check_decision(decision: Decision, current: Submission) -> Decision:
    """Reject a decision before anything is written; returns it with trimmed feedback."""
    feedback = (decision.feedback or "").strip()
    if not feedback:
        raise ValidationError({"feedback": "Please provide feedback before making a decision"})
    if current.status.is_terminal:
        raise ValidationError({"status": "This submission has already been reviewed"})
    return Decision(submission_id=decision.submission_id, verdict=Verdict(decision.verdict), feedback=feedback)


class ReviewWorkflow:
    def __init__(self, auth: AuthProvider, profiles: ProfileDirectory, store: SubmissionStore,
                 notifier: Notifier, require_pending: bool = False):
        self.auth = auth
        self.profiles = profiles
        self.store = store
        self.notifier = notifier
        self.require_pending = require_pending
        self.state = ReviewState.LOADING
        self.actor: Optional[Actor] = None
        self.submissions: List[Submission] = []
        self.selected: Optional[Submission] = None

    def open(self) -> List[Submission]:
        self.state = ReviewState.LOADING
        self.actor = require_actor(self.auth, self.profiles, Role.EVALUATOR)
        return self.load()

    def load(self) -> List[Submission]:
        self.submissions = self.store.list_all()
        if self.selected is not None:
            # keep the open submission in step with what was just loaded
            fresh = next((s for s in self.submissions if s.id == self.selected.id), None)
            self.selected = fresh
        if self.state in (ReviewState.LOADING, ReviewState.REVIEWING) and self.selected is None:
            self.state = ReviewState.BROWSING
        return self.submissions

    def select(self, submission_id: str) -> ReviewView:
        submission = next((s for s in self.submissions if s.id == submission_id), None)
        if submission is None:
            submission = self.store.get(submission_id)
        if submission is None:
            raise PortalError("Submission not found")
        self.selected = submission
        self.state = ReviewState.REVIEWING
        return self.current_view()

    def current_view(self) -> Optional[ReviewView]:
        if self.selected is None:
            return None
        return ReviewView(
            submission=self.selected,
            feedback=self.selected.feedback or "",
            read_only=self.selected.status.is_terminal,
        )

    def clear_selection(self) -> None:
        self.selected = None
        self.state = ReviewState.BROWSING

    def decide(self, verdict: Verdict, feedback: str) -> DecisionOutcome:
        if self.selected is None or self.state is not ReviewState.REVIEWING:
            raise PortalError("Select a submission first")
        decision = check_decision(
            Decision(submission_id=self.selected.id, verdict=Verdict(verdict), feedback=feedback),
            self.selected,
        )

        self.state = ReviewState.DECIDING
        try:
            updated = self.store.update_decision(
                decision.submission_id, Status(decision.verdict.value), decision.feedback,
                only_if_pending=self.require_pending,
            )
        except (PersistenceError, ValidationError):
            self.state = ReviewState.REVIEWING
            raise
        logger.info("Submission %s marked %s", updated.id, updated.status.value)
        self.submissions = [updated if s.id == updated.id else s for s in self.submissions]

        outcome = self._notify(updated, decision)
        self.clear_selection()
        try:
            self.load()
        except PersistenceError as e:
            logger.error("Decision on %s saved but the list could not be reloaded: %s", updated.id, e.message)
            warning = "The list could not be refreshed: " + e.message
            if outcome.warning:
                warning = outcome.warning + " " + warning
            return DecisionOutcome(submission=updated, notified=outcome.notified, warning=warning)
        return outcome

    def _notify(self, submission: Submission, decision: Decision) -> DecisionOutcome:
        notification = Notification(
            recipient_email=submission.email,
            recipient_name=submission.full_name,
            verdict=decision.verdict,
            feedback=decision.feedback,
        )
        try:
            self.notifier.send(notification)
        except NotificationError as e:
            logger.error("Decision on %s saved but email failed: %s", submission.id, e.message)
            return DecisionOutcome(submission=submission, notified=False, warning=e.message)
        return DecisionOutcome(submission=submission, notified=True)

    def subscribe(self) -> ChangeSubscription:
        return self.store.subscribe()

    def refresh_if_changed(self, subscription: ChangeSubscription) -> bool:
        """Reload once if any change arrived since the last call."""
        if not subscription.poll():
            return False
        self.load()
        return True

    def follow(self, subscription: ChangeSubscription,
               on_reload: Optional[Callable[[List[Submission]], None]] = None,
               max_reloads: Optional[int] = None) -> int:
        """Blocking reconciliation loop: a full reload per change event."""
        reloads = 0
        for _event in subscription:
            submissions = self.load()
            reloads += 1
            if on_reload is not None:
                on_reload(submissions)
            if max_reloads is not None and reloads >= max_reloads:
                break
        return reloads
