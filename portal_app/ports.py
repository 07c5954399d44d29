"""Interfaces of the external collaborators the workflows are built on.

Workflows receive these explicitly; the sqlite/filesystem/HTTP adapters in
``repository`` and ``services`` implement them and tests substitute fakes.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional

from .models import Identity, Notification, Role, Status, Submission
from .services.changes import ChangeSubscription


class AuthProvider(ABC):
    @abstractmethod
    def get_current_actor(self) -> Optional[Identity]:
        """Identity of the signed-in user, or None."""

    @abstractmethod
    def sign_in(self, email: str, password: str) -> Identity:
        """Start a session; raises AuthError on bad credentials."""

    @abstractmethod
    def sign_out(self) -> None:
        ...


class ProfileDirectory(ABC):
    @abstractmethod
    def get_role(self, user_id: str) -> Optional[Role]:
        """Role recorded for the user, or None when there is no profile."""


class SubmissionStore(ABC):
    @abstractmethod
    def get_for_user(self, user_id: str) -> Optional[Submission]:
        ...

    @abstractmethod
    def get(self, submission_id: str) -> Optional[Submission]:
        ...

    @abstractmethod
    def list_all(self) -> List[Submission]:
        """All submissions, newest first."""

    @abstractmethod
    def insert(self, submission: Submission) -> Submission:
        """Persist a new row; raises DuplicateSubmission if the user already has one."""

    @abstractmethod
    def update_decision(self, submission_id: str, status: Status, feedback: str,
                        only_if_pending: bool = False) -> Submission:
        ...

    @abstractmethod
    def subscribe(self) -> ChangeSubscription:
        """Change notifications for the submissions table."""


class BlobStorage(ABC):
    @abstractmethod
    def upload(self, bucket: str, path: str, data: bytes,
               content_type: str = "application/octet-stream", overwrite: bool = True) -> None:
        ...

    @abstractmethod
    def public_url(self, bucket: str, path: str) -> str:
        ...


class Notifier(ABC):
    @abstractmethod
    def send(self, notification: Notification) -> None:
        """Deliver one notification; raises NotificationError on failure."""
