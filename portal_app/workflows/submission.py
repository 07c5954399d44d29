"""Developer side: one application per account.

``enter`` resolves who is on the page (steps 1-3); ``submit`` turns a draft
into stored blobs and a ``pending`` submission row (steps 4-8). Every step
runs in order and the first failure aborts the rest.
"""
from __future__ import annotations
from enum import Enum
from typing import Dict, Optional
import logging
import time
import uuid

from ..assets import compress_image, image_extension, validate_image
from ..config import PROFILE_BUCKET, SOURCE_BUCKET
from ..errors import AccessDenied, AssetError, DuplicateSubmission, PersistenceError, PortalError, ValidationError
from ..models import Actor, Role, Status, Submission, SubmissionDraft
from ..ports import AuthProvider, BlobStorage, ProfileDirectory, SubmissionStore
from ..validation import validate
from .login import require_actor

logger = logging.getLogger(__name__)


class SubmissionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    CHECKING_ROLE = "checking_role"
    READY = "ready"
    SUBMITTING = "submitting"
    DONE = "done"
    BLOCKED_DUPLICATE = "blocked_duplicate"
    FAILED = "failed"


def profile_picture_path(user_id: str, content_type: str) -> str:
    return f"{user_id}/profile.{image_extension(content_type)}"


def source_code_path(user_id: str) -> str:
    return f"{user_id}/source-code.zip"


class SubmissionWorkflow:
    def __init__(self, auth: AuthProvider, profiles: ProfileDirectory,
                 store: SubmissionStore, blobs: BlobStorage):
        self.auth = auth
        self.profiles = profiles
        self.store = store
        self.blobs = blobs
        self.state = SubmissionState.UNAUTHENTICATED
        self.actor: Optional[Actor] = None
        self.submission: Optional[Submission] = None
        self.errors: Dict[str, str] = {}

    def enter(self) -> SubmissionState:
        self.state = SubmissionState.UNAUTHENTICATED
        self.actor = None
        if self.auth.get_current_actor() is not None:
            self.state = SubmissionState.CHECKING_ROLE
        try:
            self.actor = require_actor(self.auth, self.profiles, Role.DEVELOPER)
        except AccessDenied:
            self.state = SubmissionState.FAILED
            raise
        self._check_duplicate()
        self.state = SubmissionState.READY
        return self.state

    def _check_duplicate(self) -> None:
        existing = self.store.get_for_user(self.actor.user_id)
        if existing is not None:
            self.submission = existing
            self.state = SubmissionState.BLOCKED_DUPLICATE
            raise DuplicateSubmission()

    def submit(self, draft: SubmissionDraft) -> Submission:
        if self.state is SubmissionState.BLOCKED_DUPLICATE:
            raise DuplicateSubmission()
        if self.state is not SubmissionState.READY or self.actor is None:
            raise PortalError("The submission form is not available")

        self._check_duplicate()

        errors = validate(draft)
        if draft.profile_image is not None and "profile_image" not in errors:
            image_error = validate_image(draft.profile_image)
            if image_error:
                errors["profile_image"] = image_error
        self.errors = errors
        if errors:
            raise ValidationError(errors)

        self.state = SubmissionState.SUBMITTING
        try:
            submission = self._persist(draft)
        except DuplicateSubmission:
            self.state = SubmissionState.BLOCKED_DUPLICATE
            raise
        except (AssetError, PersistenceError) as e:
            logger.warning("Submission for %s failed: %s", self.actor.user_id, e.message)
            self.state = SubmissionState.READY
            raise

        self.submission = submission
        self.state = SubmissionState.DONE
        logger.info("Stored submission %s for %s", submission.id, self.actor.user_id)
        return submission

    def _persist(self, draft: SubmissionDraft) -> Submission:
        user_id = self.actor.user_id
        image = compress_image(draft.profile_image)

        image_path = profile_picture_path(user_id, image.content_type)
        self.blobs.upload(PROFILE_BUCKET, image_path, image.data, image.content_type, overwrite=True)
        code_path = source_code_path(user_id)
        self.blobs.upload(SOURCE_BUCKET, code_path, draft.source_archive.data,
                          draft.source_archive.content_type or "application/zip", overwrite=True)

        submission = Submission(
            id=uuid.uuid4().hex,
            user_id=user_id,
            full_name=draft.full_name.strip(),
            phone_number=draft.phone_number.strip(),
            location=draft.location.strip(),
            email=draft.email.strip(),
            hobbies=draft.hobbies.strip(),
            profile_picture_ref=self.blobs.public_url(PROFILE_BUCKET, image_path),
            source_code_ref=self.blobs.public_url(SOURCE_BUCKET, code_path),
            status=Status.PENDING,
            feedback=None,
            created_at=int(time.time()),
        )
        try:
            return self.store.insert(submission)
        except PersistenceError:
            # uploads stay behind; the next attempt overwrites them in place
            logger.warning("Orphaned uploads %s/%s and %s/%s after failed insert",
                           PROFILE_BUCKET, image_path, SOURCE_BUCKET, code_path)
            raise
