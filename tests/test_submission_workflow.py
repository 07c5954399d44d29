import os

import pytest

from portal_app.config import PROFILE_BUCKET, SOURCE_BUCKET
from portal_app.errors import (
    AccessDenied, AssetError, CompressionError, DuplicateSubmission, NotAuthenticated,
    PersistenceError, PortalError, ValidationError,
)
from portal_app.models import Role, Status, UploadedFile
from portal_app.repository import SqliteSubmissionStore
from portal_app.workflows import SubmissionState, SubmissionWorkflow

from .factories import make_draft, make_image, make_submission


class FailingBlobs:
    def __init__(self, inner, fail_bucket):
        self.inner = inner
        self.fail_bucket = fail_bucket

    def upload(self, bucket, path, data, content_type="application/octet-stream", overwrite=True):
        if bucket == self.fail_bucket:
            raise PersistenceError("Failed to upload source code")
        self.inner.upload(bucket, path, data, content_type, overwrite)

    def public_url(self, bucket, path):
        return self.inner.public_url(bucket, path)


class FlakyStore(SqliteSubmissionStore):
    def __init__(self, *args, failures=1, **kwargs):
        super().__init__(*args, **kwargs)
        self.failures = failures

    def insert(self, submission):
        if self.failures:
            self.failures -= 1
            raise PersistenceError("Failed to save submission")
        return super().insert(submission)


@pytest.fixture
def flow(auth, store, blobs):
    return SubmissionWorkflow(auth, auth, store, blobs)


def _bucket_files(blobs, bucket):
    root = os.path.join(blobs.root, bucket)
    found = []
    for dirpath, _, files in os.walk(root):
        found.extend(os.path.relpath(os.path.join(dirpath, f), root) for f in files)
    return sorted(found)


def test_unauthenticated_actor_cannot_enter(flow):
    with pytest.raises(NotAuthenticated):
        flow.enter()
    assert flow.state is SubmissionState.UNAUTHENTICATED


def test_evaluator_is_denied_and_signed_out(flow, auth, evaluator):
    auth.login_as(evaluator)
    with pytest.raises(AccessDenied):
        flow.enter()
    assert flow.state is SubmissionState.FAILED
    assert auth.get_current_actor() is None


def test_actor_without_profile_is_denied(flow, auth):
    identity = auth.add("ghost@example.com", None)
    auth.login_as(identity)
    with pytest.raises(AccessDenied):
        flow.enter()


def test_developer_enters_ready(flow, developer):
    assert flow.enter() is SubmissionState.READY
    assert flow.actor.user_id == developer.user_id
    assert flow.actor.role is Role.DEVELOPER


def test_existing_submission_blocks_every_entry(flow, store, developer):
    store.insert(make_submission(user_id=developer.user_id))
    for _ in range(2):
        with pytest.raises(DuplicateSubmission):
            flow.enter()
        assert flow.state is SubmissionState.BLOCKED_DUPLICATE
    with pytest.raises(DuplicateSubmission):
        flow.submit(make_draft())
    assert len(store.list_all()) == 1


def test_submit_before_enter_is_refused(flow, developer):
    with pytest.raises(PortalError):
        flow.submit(make_draft())


def test_successful_submission(flow, store, blobs, developer):
    flow.enter()
    submission = flow.submit(make_draft())

    assert flow.state is SubmissionState.DONE
    assert submission.status is Status.PENDING
    assert submission.feedback is None
    assert submission.user_id == developer.user_id
    assert submission.full_name == "Ada Lovelace"
    assert submission.email == "ada@example.com"
    assert submission.profile_picture_ref == \
        f"http://files.test/storage/{PROFILE_BUCKET}/{developer.user_id}/profile.png"
    assert submission.source_code_ref == \
        f"http://files.test/storage/{SOURCE_BUCKET}/{developer.user_id}/source-code.zip"
    assert store.get_for_user(developer.user_id) == submission
    assert _bucket_files(blobs, PROFILE_BUCKET) == [f"{developer.user_id}/profile.png"]
    assert _bucket_files(blobs, SOURCE_BUCKET) == [f"{developer.user_id}/source-code.zip"]


def test_second_entry_after_success_is_blocked(flow, developer):
    flow.enter()
    flow.submit(make_draft())
    with pytest.raises(DuplicateSubmission):
        flow.enter()


def test_validation_errors_abort_before_uploads(flow, store, blobs, developer):
    flow.enter()
    with pytest.raises(ValidationError) as exc:
        flow.submit(make_draft(hobbies="too short", phone_number="123"))
    assert set(exc.value.errors) == {"hobbies", "phone_number"}
    assert flow.errors == exc.value.errors
    assert flow.state is SubmissionState.READY
    assert store.list_all() == []
    assert _bucket_files(blobs, PROFILE_BUCKET) == []


def test_unsupported_picture_is_a_field_error(flow, developer):
    flow.enter()
    gif = UploadedFile(name="me.gif", content_type="image/gif", data=b"GIF89a")
    with pytest.raises(ValidationError) as exc:
        flow.submit(make_draft(profile_image=gif))
    assert exc.value.errors == {"profile_image": "Please upload a valid image file (JPEG, PNG, or WebP)"}


def test_compression_failure_leaves_no_record(flow, store, blobs, developer):
    flow.enter()
    broken = UploadedFile(name="me.png", content_type="image/png", data=b"not an image")
    with pytest.raises(AssetError) as exc:
        flow.submit(make_draft(profile_image=broken))
    assert isinstance(exc.value, CompressionError)
    assert flow.state is SubmissionState.READY
    assert store.list_all() == []
    assert _bucket_files(blobs, PROFILE_BUCKET) == []


def test_upload_failure_leaves_no_record(auth, store, blobs, developer):
    flow = SubmissionWorkflow(auth, auth, store, FailingBlobs(blobs, SOURCE_BUCKET))
    flow.enter()
    with pytest.raises(PersistenceError):
        flow.submit(make_draft())
    assert flow.state is SubmissionState.READY
    assert store.list_all() == []


def test_insert_failure_allows_retry_without_duplicate_blobs(auth, db_path, feed, blobs, developer):
    store = FlakyStore(db_path, feed, failures=1)
    flow = SubmissionWorkflow(auth, auth, store, blobs)
    flow.enter()

    with pytest.raises(PersistenceError):
        flow.submit(make_draft())
    assert flow.state is SubmissionState.READY
    assert store.list_all() == []
    # uploads from the failed attempt are left behind
    assert _bucket_files(blobs, SOURCE_BUCKET) == [f"{developer.user_id}/source-code.zip"]

    submission = flow.submit(make_draft(profile_image=make_image("PNG", size=(80, 80))))
    assert flow.state is SubmissionState.DONE
    assert store.list_all() == [submission]
    assert _bucket_files(blobs, PROFILE_BUCKET) == [f"{developer.user_id}/profile.png"]
    assert _bucket_files(blobs, SOURCE_BUCKET) == [f"{developer.user_id}/source-code.zip"]


def test_submission_from_another_session_is_detected_on_submit(flow, store, developer):
    flow.enter()
    store.insert(make_submission(user_id=developer.user_id))
    with pytest.raises(DuplicateSubmission):
        flow.submit(make_draft())
    assert flow.state is SubmissionState.BLOCKED_DUPLICATE
    assert len(store.list_all()) == 1


def test_large_picture_is_compressed_before_upload(flow, blobs, developer):
    flow.enter()
    big = make_image("JPEG", size=(2400, 1600), noise=True, quality=95)
    submission = flow.submit(make_draft(profile_image=big))
    stored = blobs.path_for(PROFILE_BUCKET, f"{developer.user_id}/profile.jpg")
    assert submission.profile_picture_ref.endswith("/profile.jpg")
    assert os.path.getsize(stored) <= 1024 * 1024
