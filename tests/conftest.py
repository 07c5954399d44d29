import pytest

from portal_app.repository import SqliteSubmissionStore
from portal_app.services.blob_storage import LocalBlobStorage
from portal_app.services.changes import ChangeFeed
from portal_app.models import Role

from .factories import FakeAuth, FakeNotifier


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "portal.db")


@pytest.fixture
def feed():
    return ChangeFeed()


@pytest.fixture
def store(db_path, feed):
    return SqliteSubmissionStore(db_path, feed)


@pytest.fixture
def blobs(tmp_path):
    return LocalBlobStorage(str(tmp_path / "uploads"), "http://files.test")


@pytest.fixture
def auth():
    return FakeAuth()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def developer(auth):
    identity = auth.add("ada@example.com", Role.DEVELOPER)
    auth.login_as(identity)
    return identity


@pytest.fixture
def evaluator(auth):
    return auth.add("grace@example.com", Role.EVALUATOR)
