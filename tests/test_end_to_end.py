from portal_app.models import Role, Status, Verdict
from portal_app.services.auth import LocalAuth
from portal_app.workflows import ReviewWorkflow, SubmissionWorkflow, landing_page, sign_in_and_route

from .factories import FakeNotifier, make_draft


def test_developer_submits_and_evaluator_accepts(db_path, store, blobs):
    admin = LocalAuth(db_path)
    admin.create_profile("ada@example.com", "dev-password", Role.DEVELOPER)
    admin.create_profile("grace@example.com", "eval-password", Role.EVALUATOR)

    dev_session = LocalAuth(db_path)
    actor = sign_in_and_route(dev_session, dev_session, "ada@example.com", "dev-password")
    assert landing_page(actor.role) == "submit"
    submit_flow = SubmissionWorkflow(dev_session, dev_session, store, blobs)
    submit_flow.enter()
    created = submit_flow.submit(make_draft())
    assert created.status is Status.PENDING

    eval_session = LocalAuth(db_path)
    eval_session.sign_in("grace@example.com", "eval-password")
    notifier = FakeNotifier()
    review = ReviewWorkflow(eval_session, eval_session, store, notifier)
    assert [s.id for s in review.open()] == [created.id]

    review.select(created.id)
    outcome = review.decide(Verdict.ACCEPTED, "Great work")

    stored = store.get(created.id)
    assert (stored.status, stored.feedback) == (Status.ACCEPTED, "Great work")
    assert outcome.notified
    assert [n.to_payload() for n in notifier.sent] == [
        {"to": "ada@example.com", "name": "Ada Lovelace", "decision": "accepted", "feedback": "Great work"}
    ]

    view = review.select(created.id)
    assert view.read_only
    assert view.feedback == "Great work"
