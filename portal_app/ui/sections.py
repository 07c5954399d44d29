from __future__ import annotations
from typing import Optional
import pandas as pd
import streamlit as st

from ..assets import validate_archive, validate_image
from ..config import REFRESH_SECONDS
from ..errors import (
    AccessDenied, AuthError, DuplicateSubmission, NotAuthenticated, PortalError, ValidationError,
)
from ..models import Status, SubmissionDraft, UploadedFile, Verdict
from ..workflows import SubmissionState, landing_page, sign_in_and_route
from .state import go_to, review_subscription, show_flash, sign_out

FIELD_LABELS = {
    "full_name": "Full name",
    "phone_number": "Phone number",
    "location": "Location",
    "email": "Email address",
    "hobbies": "Hobbies & interests",
}
STATUS_BADGES = {Status.PENDING: "🟡 pending", Status.ACCEPTED: "🟢 accepted", Status.REJECTED: "🔴 rejected"}


def _to_upload(uploaded) -> Optional[UploadedFile]:
    if uploaded is None:
        return None
    return UploadedFile(name=uploaded.name, content_type=uploaded.type or "", data=uploaded.getvalue())


def _header(title: str) -> None:
    head_l, head_r = st.columns([0.85, 0.15])
    with head_l:
        st.subheader(title)
    with head_r:
        if st.button("Sign out", use_container_width=True):
            sign_out()


def login_page():
    show_flash()
    with st.form("login"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", type="primary")
    if not submitted:
        return
    auth = st.session_state.auth
    try:
        actor = sign_in_and_route(auth, auth, email, password)
    except (AuthError, AccessDenied) as e:
        st.error(e.message)
        return
    go_to(landing_page(actor.role))


def _guard(flow_enter) -> None:
    try:
        flow_enter()
    except NotAuthenticated:
        go_to("login")
    except AccessDenied as e:
        go_to("login", ("error", e.message))
    except DuplicateSubmission:
        pass


def submit_page():
    flow = st.session_state.submit_flow
    if flow.state is not SubmissionState.DONE:
        _guard(flow.enter)

    _header("Internship application")
    show_flash()

    if flow.state in (SubmissionState.BLOCKED_DUPLICATE, SubmissionState.DONE):
        st.success("Application submitted! We'll review it and get back to you by email.")
        return

    errors = dict(flow.errors)
    with st.form("application"):
        values = {}
        for field, label in FIELD_LABELS.items():
            widget = st.text_area if field == "hobbies" else st.text_input
            values[field] = widget(label, key=f"draft_{field}")
            if field in errors:
                st.caption(f":red[{errors[field]}]")
        picture = st.file_uploader("Profile picture (JPEG, PNG or WebP)", type=["jpg", "jpeg", "png", "webp"])
        if "profile_image" in errors:
            st.caption(f":red[{errors['profile_image']}]")
        archive = st.file_uploader("Source code (.zip, max 50MB)", type=["zip"])
        if "source_archive" in errors:
            st.caption(f":red[{errors['source_archive']}]")
        submitted = st.form_submit_button("Submit application", type="primary")

    image = _to_upload(picture)
    if image is not None:
        image_error = validate_image(image)
        if image_error:
            st.error(image_error)
        else:
            st.image(image.data, caption="Preview", width=180)
    code = _to_upload(archive)
    if code is not None and validate_archive(code):
        st.error(validate_archive(code))

    if not submitted:
        return
    draft = SubmissionDraft(profile_image=image, source_archive=code, **values)
    try:
        with st.spinner("Compressing and uploading your files..."):
            flow.submit(draft)
    except ValidationError:
        go_to("submit", ("error", "Please fix the errors in the form"))
    except DuplicateSubmission:
        st.rerun()
    except PortalError as e:
        st.error(e.message)
        st.info("Please try again.")
        return
    go_to("submit", ("success", "Submission successful! 🎉"))


def _submissions_table(submissions) -> None:
    df = pd.DataFrame([{
        "Name": s.full_name,
        "Email": s.email,
        "Location": s.location,
        "Status": STATUS_BADGES[s.status],
        "Submitted": pd.to_datetime(s.created_at, unit="s"),
    } for s in submissions])
    st.dataframe(df, hide_index=True, use_container_width=True)


@st.fragment(run_every=REFRESH_SECONDS)
def _live_refresh():
    flow = st.session_state.review_flow
    if flow.refresh_if_changed(review_subscription()):
        st.rerun(scope="app")


def evaluate_page():
    flow = st.session_state.review_flow
    if flow.actor is None:
        _guard(flow.open)
        review_subscription()

    _header("Submissions")
    show_flash()
    _live_refresh()

    if not flow.submissions:
        st.info("No submissions yet.")
        return

    with st.expander("Overview", expanded=False):
        _submissions_table(flow.submissions)

    list_col, detail_col = st.columns([0.35, 0.65])
    with list_col:
        for s in flow.submissions:
            label = f"{s.full_name} · {STATUS_BADGES[s.status]}"
            if st.button(label, key=f"pick_{s.id}", use_container_width=True):
                flow.select(s.id)
                st.session_state[f"feedback_{s.id}"] = flow.current_view().feedback

    with detail_col:
        view = flow.current_view()
        if view is None:
            st.caption("Select a submission to review it.")
            return
        _review_panel(flow, view)


def _review_panel(flow, view):
    sub = view.submission
    with st.container(border=True):
        c1, c2 = st.columns([0.3, 0.7])
        with c1:
            st.image(sub.profile_picture_ref, width=160)
        with c2:
            st.markdown(f"### {sub.full_name}")
            st.markdown(f"{sub.email} · {sub.phone_number} · {sub.location}")
            st.markdown(f"Status: **{STATUS_BADGES[sub.status]}**")
            st.link_button("Download source code", sub.source_code_ref)
        st.markdown("**Hobbies & interests**")
        st.write(sub.hobbies)

        key = f"feedback_{sub.id}"
        st.session_state.setdefault(key, view.feedback)
        feedback = st.text_area("Feedback", key=key, disabled=view.read_only)
        if view.read_only:
            st.caption("This submission has already been reviewed.")
            return

        a, r, c = st.columns(3)
        verdict = None
        with a:
            if st.button("Accept", type="primary", use_container_width=True):
                verdict = Verdict.ACCEPTED
        with r:
            if st.button("Reject", use_container_width=True):
                verdict = Verdict.REJECTED
        with c:
            if st.button("Close", use_container_width=True):
                flow.clear_selection()
                st.rerun()

    if verdict is None:
        return
    try:
        with st.spinner("Recording decision..."):
            outcome = flow.decide(verdict, feedback)
    except ValidationError as e:
        st.error(next(iter(e.errors.values()), e.message))
        return
    except PortalError as e:
        st.error(e.message)
        return
    st.session_state.pop(key, None)
    if outcome.warning:
        prefix = "Decision recorded." if outcome.notified else "Decision recorded, but the email was not sent:"
        go_to("evaluate", ("warning", f"{prefix} {outcome.warning}"))
    msg = "Candidate accepted! 🎉" if verdict is Verdict.ACCEPTED else "Decision recorded."
    go_to("evaluate", ("success", msg))
