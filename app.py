"""Streamlit UI for the Hirely job board."""
from __future__ import annotations

import html
import sys
from pathlib import Path

import streamlit as st
from dotenv import dotenv_values, set_key

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from hirely import applications as apps_svc
from hirely import assistant
from hirely.aggregator import CATEGORIES, Aggregator, filter_jobs
from hirely.config import get_env, load_settings
from hirely.errors import ValidationError
from hirely.jobs import delete_job, jobs_for_employer, post_job
from hirely.log import get_logger
from hirely.models import ApplicationStatus, Job, JobType, Profile, Role, VideoCallStatus
from hirely.profiles import candidates, ensure_profile
from hirely.sources import get_sources
from hirely.store import Store, WriteResult, open_store

log = get_logger(__name__)

_GLASS_CSS = """
<style>
[data-testid="stAppViewContainer"] {
    background: linear-gradient(135deg, #e8eaf6 0%, #f3e5f5 40%, #e0f2f1 100%);
}
[data-testid="stSidebar"] {
    background: rgba(255,255,255,0.55);
    backdrop-filter: blur(16px);
    -webkit-backdrop-filter: blur(16px);
    border-right: 1px solid rgba(255,255,255,0.3);
}
.block-container {
    padding-top: 2rem;
}
[data-testid="stForm"],
[data-testid="stExpander"] {
    background: rgba(255,255,255,0.5);
    backdrop-filter: blur(10px);
    -webkit-backdrop-filter: blur(10px);
    border-radius: 12px;
    border: 1px solid rgba(255,255,255,0.35);
    box-shadow: 0 4px 20px rgba(0,0,0,0.04);
}
.stButton > button[kind="primary"] {
    border-radius: 8px;
    font-weight: 600;
}
h1, h2, h3 {
    color: #1a1a2e;
}
.chat-bubble {
    padding: 0.5rem 0.75rem; border-radius: 10px; margin: 4px 0;
    background: rgba(255,255,255,0.7); font-size: 0.95rem;
}
.chat-bubble.mine { background: rgba(99,102,241,0.12); text-align: right; }
</style>
"""

# ── Helpers ──────────────────────────────────────────────────────────────


@st.cache_resource
def _store() -> Store:
    return open_store(load_settings())


@st.cache_resource
def _aggregator() -> Aggregator:
    store = _store()
    return Aggregator.from_store(store, get_sources(store.settings, get_env))


def _env_path() -> Path:
    env_path = ROOT / ".env"
    if not env_path.exists():
        template = ROOT / ".env.example"
        env_path.write_text(template.read_text(encoding="utf-8") if template.exists() else "", encoding="utf-8")
    return env_path


def _load_env() -> dict[str, str]:
    return {k: v or "" for k, v in dotenv_values(ROOT / ".env").items()}


def _save_env(values: dict[str, str]) -> None:
    env_path = _env_path()
    for key, value in values.items():
        set_key(env_path, key, value, quote_mode="never")


def _user() -> Profile | None:
    return st.session_state.get("profile")


def _report(result: WriteResult, done: str) -> None:
    if result.synced:
        st.success(done)
    else:
        st.warning(f"{done} Saved locally only; the store is unreachable right now.")


def _check(label: str, ok: bool) -> str:
    icon = "✅" if ok else "⬜"
    return f"{icon}  {label}"


def _job_card(job: Job) -> None:
    with st.container(border=True):
        c1, c2 = st.columns([1, 6])
        with c1:
            if job.logo:
                st.image(job.logo, width=56)
        with c2:
            st.markdown(f"**{job.title}** · {job.company}")
            st.caption(f"{job.location} · {job.type} · {job.salary} · {job.category} · {job.posted_at}")
            if job.is_external:
                st.caption(f"via {job.external_source}")
        with st.expander("Details"):
            st.write(job.description)
            if job.document_url:
                st.markdown(f"[Job document]({job.document_url})")
            if job.is_external and job.external_url:
                st.link_button("Apply on provider site", job.external_url)


# ── Page: Find Jobs ──────────────────────────────────────────────────────


def page_jobs() -> None:
    st.header("Find your next challenge")

    c1, c2 = st.columns([3, 1])
    with c1:
        search = st.text_input("Search by role or company", value=st.session_state.get("search", ""))
    with c2:
        category = st.selectbox("Category", CATEGORIES)

    if st.button("Search", type="primary", use_container_width=True) or "jobs" not in st.session_state:
        with st.spinner("Fetching jobs from the board and external sources…"):
            st.session_state["jobs"] = _aggregator().get_jobs_for_display(search, category)
            st.session_state["search"] = search

    jobs: list[Job] = filter_jobs(st.session_state.get("jobs", []), search)
    st.caption(f"{len(jobs)} job(s)")

    user = _user()
    applied = apps_svc.applied_job_ids(_store(), user.uid) if user and user.role == Role.CANDIDATE else set()

    for i, job in enumerate(jobs):
        _job_card(job)
        if not user or user.role != Role.CANDIDATE:
            continue
        if job.id in applied:
            st.caption("✅ Applied")
            continue
        with st.form(f"apply_{i}_{job.id}"):
            resume_url = "" if job.is_external else st.text_input("Resume URL")
            if st.form_submit_button("Apply"):
                try:
                    _, result = apps_svc.apply(_store(), user, job, resume_url or None)
                    _report(result, "Application submitted!")
                except ValidationError as exc:
                    st.error(str(exc))


# ── Page: Recruiter dashboard ────────────────────────────────────────────


def page_dashboard() -> None:
    user = _user()
    if not user:
        st.warning("Sign in from the sidebar first.")
        return

    store = _store()
    st.header(f"Welcome, {user.name}")

    if user.role == Role.CANDIDATE:
        st.subheader("My applications")
        mine = apps_svc.applications_for_candidate(store, user.uid)
        if not mine:
            st.info("No applications yet.")
        for a in mine:
            st.markdown(f"- `{a.job_id}` — _{a.status.value}_")
        return

    with st.expander("Post a new job", expanded=False):
        with st.form("post_job"):
            title = st.text_input("Title *")
            company = st.text_input("Company *")
            location = st.text_input("Location")
            c1, c2, c3 = st.columns(3)
            with c1:
                job_type = st.selectbox("Type", [t.value for t in JobType])
            with c2:
                salary = st.text_input("Salary")
            with c3:
                category = st.selectbox("Category", ["", *CATEGORIES[1:]])
            description = st.text_area("Description *")
            document_url = st.text_input("Job document URL")
            if st.form_submit_button("Publish", type="primary"):
                try:
                    _, result = post_job(
                        store, user, title=title, company=company, description=description,
                        location=location, type=job_type, salary=salary, category=category,
                        document_url=document_url or None,
                    )
                    _report(result, "Job published.")
                except ValidationError as exc:
                    st.error(str(exc))

    my_jobs = jobs_for_employer(store, user.uid)
    received = apps_svc.applications_for_employer(store, user.uid)

    c1, c2 = st.columns(2)
    c1.metric("Active jobs", len(my_jobs))
    c2.metric("Applications", len(received))

    st.subheader("Your jobs")
    for job in my_jobs:
        c1, c2 = st.columns([5, 1])
        c1.markdown(f"**{job.title}** · {apps_svc.applicant_count(received, job.id)} applicant(s)")
        if c2.button("Delete", key=f"del_{job.id}"):
            _report(delete_job(store, job.id), "Job deleted.")
            st.rerun()

    st.subheader("Applications")
    statuses = [s.value for s in ApplicationStatus]
    for a in received:
        with st.container(border=True):
            st.markdown(f"**{a.candidate_name}** ({a.candidate_email}) → `{a.job_id}`")
            if a.resume_url:
                st.markdown(f"[Resume]({a.resume_url})")
            new_status = st.selectbox(
                "Status", statuses, index=statuses.index(a.status.value), key=f"status_{a.id}"
            )
            if new_status != a.status.value:
                _report(apps_svc.update_status(store, a.id, new_status), "Status updated.")


# ── Page: Chat ───────────────────────────────────────────────────────────


def page_chat() -> None:
    user = _user()
    if not user:
        st.warning("Sign in from the sidebar first.")
        return

    store = _store()
    st.header("Interview Chat")
    if user.role == Role.RECRUITER:
        threads = apps_svc.applications_for_employer(store, user.uid)
    else:
        threads = apps_svc.applications_for_candidate(store, user.uid)
    if not threads:
        st.info("No conversations yet.")
        return

    app = st.selectbox(
        "Application", threads,
        format_func=lambda a: f"{a.candidate_name} · {a.job_id}",
    )
    messages = apps_svc.get_messages(store, app.id)
    for m in messages:
        mine = " mine" if m.sender_id == user.uid else ""
        st.markdown(f'<div class="chat-bubble{mine}">{html.escape(m.text)}</div>', unsafe_allow_html=True)
        if m.is_video_call_request:
            st.caption(f"Video call: {m.video_call_status.value if m.video_call_status else 'pending'}")
            if m.video_call_status == VideoCallStatus.ACCEPTED and m.video_call_url:
                st.link_button("Join call", m.video_call_url)
            if m.video_call_status == VideoCallStatus.PENDING and user.role == Role.CANDIDATE:
                c1, c2 = st.columns(2)
                if c1.button("Accept", key=f"acc_{m.id}"):
                    apps_svc.set_video_call_status(store, app.id, m.id, VideoCallStatus.ACCEPTED)
                    st.rerun()
                if c2.button("Decline", key=f"rej_{m.id}"):
                    apps_svc.set_video_call_status(store, app.id, m.id, VideoCallStatus.REJECTED)
                    st.rerun()

    if user.role == Role.RECRUITER and st.button("Request video interview"):
        apps_svc.request_video_call(store, app.id, user.uid)
        st.rerun()

    text = st.chat_input("Type a message…")
    if text:
        try:
            apps_svc.send_message(store, app.id, user.uid, text)
            st.rerun()
        except ValidationError as exc:
            st.error(str(exc))


# ── Page: AI Assistant ───────────────────────────────────────────────────


def page_ai() -> None:
    st.header("Hirely AI")
    tab_chat, tab_interview, tab_hunt = st.tabs(["Chatbot", "Mock Interview", "Headhunter"])

    with tab_chat:
        q = st.text_input("Ask anything about the portal")
        if st.button("Send", key="chat_send") and q:
            try:
                st.info(assistant.chat_reply(q))
            except Exception as exc:
                st.error(f"Failed to process chat message: {exc}")

    with tab_interview:
        mode = st.selectbox("Interview mode", list(assistant.INTERVIEW_MODES))
        history: list[dict] = st.session_state.setdefault("interview_history", [])
        for turn in history:
            who = "Interviewer" if turn["role"] == "ai" else "You"
            st.markdown(f"**{who}:** {turn['text']}")
        answer = st.text_area("Your answer", key="interview_answer")
        c1, c2 = st.columns(2)
        if c1.button("Reply", type="primary") and answer:
            try:
                reply = assistant.interview_reply(answer, mode, history)
                history.extend([{"role": "user", "text": answer}, {"role": "ai", "text": reply}])
                st.rerun()
            except Exception as exc:
                st.error(f"Failed to process voice chat: {exc}")
        if c2.button("Restart interview"):
            st.session_state["interview_history"] = []
            st.rerun()

    with tab_hunt:
        user = _user()
        if not user or user.role != Role.RECRUITER:
            st.info("The headhunter is available to recruiters.")
        else:
            brief = st.text_area("Who are you looking for?")
            if st.button("Find candidates", type="primary") and brief:
                with st.spinner("Sourcing…"):
                    try:
                        matches = assistant.find_candidates(brief, candidates(_store()))
                    except Exception as exc:
                        st.error(f"AI sourcing failed: {exc}")
                        matches = []
                if not matches:
                    st.info("No matching candidates.")
                for m in matches:
                    with st.expander(f"{m.get('name', m['uid'])} — {m.get('matchReason', '')}"):
                        st.text(m.get("draftEmail", ""))


# ── Page: Settings ───────────────────────────────────────────────────────


def page_settings() -> None:
    st.header("Settings")
    env = _load_env()

    with st.form("all_creds"):
        st.subheader("AI")
        groq = st.text_input("Groq API Key", value=env.get("GROQ_API_KEY", ""), type="password")

        st.subheader("Job Search Sources")
        c1, c2 = st.columns(2)
        with c1:
            serp = st.text_input(
                "SerpAPI Key (Google Jobs)",
                value=env.get("SERPAPI_KEY", ""), type="password",
                help="https://serpapi.com — 100 free searches/month",
            )
            adzuna_id = st.text_input(
                "Adzuna App ID",
                value=env.get("ADZUNA_APP_ID", ""),
                help="https://developer.adzuna.com — 250 free requests/day",
            )
        with c2:
            store_url = st.text_input("Store API URL", value=env.get("HIRELY_STORE_URL", ""))
            adzuna_key = st.text_input(
                "Adzuna App Key",
                value=env.get("ADZUNA_APP_KEY", ""), type="password",
            )

        if st.form_submit_button("Save All", type="primary", use_container_width=True):
            env.update({
                "GROQ_API_KEY": groq, "SERPAPI_KEY": serp,
                "ADZUNA_APP_ID": adzuna_id, "ADZUNA_APP_KEY": adzuna_key,
                "HIRELY_STORE_URL": store_url,
            })
            _save_env(env)
            st.success("Saved. Restart the app to pick up new keys.")

    st.subheader("Local cache")
    st.caption("Records written while the store was unreachable live only here.")
    if st.button("Clear local cache"):
        _store().cache.clear()
        st.session_state.pop("jobs", None)
        st.success("Local cache cleared.")


# ── Main ─────────────────────────────────────────────────────────────────


def _inject_css() -> None:
    st.markdown(_GLASS_CSS, unsafe_allow_html=True)


def _sidebar() -> None:
    with st.sidebar:
        user = _user()
        if user:
            st.markdown(f"Signed in as **{user.name}** ({user.role.value})")
            if st.button("Sign out", use_container_width=True):
                st.session_state.pop("profile", None)
                st.rerun()
        else:
            with st.form("sign_in"):
                uid = st.text_input("User id")
                email = st.text_input("Email")
                name = st.text_input("Name")
                role = st.radio("I am a", [r.value for r in Role], horizontal=True)
                if st.form_submit_button("Sign in", use_container_width=True):
                    try:
                        st.session_state["profile"] = ensure_profile(_store(), uid, email, name, role)
                        st.rerun()
                    except ValidationError as exc:
                        st.error(str(exc))

        st.divider()
        st.markdown("**Status**")
        st.markdown(_check("Groq API key", assistant.configured()))
        st.markdown(_check("SerpAPI key", bool(get_env("SERPAPI_KEY"))))
        st.markdown(_check("Adzuna keys", bool(get_env("ADZUNA_APP_ID") and get_env("ADZUNA_APP_KEY"))))


def _wrap(page):
    def run() -> None:
        _inject_css()
        _sidebar()
        page()

    run.__name__ = page.__name__
    return run


pages = [
    st.Page(_wrap(page_jobs), title="Find Jobs", icon="🔎", url_path="jobs", default=True),
    st.Page(_wrap(page_dashboard), title="Dashboard", icon="🚀", url_path="dashboard"),
    st.Page(_wrap(page_chat), title="Chat", icon="💬", url_path="chat"),
    st.Page(_wrap(page_ai), title="Hirely AI", icon="🤖", url_path="ai"),
    st.Page(_wrap(page_settings), title="Settings", icon="⚙️", url_path="settings"),
]

nav = st.navigation(pages)
nav.run()
