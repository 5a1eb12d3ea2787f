"""
Streamlit Web Interface for the Interview Assistant.

Candidates upload a resume, fill in missing contact details and answer
timed questions. The Interviewer tab shows the reviewer dashboard.

Run with: streamlit run ui/streamlit_app.py
"""
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import streamlit as st

from config import MAX_UPLOAD_BYTES, STORAGE_PATH
from agents.evaluator import create_evaluator
from errors import InterviewAssistantError, QuestionGenerationError
from graph import InterviewRunner, Step
from state import CandidateStatus, MessageType, Tab
from storage import LocalStorage
from store import CandidateStore
from ui.reviewer_dashboard import render_dashboard

st.set_page_config(
    page_title="Interview Assistant",
    page_icon="💼",
    layout="wide",
)

AVATARS = {
    MessageType.BOT.value: ("assistant", "👔"),
    MessageType.USER.value: ("user", "👤"),
    MessageType.SYSTEM.value: ("assistant", "⏰"),
}

# Initialize session state
if "store" not in st.session_state:
    st.session_state.store = CandidateStore.load(LocalStorage(STORAGE_PATH))
if "evaluator" not in st.session_state:
    st.session_state.evaluator = create_evaluator()
if "runner" not in st.session_state:
    st.session_state.runner = None
if "welcome_back" not in st.session_state:
    # Offer to continue only for a session left on the interviewee tab
    store = st.session_state.store
    pending = store.incomplete_candidate()
    if pending and store.current_tab == Tab.INTERVIEWEE.value:
        store.select(pending["id"])
        st.session_state.welcome_back = pending["id"]
    else:
        st.session_state.welcome_back = None

store: CandidateStore = st.session_state.store


def reset_interview():
    runner = st.session_state.runner
    if runner is not None:
        runner.reset()
    st.session_state.runner = None
    st.session_state.welcome_back = None


def continue_session(candidate_id: str):
    st.session_state.runner = InterviewRunner(store, st.session_state.evaluator, candidate_id)
    st.session_state.welcome_back = None


def start_new_session():
    store.select(None)
    st.session_state.runner = None
    st.session_state.welcome_back = None


def format_time(seconds: int) -> str:
    minutes, secs = divmod(max(0, seconds or 0), 60)
    return f"{minutes}:{secs:02d}"


def score_color(score: int) -> str:
    if score >= 80:
        return "green"
    if score >= 60:
        return "orange"
    return "red"


def render_chat(runner: InterviewRunner):
    for msg in runner.get_messages():
        role, avatar = AVATARS[msg["type"]]
        with st.chat_message(role, avatar=avatar):
            st.write(msg["content"])


@st.fragment(run_every=1)
def render_timer():
    """Countdown for the open question; reruns the app when a question expires."""
    runner = st.session_state.runner
    if runner is None or runner.step != Step.INTERVIEW:
        return

    candidate = runner.candidate
    question = runner.current_question()
    before = candidate["current_question_index"]

    # Reruns of the whole app also run this fragment, so count real elapsed time
    runner.tick_clock(time.monotonic())
    candidate = runner.candidate
    if candidate["current_question_index"] != before or runner.is_complete():
        st.rerun()

    remaining = candidate["time_remaining"] or 0
    limit = question["time_limit"]
    col1, col2, col3 = st.columns([1, 1, 2])
    with col1:
        st.metric("Question", f"{before + 1} / {len(candidate['questions'])}")
    with col2:
        st.metric("Time Left", format_time(remaining))
    with col3:
        st.caption(f"{question['difficulty']} · {question['category']}")
        st.progress(remaining / limit if limit else 0.0)
    if not runner.timer_active and candidate["status"] == CandidateStatus.PAUSED.value:
        st.info("Interview paused. Resume from the sidebar when you're ready.")


def render_results(runner: InterviewRunner):
    candidate = runner.candidate
    details = candidate["scoring_details"]
    st.success("Interview Complete")

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Overall", f"{details['overall_score']}/100")
    with col2:
        st.metric("Technical", details["technical_score"])
    with col3:
        st.metric("Communication", details["communication_score"])
    with col4:
        st.metric("Problem Solving", details["problem_solving_score"])

    st.markdown(f"**Recommendation:** :{score_color(details['overall_score'])}[{details['recommendation']}]")

    if details["strengths"]:
        st.subheader("✅ Strengths")
        for item in details["strengths"]:
            st.write(f"• {item}")
    if details["improvements"]:
        st.subheader("⚠️ Areas for Improvement")
        for item in details["improvements"]:
            st.write(f"• {item}")

    with st.expander("Conversation", expanded=False):
        render_chat(runner)

    if st.button("Start New Interview", type="primary"):
        st.session_state.runner = None
        store.select(None)
        st.rerun()


def render_upload():
    st.markdown("""
    Upload your resume to begin. We'll pull your contact details from it and
    ask for anything we couldn't find.

    The interview has **6 timed questions**: two easy, two medium and two hard.
    Each answer is submitted when you press Enter or when time runs out.
    """)

    uploaded = st.file_uploader("Resume (PDF or DOCX)", type=["pdf", "docx"])
    if uploaded is not None:
        if uploaded.size > MAX_UPLOAD_BYTES:
            st.error("File is too large. Please upload a file under 10MB.")
            return
        if st.button("Upload Resume", type="primary"):
            runner = InterviewRunner(store, st.session_state.evaluator)
            try:
                with st.spinner("Reading your resume..."):
                    runner.upload_resume(uploaded.getvalue(), uploaded.name)
            except InterviewAssistantError as e:
                st.error(e.message)
                return
            st.session_state.runner = runner
            st.rerun()


def render_interviewee():
    candidate_id = st.session_state.welcome_back
    if candidate_id:
        candidate = store.get(candidate_id)
        st.subheader(f"Welcome back, {candidate['name'] or 'there'}!")
        st.write(
            f"You have an unfinished interview "
            f"({len(candidate['interview_answers'])} of {len(candidate['questions']) or 6} questions answered)."
        )
        col1, col2 = st.columns(2)
        with col1:
            if st.button("Continue previous session", type="primary", use_container_width=True):
                continue_session(candidate_id)
                st.rerun()
        with col2:
            if st.button("Start new interview", use_container_width=True):
                start_new_session()
                st.rerun()
        return

    runner = st.session_state.runner
    if runner is None or runner.candidate_id is None:
        render_upload()
        return

    if runner.is_complete():
        render_results(runner)
        return

    if runner.step == Step.INTERVIEW:
        render_timer()

    render_chat(runner)

    step = runner.step
    if step == Step.INFO_COLLECTION and not runner.candidate["missing_fields"]:
        if runner.last_error:
            st.error(runner.last_error)
        if st.button("Start Interview", type="primary"):
            try:
                with st.spinner("Preparing your questions..."):
                    runner.start_interview()
            except QuestionGenerationError:
                pass  # runner.last_error is shown on the rerun
            st.rerun()
        return

    paused = runner.candidate["status"] == CandidateStatus.PAUSED.value
    placeholder = "Type your answer..." if step == Step.INTERVIEW else "Type here..."
    if prompt := st.chat_input(placeholder, disabled=paused):
        try:
            with st.spinner("Evaluating..." if step == Step.INTERVIEW else "..."):
                runner.submit_message(prompt)
        except InterviewAssistantError as e:
            st.error(e.message)
            return
        st.rerun()


# Sidebar
with st.sidebar:
    st.title("Interview Assistant")

    tabs = [Tab.INTERVIEWEE.value, Tab.INTERVIEWER.value]
    selected_tab = st.radio(
        "View",
        tabs,
        index=tabs.index(store.current_tab),
        format_func=str.title,
        horizontal=True,
    )
    if selected_tab != store.current_tab:
        store.set_tab(Tab(selected_tab))

    runner = st.session_state.runner
    if selected_tab == Tab.INTERVIEWEE.value and runner and runner.candidate_id:
        st.divider()
        candidate = runner.candidate
        st.write(f"**{candidate['name'] or 'New candidate'}**")
        st.caption(candidate["email"] or "")
        st.metric("Status", candidate["status"])

        if runner.step == Step.INTERVIEW:
            if candidate["status"] == CandidateStatus.PAUSED.value:
                if st.button("Resume Interview", type="primary", use_container_width=True):
                    runner.resume_interview()
                    st.rerun()
            elif st.button("Pause Interview", use_container_width=True):
                runner.pause_interview()
                st.rerun()

        evaluator = st.session_state.evaluator
        with st.expander("Usage", expanded=False):
            st.write(f"Evaluator: {evaluator.name}")
            primary = getattr(evaluator, "primary", evaluator)
            if hasattr(primary, "total_tokens"):
                st.metric("Session Tokens", f"{primary.total_tokens:,}")

        st.divider()
        if st.button("Reset Interview", type="secondary", use_container_width=True):
            reset_interview()
            st.rerun()

# Main content
if selected_tab == Tab.INTERVIEWER.value:
    render_dashboard(store)
else:
    st.title("Technical Interview")
    render_interviewee()

st.divider()
st.caption("Interview Assistant | Powered by Claude")
