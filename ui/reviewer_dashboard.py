"""
Reviewer dashboard for the Interview Assistant.

Lists every candidate with search, status filter and sorting, and shows
the full interview record and scoring for a selected candidate.

Run with: streamlit run ui/reviewer_dashboard.py
(also embedded as the Interviewer tab of ui/streamlit_app.py)
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import streamlit as st

from config import STORAGE_PATH
from dashboard import (
    SORT_OPTIONS,
    STATUS_FILTERS,
    candidate_score,
    export_candidate_report,
    filter_candidates,
    get_stats,
    interview_duration_minutes,
    scoring_details_for,
    sort_candidates,
)
from state import Candidate, CandidateStatus, MessageType
from storage import LocalStorage
from store import CandidateStore

STATUS_BADGES = {
    CandidateStatus.PENDING.value: "⏳ Pending",
    CandidateStatus.IN_PROGRESS.value: "🟢 In Progress",
    CandidateStatus.PAUSED.value: "⏸️ Paused",
    CandidateStatus.COMPLETED.value: "✅ Completed",
}

SORT_LABELS = {
    "date": "Newest first",
    "name": "Name",
    "score": "Highest score",
}


def get_score_color(score: int) -> str:
    """Get color for a 0-100 score."""
    if score >= 80:
        return "green"
    if score >= 60:
        return "orange"
    return "red"


def render_stats(candidates):
    stats = get_stats(candidates)
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Total Candidates", stats["total"])
    with col2:
        st.metric("Completed", stats["completed"])
    with col3:
        st.metric("In Progress", stats["in_progress"])
    with col4:
        st.metric("Pending", stats["pending"])


def render_candidate_row(candidate: Candidate):
    score = candidate_score(candidate)
    col1, col2, col3, col4 = st.columns([3, 3, 2, 1])
    with col1:
        st.write(f"**{candidate['name'] or '(no name)'}**")
        st.caption(candidate["created_at"].strftime("%Y-%m-%d %H:%M"))
    with col2:
        st.write(candidate["email"] or "-")
        st.caption(candidate["phone"] or "")
    with col3:
        st.write(STATUS_BADGES.get(candidate["status"], candidate["status"]))
        if score is not None:
            st.markdown(f":{get_score_color(score)}[**{score}/100**]")
    with col4:
        if st.button("View", key=f"view_{candidate['id']}", use_container_width=True):
            st.session_state.dashboard_candidate_id = candidate["id"]
            st.rerun()


def render_scoring(candidate: Candidate):
    details = scoring_details_for(candidate)
    if details is None:
        st.info("Scores are available once the interview is completed.")
        return

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Overall", f"{details['overall_score']}/100")
    with col2:
        st.metric("Technical", details["technical_score"])
    with col3:
        st.metric("Communication", details["communication_score"])
    with col4:
        st.metric("Problem Solving", details["problem_solving_score"])

    color = get_score_color(details["overall_score"])
    st.markdown(f"**Recommendation:** :{color}[{details['recommendation']}]")

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Strengths")
        for item in details["strengths"] or ["None recorded"]:
            st.write(f"• {item}")
    with col2:
        st.subheader("Areas for Improvement")
        for item in details["improvements"] or ["None recorded"]:
            st.write(f"• {item}")


def render_candidate_details(store: CandidateStore, candidate_id: str):
    candidate = store.get(candidate_id)

    if st.button("← Back to candidates"):
        st.session_state.dashboard_candidate_id = None
        st.rerun()

    st.header(candidate["name"] or "(no name)")
    col1, col2, col3 = st.columns(3)
    with col1:
        st.write(f"**Email:** {candidate['email'] or '-'}")
        st.write(f"**Phone:** {candidate['phone'] or '-'}")
    with col2:
        st.write(f"**Status:** {STATUS_BADGES.get(candidate['status'], candidate['status'])}")
        st.write(f"**Resume:** {candidate['resume_file_name'] or '-'}")
    with col3:
        duration = interview_duration_minutes(candidate)
        if candidate["interview_start_time"]:
            st.write(f"**Started:** {candidate['interview_start_time'].strftime('%Y-%m-%d %H:%M')}")
        if duration is not None:
            st.write(f"**Duration:** {duration} min")

    st.download_button(
        "Export Report (JSON)",
        data=export_candidate_report(candidate),
        file_name=f"candidate-{candidate['id']}.json",
        mime="application/json",
    )

    st.divider()
    render_scoring(candidate)

    answers = candidate["interview_answers"]
    if answers:
        st.divider()
        st.subheader("Answers")
        questions = {q["id"]: q for q in candidate["questions"]}
        for i, answer in enumerate(answers, 1):
            question = questions.get(answer["question_id"], {})
            limit = question.get("time_limit")
            label = f"Q{i} · {question.get('difficulty', '')} · {answer['score']}/100"
            with st.expander(label, expanded=False):
                st.write(f"**Question:** {answer['question']}")
                st.write(f"**Answer:** {answer['answer']}")
                timing = f"{answer['time_used']}s" + (f" of {limit}s" if limit else "")
                st.caption(f"Time used: {timing}")
                st.write(f"**Feedback:** {answer['feedback']}")

    with st.expander("Chat History", expanded=False):
        for msg in candidate["chat_history"]:
            speaker = {
                MessageType.BOT.value: "Interviewer",
                MessageType.USER.value: "Candidate",
                MessageType.SYSTEM.value: "System",
            }[msg["type"]]
            st.markdown(f"**{speaker}** · {msg['timestamp'].strftime('%H:%M:%S')}")
            st.write(msg["content"])

    if candidate["resume_text"]:
        with st.expander("Resume Text", expanded=False):
            st.text(candidate["resume_text"])


def render_dashboard(store: CandidateStore):
    """Candidate list, or the detail view for the selected candidate."""
    if "dashboard_candidate_id" not in st.session_state:
        st.session_state.dashboard_candidate_id = None

    st.title("Interviewer Dashboard")

    candidate_id = st.session_state.dashboard_candidate_id
    if candidate_id and any(c["id"] == candidate_id for c in store.candidates):
        render_candidate_details(store, candidate_id)
        return

    candidates = store.candidates
    render_stats(candidates)
    st.divider()

    col1, col2, col3 = st.columns([3, 2, 2])
    with col1:
        search = st.text_input("Search", placeholder="Name or email")
    with col2:
        status = st.selectbox(
            "Status",
            STATUS_FILTERS,
            format_func=lambda s: "All" if s == "all" else STATUS_BADGES[s],
        )
    with col3:
        sort_by = st.selectbox("Sort by", SORT_OPTIONS, format_func=SORT_LABELS.get)

    shown = sort_candidates(filter_candidates(candidates, search, status), sort_by)
    if not shown:
        st.info("No candidates found." if candidates else "No candidates yet.")
        return

    for candidate in shown:
        render_candidate_row(candidate)


if __name__ == "__main__":
    st.set_page_config(
        page_title="Interviewer Dashboard",
        page_icon="📋",
        layout="wide",
    )
    # Fresh load on every rerun so new interviews show up
    render_dashboard(CandidateStore.load(LocalStorage(STORAGE_PATH)))
