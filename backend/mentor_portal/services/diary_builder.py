"""
Project diary builder.

Turns the aggregated data for one team into the seven diary sections as
plain tables of strings. No I/O happens here; rendering is done by
``mentor_portal.services.diary_pdf``.
"""
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Sequence

from mentor_portal.core.config import settings


MEMBER_ROWS = 4
ACTION_PLAN_ROWS = 8
PROGRESS_ROWS = 9
FEEDBACK_ROWS = 9
MARKED_REVIEWS = 3

SIGNATURES = [
    ["Prepared By", "Verified By", "Approved By"],
    ["Project Supervisor", "Project Coordinator", "HoD"],
]


@dataclass
class DiaryLayout:
    """Institution-specific text placed around the sections"""
    header_lines: List[str] = field(default_factory=list)
    doc_ref: str = ""
    date_format: str = "%d/%m/%Y"
    course: str = ""

    @classmethod
    def from_settings(cls) -> "DiaryLayout":
        return cls(
            header_lines=settings.DIARY_HEADER_LINES,
            doc_ref=settings.DIARY_DOC_REF,
            date_format=settings.DIARY_DATE_FORMAT,
        )


@dataclass
class DiaryTable:
    title: str
    columns: List[str]
    rows: List[List[str]]


@dataclass
class DiaryDocument:
    header_lines: List[str]
    doc_ref: str
    department: str
    year_sem_sec: str
    course: str
    project_title: str
    sections: List[DiaryTable]
    signatures: List[List[str]] = field(default_factory=lambda: [list(row) for row in SIGNATURES])


def _pad(rows: List[List[str]], width: int, minimum: int) -> List[List[str]]:
    while len(rows) < minimum:
        rows.append([""] * width)
    return rows


def _fmt(value, date_format: str) -> str:
    return value.strftime(date_format) if value else ""


def internal_mark(marks: Sequence[Optional[int]]) -> str:
    """Mean of the non-zero marks, rounded half-up. Blank when there are none"""
    scored = [m for m in marks if m]
    if not scored:
        return ""
    mean = Decimal(sum(scored)) / Decimal(len(scored))
    return str(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _team_members(students, mentor) -> DiaryTable:
    columns = ["S.NO.", "REG.NO.", "STUDENT NAME", "INTERNAL SUPERVISOR", "EXTERNAL SUPERVISOR (If Applicable)"]
    mentor_name = mentor.name if mentor is not None else ""
    rows = [
        [str(i), student.register_number or "", student.name, mentor_name if i == 1 else "", ""]
        for i, student in enumerate(students, start=1)
    ]
    return DiaryTable("I. Team Members", columns, _pad(rows, len(columns), MEMBER_ROWS))


def _action_plan() -> DiaryTable:
    columns = [
        "S.NO.", "MAJOR ACTIVITIES", "TARGET DATE", "ACTUAL DATE",
        "REASON FOR DELAY (If Any)", "REMARKS", "SIGNATURE OF THE SUPERVISOR",
    ]
    rows = [[str(i)] + [""] * (len(columns) - 1) for i in range(1, ACTION_PLAN_ROWS + 1)]
    return DiaryTable("II. Action Plan", columns, rows)


def _attendance(students, logs, date_format: str, external: bool) -> DiaryTable:
    dates = sorted({log.date for log in logs if log.date})
    columns = ["STUDENT NAME"] + [_fmt(d, date_format) for d in dates]

    present: Dict[str, set] = {}
    for log in logs:
        present.setdefault(log.student_id, set()).add(log.date)

    rows = []
    for student in students:
        marks = [
            "" if external else ("P" if d in present.get(student.student_id, ()) else "")
            for d in dates
        ]
        rows.append([student.name] + marks)
    _pad(rows, len(columns), MEMBER_ROWS)

    if external:
        title = "IV. Attendance by External Supervisor (If Applicable)"
        signature = "SIGNATURE OF THE EXTERNAL SUPERVISOR"
    else:
        title = "III. Attendance by Supervisor"
        signature = "SIGNATURE OF THE SUPERVISOR"
    rows.append([signature] + [""] * len(dates))
    return DiaryTable(title, columns, rows)


def _progress(logs, log_students, date_format: str) -> DiaryTable:
    columns = ["DATE", "DETAILS OF WORK DONE", "SIGNATURE OF SUPERVISOR", "REMARKS"]
    rows = []
    for log in logs:
        student = log_students.get(log.student_id)
        name = student.name if student is not None else "Unknown Student"
        rows.append([
            _fmt(log.date, date_format),
            f"{name}: {log.completed_task or ''}",
            "",
            log.comments or "",
        ])
    return DiaryTable("V. Progress of the work", columns, _pad(rows, len(columns), PROGRESS_ROWS))


def _feedback(reviews, mentor, date_format: str) -> DiaryTable:
    columns = [
        "REVIEW NO.", "REVIEW DATE", "DETAILS OF FEEDBACK RECEIVED", "NAME OF THE REVIEWER",
        "PLAN OF ACTION", "TARGET DATE", "SIGNATURE OF THE SUPERVISOR",
    ]
    reviewer = mentor.name if mentor is not None else ""
    rows = [
        [
            str(i),
            _fmt(review.completed_on or review.created_at, date_format),
            review.result or "",
            reviewer,
            "",
            "",
            "",
        ]
        for i, review in enumerate(reviews, start=1)
    ]
    return DiaryTable("VI. Feedback from Project Review", columns, _pad(rows, len(columns), FEEDBACK_ROWS))


def _marks(students, reviews) -> DiaryTable:
    columns = ["REG.NO.", "NAME OF THE STUDENT", "I", "II", "III", "INTERNAL MARK (100)"]
    marks = [review.marks for review in reviews[:MARKED_REVIEWS]]
    marks += [None] * (MARKED_REVIEWS - len(marks))
    cells = ["" if m is None else str(m) for m in marks]
    total = internal_mark(marks)

    rows = [
        [student.register_number or "", student.name] + cells + [total]
        for student in students
    ]
    return DiaryTable("VII. Review & Internal Mark", columns, _pad(rows, len(columns), MEMBER_ROWS))


def build_diary(data, layout: Optional[DiaryLayout] = None) -> DiaryDocument:
    """
    Build the diary for one team.

    Args:
        data: aggregated diary data (team, students, mentor, logs in date
            order, reviews in creation order, optional project)
        layout: header text and date format; read from settings when omitted

    Returns:
        DiaryDocument with all seven sections, each padded to its minimum
        row count.
    """
    layout = layout or DiaryLayout.from_settings()
    team = data.team
    students = list(data.students)
    logs = list(data.logs)
    reviews = list(data.reviews)

    project_title = ""
    if data.project is not None and data.project.title:
        project_title = data.project.title
    elif team.topic:
        project_title = team.topic

    return DiaryDocument(
        header_lines=list(layout.header_lines),
        doc_ref=layout.doc_ref,
        department=team.department or "",
        year_sem_sec=team.section or "",
        course=layout.course,
        project_title=project_title,
        sections=[
            _team_members(students, data.mentor),
            _action_plan(),
            _attendance(students, logs, layout.date_format, external=False),
            _attendance(students, logs, layout.date_format, external=True),
            _progress(logs, data.log_students, layout.date_format),
            _feedback(reviews, data.mentor, layout.date_format),
            _marks(students, reviews),
        ],
    )
