"""CSV reports over users x competencies x progress.

Report type and format come from fixed sets and are validated before a query
is built; only the filter value ever reaches the database, as a bound
parameter.
"""
import csv
import io
import logging
import re
from datetime import date, datetime

from sqlalchemy import and_, case, func, join, select, true
from sqlalchemy.ext.asyncio import AsyncSession

from competency_tracker.core.errors import BadRequestError
from competency_tracker.models.competency import Competency
from competency_tracker.models.progress import Progress
from competency_tracker.models.user import User

logger = logging.getLogger(__name__)

# type -> (user column filtered on, label used when the value is missing)
REPORT_TYPES = {
    "individual": (User.email, "User email"),
    "cohort": (User.cohort, "Cohort"),
    "company": (User.company, "Company"),
    "all": (None, None),
}
REPORT_FORMATS = ("detailed", "summary", "competencies")

USER_COLUMNS = [
    ("First Name", "first_name"),
    ("Last Name", "last_name"),
    ("Email", "email"),
    ("Company", "company"),
    ("Cohort", "cohort"),
]

DETAILED_COLUMNS = USER_COLUMNS + [
    ("Category", "category"),
    ("Competency", "text"),
    ("Reference Code", "reference_code"),
    ("What This Means", "what"),
    ("What It Looks Like", "looks_like"),
    ("Why Critical", "critical"),
    ("Rating", "rating"),
    ("Date Validated", "date_validated"),
    ("Mentor", "mentor_name"),
    ("Comments", "comments"),
    ("Self Rating", "self_rating"),
]

SUMMARY_COLUMNS = USER_COLUMNS + [
    ("Completion Summary", "completion_summary"),
    ("Total Competencies", "total_competencies"),
    ("Completed", "completed"),
    ("In Progress", "in_progress"),
    ("Not Started", "not_started"),
    ("Progress %", "progress_percentage"),
]

COMPETENCY_STATUS_COLUMNS = USER_COLUMNS + [
    ("Category", "category"),
    ("Competency", "text"),
    ("Reference Code", "reference_code"),
    ("Status", "status"),
]

USERS_EXPORT_COLUMNS = [
    ("First Name", "first_name"),
    ("Last Name", "last_name"),
    ("Email", "email"),
    ("Company", "company"),
    ("Cohort", "cohort"),
    ("Role", "role"),
    ("Created At", "created_at"),
    ("Total Progress", "total_progress"),
    ("Completed", "completed"),
]

PROGRESS_EXPORT_COLUMNS = [
    ("First Name", "first_name"),
    ("Last Name", "last_name"),
    ("Email", "email"),
    ("Company", "company"),
    ("Category", "category"),
    ("Competency", "text"),
    ("Reference Code", "reference_code"),
    ("Rating", "rating"),
    ("Date Validated", "date_validated"),
    ("Mentor", "mentor_name"),
    ("Comments", "comments"),
    ("Self Rating", "self_rating"),
]

COMPANY_EXPORT_COLUMNS = [
    ("Company", "company"),
    ("First Name", "first_name"),
    ("Last Name", "last_name"),
    ("Email", "email"),
    ("Cohort", "cohort"),
    ("Total Progress", "total_progress"),
    ("Completed", "completed"),
    ("Progress %", "progress_percentage"),
]

USER_ORDER = (User.last_name, User.first_name)


# ---------- shared aggregates ----------

def total_count():
    return func.count(Progress.id).label("total_progress")


def completed_count():
    return func.count(case((Progress.rating.is_not(None), 1))).label("completed")


def in_progress_count():
    return func.count(
        case((and_(Progress.rating.is_(None), Progress.self_rating.is_not(None)), 1))
    ).label("in_progress")


def percentage(completed: int, total: int) -> float:
    return round(completed * 100 / total, 2) if total else 0.0


async def count_competencies(db: AsyncSession) -> int:
    return await db.scalar(select(func.count()).select_from(Competency)) or 0


# ---------- CSV ----------

def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def render_csv(columns: list[tuple[str, str]], rows) -> str:
    """Header row first, every field quoted."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([header for header, _ in columns])
    for row in rows:
        writer.writerow([_cell(row.get(key)) for _, key in columns])
    return buf.getvalue()


def report_filename(report_type: str, value: str | None, report_format: str) -> str:
    label = re.sub(r"[^\w.@-]+", "_", value) if value else "all"
    return f"{report_type}-{label}-{report_format}-report.csv"


# ---------- queries ----------

def _user_competency_grid():
    """Every user paired with every competency, with progress where it exists."""
    return join(User, Competency, true()).outerjoin(
        Progress,
        and_(Progress.apprentice_email == User.email, Progress.competency_id == Competency.id),
    )


def _user_fields():
    return (User.first_name, User.last_name, User.email, User.company, User.cohort)


def _detailed_query():
    return (
        select(
            *_user_fields(),
            Competency.category,
            Competency.text,
            Competency.reference_code,
            Competency.what,
            Competency.looks_like,
            Competency.critical,
            Progress.rating,
            Progress.date_validated,
            Progress.mentor_name,
            Progress.comments,
            Progress.self_rating,
        )
        .select_from(_user_competency_grid())
        .order_by(*USER_ORDER, Competency.category, Competency.id)
    )


def _competency_status_query():
    status = case(
        (Progress.rating.is_not(None), "Completed"),
        (Progress.self_rating.is_not(None), "In Progress"),
        else_="Not Started",
    ).label("status")
    return (
        select(*_user_fields(), Competency.category, Competency.text, Competency.reference_code, status)
        .select_from(_user_competency_grid())
        .order_by(*USER_ORDER, Competency.category, Competency.id)
    )


def _summary_query():
    return (
        select(*_user_fields(), total_count(), completed_count(), in_progress_count())
        .select_from(User)
        .outerjoin(Progress, Progress.apprentice_email == User.email)
        .group_by(User.id)
        .order_by(*USER_ORDER)
    )


def _summary_row(row: dict, total_competencies: int) -> dict:
    completed = row["completed"] or 0
    in_progress = row["in_progress"] or 0
    return {
        **row,
        "completion_summary": f"{completed} out of {total_competencies} competencies completed",
        "total_competencies": total_competencies,
        "completed": completed,
        "in_progress": in_progress,
        "not_started": total_competencies - completed - in_progress,
        "progress_percentage": percentage(completed, total_competencies),
    }


# ---------- reports ----------

def check_report_params(report_type: str | None, value: str | None, report_format: str | None):
    """Validate type, value and format; returns the filter clause (None for all users)."""
    if not report_type or not report_format:
        raise BadRequestError("Type and format are required")
    if report_type not in REPORT_TYPES:
        raise BadRequestError("Invalid report type")
    if report_format not in REPORT_FORMATS:
        raise BadRequestError("Invalid report format")

    column, label = REPORT_TYPES[report_type]
    if column is None:
        return None
    if not value:
        raise BadRequestError(f"{label} is required")
    return column == value


async def build_custom_report(
    db: AsyncSession, report_type: str | None, value: str | None, report_format: str | None
) -> tuple[str, str]:
    """Return (filename, csv_text) for the requested report."""
    clause = check_report_params(report_type, value, report_format)

    if report_format == "summary":
        columns, stmt = SUMMARY_COLUMNS, _summary_query()
    elif report_format == "detailed":
        columns, stmt = DETAILED_COLUMNS, _detailed_query()
    else:
        columns, stmt = COMPETENCY_STATUS_COLUMNS, _competency_status_query()
    if clause is not None:
        stmt = stmt.where(clause)

    result = await db.execute(stmt)
    rows = [dict(row) for row in result.mappings().all()]
    if report_format == "summary":
        total_competencies = await count_competencies(db)
        rows = [_summary_row(row, total_competencies) for row in rows]

    logger.info(
        "Built %s/%s report (%s) with %d rows", report_type, report_format, value or "all", len(rows)
    )
    return report_filename(report_type, value, report_format), render_csv(columns, rows)


async def export_users(db: AsyncSession) -> str:
    result = await db.execute(
        select(*_user_fields(), User.role, User.created_at, total_count(), completed_count())
        .select_from(User)
        .outerjoin(Progress, Progress.apprentice_email == User.email)
        .group_by(User.id)
        .order_by(*USER_ORDER)
    )
    return render_csv(USERS_EXPORT_COLUMNS, [dict(row) for row in result.mappings().all()])


async def export_progress(db: AsyncSession) -> str:
    result = await db.execute(
        select(
            User.first_name,
            User.last_name,
            User.email,
            User.company,
            Competency.category,
            Competency.text,
            Competency.reference_code,
            Progress.rating,
            Progress.date_validated,
            Progress.mentor_name,
            Progress.comments,
            Progress.self_rating,
        )
        .select_from(_user_competency_grid())
        .order_by(*USER_ORDER, Competency.category, Competency.id)
    )
    return render_csv(PROGRESS_EXPORT_COLUMNS, [dict(row) for row in result.mappings().all()])


async def export_by_company(db: AsyncSession) -> str:
    total_competencies = await count_competencies(db)
    result = await db.execute(
        select(*_user_fields(), total_count(), completed_count())
        .select_from(User)
        .outerjoin(Progress, Progress.apprentice_email == User.email)
        .group_by(User.id)
        .order_by(User.company, *USER_ORDER)
    )
    rows = []
    for row in result.mappings().all():
        rows.append({
            **row,
            "company": row["company"] or "N/A",
            "progress_percentage": percentage(row["completed"], total_competencies),
        })
    return render_csv(COMPANY_EXPORT_COLUMNS, rows)
