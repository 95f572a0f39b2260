"""
handlers/job_handler.py
-----------------------
Handles posting, listing and searching jobs.
Delegates all database work to JobService through the task runner.
"""

from typing import Optional

from telegram import Update
from telegram.ext import ContextTypes

from models.job import Job
from services.job_service import JobService
from services.task_runner import TaskRejectedError
from utils.logger import get_logger

logger = get_logger(__name__)

_SEPARATOR = "---------------------\n"


def _parse_post(text: str) -> Optional[tuple[str, str]]:
    """
    Parse the `/post` format:
      <title> | <description>
    Example:
      Backend Engineer | Python and PostgreSQL, remote

    Returns:
        (title, description) or None if either part is missing or blank.
    """
    parts = [p.strip() for p in text.split("|", 1)]
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], parts[1]


def format_job_list(jobs: list[Job]) -> str:
    """Render the full job list as a single message."""
    if not jobs:
        return "No jobs available in the database."
    lines = [f"--- Available Jobs (Total: {len(jobs)}) ---\n\n"]
    for job in jobs:
        lines.append(str(job))
        lines.append(_SEPARATOR)
    return "".join(lines)


def format_search_result(term: str, job: Optional[Job]) -> str:
    """Render the outcome of a title search."""
    if job is None:
        return f"Job with title containing '{term}' not found."
    return f"--- Found Job ---\n{job}{_SEPARATOR}"


async def handle_db_error(update: Update, error: BaseException) -> None:
    """Log a failed task and tell the user what went wrong."""
    if isinstance(error, TaskRejectedError):
        logger.warning(f"Request dropped: {error}")
        await update.message.reply_text("⏳ The server is busy. Please try again in a moment.")
        return
    cause = getattr(error, "cause", None) or error.__cause__
    logger.error(f"Database error: {error} (cause: {cause!r})")
    await update.message.reply_text(f"❌ Database Error: {error}")


def _service(context: ContextTypes.DEFAULT_TYPE) -> JobService:
    return context.bot_data["job_service"]


async def jobs_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /jobs command - show every job, most recent first."""
    try:
        handle = _service(context).submit_list()
    except TaskRejectedError as e:
        await handle_db_error(update, e)
        return

    result = await handle
    if not result.ok:
        await handle_db_error(update, result.error)
        return
    await update.message.reply_text(format_job_list(result.value))


async def post_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /post command - record a new job for the configured employer.
    Usage: /post <title> | <description>
    """
    parsed = _parse_post(" ".join(context.args or []))
    if parsed is None:
        await update.message.reply_text(
            "⚠️ Please fill in both Job Title and Description.\n"
            "Usage: /post <title> | <description>\n"
            "Example: /post Backend Engineer | Python and PostgreSQL, remote"
        )
        return

    title, description = parsed
    employer = context.bot_data["employer"]
    job = employer.new_job(title, description)

    try:
        handle = _service(context).submit_create(job.title, job.description, job.company)
    except TaskRejectedError as e:
        await handle_db_error(update, e)
        return

    result = await handle
    if not result.ok:
        await handle_db_error(update, result.error)
        return

    logger.info(f"{employer.name} posted job #{result.value}")
    await update.message.reply_text(f"✅ Job Posted Successfully! (ID: {result.value})")
    # A list fetched after the insert completed is the authoritative view.
    await jobs_command(update, context)


async def search_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /search command - find a job by part of its title.
    Usage: /search <title>
    """
    term = " ".join(context.args or []).strip()
    if not term:
        await update.message.reply_text("⚠️ Please enter a title to search.\nUsage: /search <title>")
        return

    try:
        handle = _service(context).submit_search(term)
    except TaskRejectedError as e:
        await handle_db_error(update, e)
        return

    result = await handle
    if not result.ok:
        await handle_db_error(update, result.error)
        return
    await update.message.reply_text(format_search_result(term, result.value))
