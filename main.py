"""
main.py
-------
Entry point for the job portal Telegram bot.

Responsibilities:
    - Build the task runner and the job service on top of the database context.
    - Configure and start the Telegram bot with all handlers.
    - Stop the task runner on shutdown.
"""

from telegram import BotCommand
from telegram.ext import Application, CommandHandler

from config import EMPLOYER_EMAIL, EMPLOYER_NAME, TELEGRAM_BOT_TOKEN
from db.connection import ConnectionProvider
from db.context import get_default_context
from handlers.job_handler import jobs_command, post_command, search_command
from handlers.start_handler import help_command, start_command
from models.user import Employer
from repositories.job_repo import JobRepository
from services.job_service import JobService
from services.task_runner import TaskRunner
from utils.logger import get_logger

logger = get_logger(__name__)


async def on_startup(application: Application) -> None:
    """Register the commands menu and create the schema in the background."""
    commands = [
        BotCommand("start", "🚀 Start the bot"),
        BotCommand("help", "📖 Show help"),
        BotCommand("post", "➕ Post a job"),
        BotCommand("jobs", "📋 List all jobs"),
        BotCommand("search", "🔎 Search jobs by title"),
    ]
    await application.bot.set_my_commands(commands)
    logger.info("Bot commands menu registered successfully.")

    result = await application.bot_data["job_service"].submit_warmup()
    if not result.ok:
        # Not fatal: the next request retries the setup from scratch.
        logger.error(f"Database warm-up failed: {result.error}")


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Data access and background tasks ───────────────
    provider = ConnectionProvider(get_default_context())
    runner = TaskRunner()
    job_service = JobService(runner, JobRepository(provider))

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = Application.builder().token(TELEGRAM_BOT_TOKEN).post_init(on_startup).build()
    app.bot_data["job_service"] = job_service
    app.bot_data["employer"] = Employer(name=EMPLOYER_NAME, email=EMPLOYER_EMAIL)

    # ── 3. Register command handlers ──────────────────────
    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("post", post_command))
    app.add_handler(CommandHandler("jobs", jobs_command))
    app.add_handler(CommandHandler("search", search_command))

    # ── 4. Start polling ──────────────────────────────────
    logger.info("🚀 Job portal is running! Press Ctrl+C to stop.")
    try:
        app.run_polling(drop_pending_updates=True, allowed_updates=["message"])
    finally:
        # ── 5. Cleanup on shutdown ────────────────────────
        runner.shutdown(wait=True)
        logger.info("Job portal stopped.")


if __name__ == "__main__":
    main()
