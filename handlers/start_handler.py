"""
handlers/start_handler.py
--------------------------
Handles /start and /help commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = """
🤖 *Online Job Portal*

*🔧 Available commands:*
/post <title> | <description> - post a job for your company
/jobs - list all jobs, newest first
/search <title> - find a job by part of its title
/help - show this message
"""


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - show welcome message."""
    user = update.effective_user
    logger.info(f"User {user.id} ({user.first_name}) started the bot.")
    await update.message.reply_text(
        f"Hello {user.first_name}! 👋\n"
        f"Post jobs, browse them, or search by title.\n\n"
        f"Type /help to see all commands."
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT, parse_mode="Markdown")
