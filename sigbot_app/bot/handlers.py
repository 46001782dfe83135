"""
Telegram command handlers.

Handlers are thin: they pull the CommandService out of ``bot_data``, call it
and send back whatever text it returns.
"""

from typing import Optional

import structlog
from telegram import Update
from telegram.error import TelegramError
from telegram.ext import Application, ApplicationBuilder, CommandHandler, ContextTypes

from ..commands import CommandService, normalize_symbol
from ..scheduler import CycleScheduler

logger = structlog.get_logger(__name__)

COMMANDS_KEY = "commands"
SCHEDULER_KEY = "scheduler"


def _service(context: ContextTypes.DEFAULT_TYPE) -> CommandService:
    return context.application.bot_data[COMMANDS_KEY]


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/start - subscribe to automatic signals."""
    user = update.effective_user
    metadata = {
        "display_name": user.first_name if user else None,
        "username": user.username if user else None,
    }
    reply = _service(context).subscribe(str(update.effective_chat.id), metadata)
    await update.message.reply_text(reply)


async def stop(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/stop - unsubscribe."""
    reply = _service(context).unsubscribe(str(update.effective_chat.id))
    await update.message.reply_text(reply)


async def analyze_symbol(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/analyzesymbol SYMBOL - manual analysis, answered to the requester only."""
    if not context.args:
        return await update.message.reply_text("Usage: /analyzesymbol SYMBOL")

    raw_symbol = " ".join(context.args)
    processing = await update.message.reply_text(f"⏳ Analyzing {normalize_symbol(raw_symbol)}...")
    replies = await _service(context).manual_analyze(raw_symbol)

    try:
        await processing.delete()
    except TelegramError as e:
        logger.debug("Could not delete progress message", error=str(e))

    for reply in replies:
        await update.message.reply_text(reply)


async def analyze_all(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/analyzeall - scan the whole universe for the requester."""
    service = _service(context)
    processing = await update.message.reply_text(
        f"⏳ Analyzing {len(service.symbols)} symbols... Please wait (this can take a few minutes)."
    )
    summary = await service.analyze_all()

    try:
        await processing.delete()
    except TelegramError as e:
        logger.debug("Could not delete progress message", error=str(e))

    await update.message.reply_text(summary)


async def users(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/users - list subscribers."""
    await update.message.reply_text(_service(context).list_users())


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.message.reply_text(CommandService.help_text())


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE):
    """Log handler failures and tell the requester in plain text."""
    logger.error("Command handler error", error=str(context.error))
    if isinstance(update, Update) and update.effective_message:
        try:
            await update.effective_message.reply_text(f"❌ Error: {context.error}")
        except TelegramError as e:
            logger.warning("Could not report handler error", error=str(e))


def register_handlers(app: Application) -> None:
    app.add_handler(CommandHandler("start", start))
    app.add_handler(CommandHandler("stop", stop))
    app.add_handler(CommandHandler("analyzesymbol", analyze_symbol, block=False))
    app.add_handler(CommandHandler("analyzeall", analyze_all, block=False))
    app.add_handler(CommandHandler("users", users))
    app.add_handler(CommandHandler("help", help_command))
    app.add_error_handler(on_error)


async def _start_scheduler(app: Application) -> None:
    scheduler: Optional[CycleScheduler] = app.bot_data.get(SCHEDULER_KEY)
    if scheduler is not None:
        scheduler.start()


async def _stop_scheduler(app: Application) -> None:
    scheduler: Optional[CycleScheduler] = app.bot_data.get(SCHEDULER_KEY)
    if scheduler is not None:
        await scheduler.stop()


def build_application(token: str) -> Application:
    """Build the Telegram application; the scheduler starts with polling."""
    app = (
        ApplicationBuilder()
        .token(token)
        .post_init(_start_scheduler)
        .post_shutdown(_stop_scheduler)
        .build()
    )
    register_handlers(app)
    return app
