import logging
from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import BotCommand, Message

from application.services.upload_service import UploadService
from domain.services.storage_gateway import StorageError
from domain.value_objects.conversation_id import ConversationId
from presentation.message_formatters import (
    WELCOME_TEXT,
    format_count_failure,
    format_file_count,
    format_file_list,
    format_list_failure,
    format_upload_result,
)

logger = logging.getLogger(__name__)

BOT_COMMANDS = [
    BotCommand(command="start", description="🎮 Show help"),
    BotCommand(command="upload", description="📤 Start uploading .jar files"),
    BotCommand(command="done", description="✅ Finish uploading session"),
    BotCommand(command="cancel", description="❌ Cancel uploading session"),
    BotCommand(command="list", description="📁 List uploaded mods"),
    BotCommand(command="quantity", description="📊 Number of uploaded mods"),
]


class CommandHandlers:
    """Bot command handlers for the mod uploader"""

    def __init__(self, upload_service: UploadService, allowed_extension: str = ".jar"):
        self.upload_service = upload_service
        self.allowed_extension = allowed_extension

    async def start(self, message: Message) -> None:
        """Handle /start command - show available commands"""
        await message.answer(WELCOME_TEXT)

    async def upload(self, message: Message) -> None:
        """Handle /upload command - open a new upload session"""
        result = await self.upload_service.start_upload(ConversationId.from_int(message.chat.id))
        await message.answer(format_upload_result(result, self.allowed_extension))

    async def done(self, message: Message) -> None:
        """Handle /done command - finish the session with a summary"""
        result = await self.upload_service.finish(ConversationId.from_int(message.chat.id))
        await message.answer(format_upload_result(result, self.allowed_extension))

    async def cancel(self, message: Message) -> None:
        """Handle /cancel command - drop the session"""
        result = await self.upload_service.cancel(ConversationId.from_int(message.chat.id))
        await message.answer(format_upload_result(result, self.allowed_extension))

    async def list_mods(self, message: Message) -> None:
        """Handle /list command - list the storage folder"""
        try:
            files = await self.upload_service.list_files()
        except StorageError as e:
            logger.error(f"[{message.chat.id}] Error listing files: {e}", exc_info=True)
            await message.answer(format_list_failure(e))
            return
        await message.answer(format_file_list(files))

    async def quantity(self, message: Message) -> None:
        """Handle /quantity command - count files in the storage folder"""
        try:
            count = await self.upload_service.count_files()
        except StorageError as e:
            logger.error(f"[{message.chat.id}] Error counting files: {e}", exc_info=True)
            await message.answer(format_count_failure(e))
            return
        await message.answer(format_file_count(count))


def register_handlers(router: Router, handlers: CommandHandlers) -> None:
    """Register command handlers. Must run before message handlers."""
    router.message.register(handlers.start, CommandStart())
    router.message.register(handlers.upload, Command("upload"))
    router.message.register(handlers.done, Command("done"))
    router.message.register(handlers.cancel, Command("cancel"))
    router.message.register(handlers.list_mods, Command("list"))
    router.message.register(handlers.quantity, Command("quantity"))
