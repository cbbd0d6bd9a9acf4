"""Document and plain text message handlers"""

import logging
from aiogram import F, Router
from aiogram.types import Message

from application.services.upload_service import UploadResult, UploadService
from domain.value_objects.conversation_id import ConversationId
from presentation.message_formatters import format_upload_result

logger = logging.getLogger(__name__)


class MessageHandlers:
    """Handles documents (uploads) and text (password input)"""

    def __init__(self, upload_service: UploadService, allowed_extension: str = ".jar"):
        self.upload_service = upload_service
        self.allowed_extension = allowed_extension

    async def handle_document(self, message: Message) -> None:
        """Store a received document if the chat has an authenticated session"""
        document = message.document
        conversation_id = ConversationId.from_int(message.chat.id)

        async def fetch():
            return await message.bot.download(document)

        async def progress(result: UploadResult) -> None:
            await message.answer(format_upload_result(result, self.allowed_extension))

        result = await self.upload_service.submit_document(
            conversation_id,
            document.file_name,
            fetch,
            on_progress=progress,
        )
        await message.answer(format_upload_result(result, self.allowed_extension))

    async def handle_text(self, message: Message) -> None:
        """Password input; any other text is left unanswered"""
        result = await self.upload_service.submit_text(
            ConversationId.from_int(message.chat.id), message.text
        )
        text = format_upload_result(result, self.allowed_extension)
        if text is None:
            return
        await message.answer(text)


def register_handlers(router: Router, handlers: MessageHandlers) -> None:
    """Register message handlers after commands (commands take priority)"""
    router.message.register(handlers.handle_document, F.document)
    router.message.register(handlers.handle_text, F.text)
