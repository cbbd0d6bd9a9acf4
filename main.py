#!/usr/bin/env python3
"""
Mod Uploader Bot - upload .jar mods to Google Drive via Telegram

Users open an upload session with /upload, prove they know the shared
password and send .jar files, which are stored in one Drive folder.
/list and /quantity show what the folder holds.

Architecture:
- Domain: Upload session entity, state machine, gateway interfaces
- Application: Upload orchestration
- Infrastructure: Google Drive gateway, in-memory session store
- Presentation: Telegram bot interface (aiogram)
"""

import asyncio
import logging
import signal
import sys

from aiogram import Bot, Dispatcher, Router
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from shared.config.settings import Settings, settings
from shared.logging.config import setup_logging
from domain.services.auth_policy import AuthPolicy
from domain.services.storage_gateway import GatewayInitError, IStorageGateway
from domain.services.upload_state_machine import UploadStateMachine
from infrastructure.persistence.in_memory_session_store import InMemorySessionStore
from infrastructure.storage.drive_credentials import build_drive_gateway
from application.services.upload_service import UploadService
from presentation.handlers.commands import (
    BOT_COMMANDS,
    CommandHandlers,
    register_handlers as register_cmd_handlers,
)
from presentation.handlers.messages import MessageHandlers, register_handlers as register_msg_handlers
from presentation.middleware.correlation import CorrelationIdMiddleware

logger = logging.getLogger(__name__)


class Application:
    """Main application class"""

    def __init__(self, config: Settings = None, storage: IStorageGateway = None):
        self.config = config or settings
        self.storage = storage
        self.bot: Bot = None
        self.dp: Dispatcher = None
        self.upload_service: UploadService = None
        self._shutdown_event = asyncio.Event()

    async def setup(self):
        """
        Initialize application components.

        Raises:
            GatewayInitError: If Google Drive is unreachable; nothing is
                served in that case
        """
        logger.info("Initializing Mod Uploader Bot...")
        self.config.warn_misconfiguration()

        if self.storage is None:
            logger.info("Connecting to Google Drive...")
            self.storage = await asyncio.to_thread(build_drive_gateway, self.config.drive)
            logger.info("✓ Google Drive connected")

        auth_policy = AuthPolicy(
            password=self.config.upload.password,
            scope=self.config.upload.auth_scope,
        )
        logger.info(f"Upload password scope: {auth_policy.scope.value}")

        self.upload_service = UploadService(
            session_store=InMemorySessionStore(),
            state_machine=UploadStateMachine(
                auth_policy,
                allowed_extension=self.config.upload.allowed_extension,
            ),
            storage=self.storage,
        )

        self.bot = Bot(
            token=self.config.telegram.token,
            default=DefaultBotProperties(parse_mode=ParseMode.HTML)
        )
        self.dp = Dispatcher()
        self.dp.update.outer_middleware(CorrelationIdMiddleware())
        self.dp.include_router(self._build_router())

        await self._register_bot_commands()
        logger.info("Bot initialized successfully")

    def _build_router(self) -> Router:
        """Register all handlers; commands first so they win over plain text"""
        router = Router(name="uploader")
        extension = self.config.upload.allowed_extension
        register_cmd_handlers(router, CommandHandlers(self.upload_service, extension))
        register_msg_handlers(router, MessageHandlers(self.upload_service, extension))
        return router

    async def _register_bot_commands(self):
        """Register bot commands in Telegram menu"""
        try:
            await self.bot.set_my_commands(BOT_COMMANDS)
            logger.info(f"✓ Registered {len(BOT_COMMANDS)} bot commands in Telegram menu")
        except Exception as e:
            logger.warning(f"⚠ Failed to register bot commands: {e}")

    async def start(self):
        """Start the bot"""
        await self.setup()

        logger.info("Starting bot polling...")
        info = await self.bot.get_me()
        logger.info(f"Bot: @{info.username} (ID: {info.id})")

        # Set up signal handlers (Unix only)
        if sys.platform != "win32":
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGTERM, signal.SIGINT):
                loop.add_signal_handler(sig, lambda: asyncio.create_task(self.shutdown()))

        await self.dp.start_polling(
            self.bot,
            handle_signals=sys.platform == "win32"
        )

    async def shutdown(self):
        """Graceful shutdown"""
        if self._shutdown_event.is_set():
            return

        logger.info("Shutting down...")
        self._shutdown_event.set()

        if self.dp:
            try:
                await self.dp.stop_polling()
            except RuntimeError:
                logger.debug("Polling was not running")

        if self.bot:
            await self.bot.session.close()

        if self.upload_service:
            active = self.upload_service.session_store.active_count()
            if active:
                logger.warning(f"Dropping {active} open upload sessions")

        logger.info("Shutdown complete")


async def main() -> int:
    """Main entry point"""
    setup_logging(settings.log_level, settings.log_dir)
    app = Application()

    try:
        await app.start()
    except GatewayInitError as e:
        logger.critical(f"Failed to initialize Google Drive: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1
    finally:
        await app.shutdown()
    return 0


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
