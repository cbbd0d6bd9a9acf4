"""
Telegram message formatting utilities.

Turns upload outcomes and folder listings into HTML reply texts.
"""

import html
from datetime import timedelta
from typing import List, Optional

from application.services.upload_service import UploadResult
from domain.entities.stored_file import StoredFile
from domain.services.upload_state_machine import UploadOutcome

SESSION_HINT = "Use /done when you're finished uploading, or /cancel to cancel the session."

WELCOME_TEXT = (
    "Welcome to the Mod Uploader Bot! 🎮\n\n"
    "Commands:\n"
    "/upload - Start uploading .jar files to Google Drive (requires password)\n"
    "/done - Finish uploading session\n"
    "/cancel - Cancel uploading session\n"
    "/list - List all uploaded mods\n"
    "/quantity - Get the number of uploaded mods\n\n"
    "🔒 Authentication required for uploading files."
)


def format_duration(elapsed: Optional[timedelta]) -> str:
    """
    Format a duration rounded to whole seconds, e.g. 45s, 2m3s, 1h0m7s.

    Negative or missing durations render as 0s.
    """
    if elapsed is None:
        return "0s"
    total = max(int(round(elapsed.total_seconds())), 0)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{minutes}m{seconds}s"
    return f"{seconds}s"


def format_upload_result(result: UploadResult, allowed_extension: str = ".jar") -> Optional[str]:
    """
    Reply text for an upload outcome.

    Returns:
        HTML text, or None when the event must not be answered
    """
    outcome = result.outcome
    name = html.escape(result.file_name or "file")
    ext = html.escape(allowed_extension)

    if outcome is UploadOutcome.IGNORED:
        return None
    if outcome is UploadOutcome.PASSWORD_REQUIRED:
        return "🔑 Please enter the upload password to continue:"
    if outcome is UploadOutcome.READY_TO_UPLOAD:
        return (
            "✅ Upload session started!\n\n"
            f"Please send your {ext} files now. I'll upload each one to Google Drive.\n\n"
            f"{SESSION_HINT}"
        )
    if outcome is UploadOutcome.AUTHENTICATED:
        return (
            "✅ Password accepted!\n\n"
            "📤 Upload session started!\n\n"
            f"Please send your {ext} files now. I'll upload each one to Google Drive.\n\n"
            f"{SESSION_HINT}"
        )
    if outcome is UploadOutcome.PASSWORD_REJECTED:
        return "❌ Incorrect password. Upload session cancelled.\n\nUse /upload to try again."
    if outcome is UploadOutcome.STORE_FILE:
        return f"⏳ Uploading {name}... ({result.upload_count} files uploaded so far)"
    if outcome is UploadOutcome.FILE_STORED:
        return (
            f"✅ Successfully uploaded {name} to Google Drive!\n\n"
            f"📊 Total files uploaded: {result.upload_count}\n\n"
            f"Send more {ext} files or use /done to finish."
        )
    if outcome is UploadOutcome.STORAGE_FAILURE:
        error = html.escape(result.error or "unknown error")
        return (
            f"❌ Failed to upload {name}: {error}\n\n"
            "The session is still open, send the file again to retry."
        )
    if outcome is UploadOutcome.INVALID_FILE_TYPE:
        return f"Please send only {ext} files."
    if outcome is UploadOutcome.NOT_AUTHENTICATED:
        return "🔒 Please authenticate first with the password. Use /upload and enter the password."
    if outcome is UploadOutcome.NO_ACTIVE_SESSION:
        return "No active upload session found. Use /upload to start uploading files."
    if outcome is UploadOutcome.COMPLETED:
        return (
            "✅ Upload session completed!\n\n"
            f"📊 Files uploaded: {result.upload_count}\n"
            f"⏱️ Duration: {format_duration(result.elapsed)}\n\n"
            "Thank you for using the Mod Uploader Bot!"
        )
    if outcome is UploadOutcome.CANCELLED:
        return (
            "❌ Upload session cancelled.\n\n"
            f"📊 Files uploaded before cancellation: {result.upload_count}"
        )
    raise ValueError(f"Unhandled upload outcome: {outcome}")


def format_file_list(files: List[StoredFile]) -> str:
    """Numbered listing of the folder"""
    if not files:
        return "No mods uploaded yet."
    lines = ["📁 Uploaded Mods:", ""]
    for i, stored in enumerate(files, start=1):
        lines.append(f"{i}. {html.escape(stored.name)}")
    return "\n".join(lines)


def format_file_count(count: int) -> str:
    return f"📊 Total number of uploaded mods: {count}"


def format_list_failure(error: Exception) -> str:
    return f"Failed to get file list: {html.escape(str(error))}"


def format_count_failure(error: Exception) -> str:
    return f"Failed to get file count: {html.escape(str(error))}"
