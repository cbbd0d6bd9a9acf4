from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StoredFile:
    """A file living in the storage folder"""

    file_id: str
    name: str
    mime_type: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> "StoredFile":
        """Build from a storage API resource dict"""
        return cls(
            file_id=data.get("id", ""),
            name=data.get("name", ""),
            mime_type=data.get("mimeType"),
        )
