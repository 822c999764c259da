from __future__ import annotations

import platform
import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class OutputKind(str, Enum):
    """Output style chosen by the user for a scan."""

    PLAIN_TEXT = "plainText"
    APPLICATION_LETTER = "applicationLetter"
    WORD_DOCUMENT = "wordDocument"

    @classmethod
    def parse(cls, value: Union["OutputKind", str]) -> "OutputKind":
        """Accept enum members, their values or CLI aliases (text, letter, document)."""
        if isinstance(value, cls):
            return value
        key = str(value or "").strip()
        alias = _OUTPUT_KIND_ALIASES.get(key.lower())
        if alias is not None:
            return alias
        try:
            return cls(key)
        except ValueError:
            allowed = ", ".join(sorted(_OUTPUT_KIND_ALIASES))
            raise ValueError(f"Unknown output format: '{value}'. Allowed values: {allowed}.") from None


_OUTPUT_KIND_ALIASES = {
    "text": OutputKind.PLAIN_TEXT,
    "plain": OutputKind.PLAIN_TEXT,
    "letter": OutputKind.APPLICATION_LETTER,
    "application": OutputKind.APPLICATION_LETTER,
    "document": OutputKind.WORD_DOCUMENT,
    "word": OutputKind.WORD_DOCUMENT,
}


class ConversionType(str, Enum):
    CAMERA_TO_PDF = "Camera to PDF"
    GALLERY_TO_PDF = "Gallery to PDF"
    PDF_TO_PDF = "PDF to PDF"
    IMAGE_TO_TEXT = "Image to Text"


_REQUIRED_KEYS = (
    "id", "extractedText", "timestamp", "deviceName",
    "textLength", "conversionType", "outputFormat",
)


@dataclass
class ScanRecord:
    """Metadata persisted for every processed scan."""

    id: str
    extracted_text: str
    timestamp: float
    device_name: str
    text_length: int
    conversion_type: str
    output_format: str
    thumbnail_base64: Optional[str] = None
    image_base64: Optional[str] = None
    image_size: Optional[int] = None

    @classmethod
    def create(
        cls,
        text: str,
        conversion_type: Union[ConversionType, str],
        output_format: Union[OutputKind, str],
        thumbnail_base64: Optional[str] = None,
        image_base64: Optional[str] = None,
    ) -> "ScanRecord":
        return cls(
            id=str(uuid.uuid4()),
            extracted_text=text,
            timestamp=time.time(),
            device_name=platform.node() or "unknown",
            text_length=len(text),
            conversion_type=getattr(conversion_type, "value", conversion_type),
            output_format=getattr(output_format, "value", output_format),
            thumbnail_base64=thumbnail_base64,
            image_base64=image_base64,
            image_size=len(image_base64) if image_base64 is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "extractedText": self.extracted_text,
            "timestamp": self.timestamp,
            "deviceName": self.device_name,
            "textLength": self.text_length,
            "conversionType": self.conversion_type,
            "outputFormat": self.output_format,
        }
        # image fields are only stored when present
        if self.thumbnail_base64 is not None:
            data["thumbnailBase64"] = self.thumbnail_base64
        if self.image_base64 is not None:
            data["imageBase64"] = self.image_base64
        if self.image_size is not None:
            data["imageSize"] = self.image_size
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["ScanRecord"]:
        """Build a record from stored data; None when a required key is missing or mistyped."""
        if not isinstance(data, dict) or any(key not in data for key in _REQUIRED_KEYS):
            return None
        try:
            return cls(
                id=str(data["id"]),
                extracted_text=str(data["extractedText"]),
                timestamp=float(data["timestamp"]),
                device_name=str(data["deviceName"]),
                text_length=int(data["textLength"]),
                conversion_type=str(data["conversionType"]),
                output_format=str(data["outputFormat"]),
                thumbnail_base64=data.get("thumbnailBase64"),
                image_base64=data.get("imageBase64"),
                image_size=data.get("imageSize"),
            )
        except (TypeError, ValueError):
            return None
