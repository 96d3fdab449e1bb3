from types import MappingProxyType
from typing import Mapping

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES: Mapping[str, str] = MappingProxyType(
    {
        # images
        "jpg": "image/jpeg",
        "jpeg": "image/jpeg",
        "png": "image/png",
        "gif": "image/gif",
        "webp": "image/webp",
        "svg": "image/svg+xml",
        "ico": "image/x-icon",
        "tiff": "image/tiff",
        "tif": "image/tiff",
        "bmp": "image/bmp",
        # documents
        "pdf": "application/pdf",
        "doc": "application/msword",
        "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "xls": "application/vnd.ms-excel",
        "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "ppt": "application/vnd.ms-powerpoint",
        "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        # video
        "mp4": "video/mp4",
        "webm": "video/webm",
        "ogg": "video/ogg",
        "mov": "video/quicktime",
        "avi": "video/x-msvideo",
        "wmv": "video/x-ms-wmv",
        "flv": "video/x-flv",
        "mkv": "video/x-matroska",
        "3gp": "video/3gpp",
        "ts": "video/mp2t",
        "m4v": "video/x-m4v",
        # audio
        "mp3": "audio/mpeg",
        "wav": "audio/wav",
        "aac": "audio/aac",
        "oga": "audio/ogg",
        "m4a": "audio/x-m4a",
        "flac": "audio/flac",
        # web
        "json": "application/json",
        "txt": "text/plain",
        "html": "text/html",
        "css": "text/css",
        "js": "application/javascript",
        "xml": "application/xml",
        "csv": "text/csv",
    }
)


def extension(path: str) -> str:
    """Text after the last dot, lowercased. Empty if the path has no dot."""
    if "." not in path:
        return ""
    return path.rsplit(".", 1)[1].lower()


def content_type_for(path: str) -> str:
    return CONTENT_TYPES.get(extension(path), DEFAULT_CONTENT_TYPE)


def is_seekable(content_type: str) -> bool:
    # only video is served in ranges, everything else goes out whole
    return content_type.startswith("video/")
