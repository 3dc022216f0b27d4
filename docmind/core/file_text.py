"""Text extraction from uploaded files."""

import asyncio
from collections.abc import Sequence
from pathlib import Path

from docmind.core.logging import get_logger
from docmind.core.schemas_assistant import FileBlob

logger = get_logger(__name__)

# Binary document formats we cannot read as text
REJECTED_EXTENSIONS = {".pdf", ".docx", ".doc", ".xlsx", ".xls", ".pptx", ".ppt"}


def _decode_bytes(raw_bytes: bytes) -> tuple[str, str]:
    """
    Attempt to decode bytes using fallback chain.

    Returns:
        Tuple of (decoded_text, encoding_name)

    Raises:
        ValueError: If no encoding works
    """
    if raw_bytes.startswith(b"\xef\xbb\xbf"):
        try:
            return raw_bytes.decode("utf-8-sig"), "utf-8-sig"
        except UnicodeDecodeError:
            pass

    for encoding in ("utf-8", "latin-1"):
        try:
            return raw_bytes.decode(encoding), encoding
        except UnicodeDecodeError:
            continue

    raise ValueError(
        "Unable to decode file content. Supported encodings: UTF-8, UTF-8-BOM, Latin-1."
    )


def read_file_blob(file_path: str) -> FileBlob:
    """
    Read a file from disk into a named text blob.

    Args:
        file_path: Path of the uploaded file

    Returns:
        FileBlob named after the file's base name

    Raises:
        OSError: If the file cannot be read
        ValueError: If the file is a binary document or cannot be decoded
    """
    path = Path(file_path)
    if path.suffix.lower() in REJECTED_EXTENSIONS:
        raise ValueError(f"Unsupported file type: {path.suffix}. Provide extracted text instead.")

    text, encoding = _decode_bytes(path.read_bytes())
    logger.debug(f"Read {path.name} ({len(text)} chars, {encoding})")
    return FileBlob(name=path.name, content=text)


async def read_file_blobs(file_paths: Sequence[str]) -> list[FileBlob]:
    """
    Read several files concurrently.

    Files that fail to read are logged and skipped; the rest keep the order
    of `file_paths`.
    """
    if not file_paths:
        return []

    results = await asyncio.gather(
        *(asyncio.to_thread(read_file_blob, p) for p in file_paths),
        return_exceptions=True,
    )

    blobs: list[FileBlob] = []
    for file_path, result in zip(file_paths, results):
        if isinstance(result, Exception):
            logger.warning(f"Error reading file {file_path}: {result}")
            continue
        if isinstance(result, BaseException):
            raise result
        blobs.append(result)
    return blobs
