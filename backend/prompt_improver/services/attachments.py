"""
Attachment source - read workspace files, folders and images into attachment records.
Everything is read eagerly; the orchestrator only ever sees realized strings.
"""
import base64
import logging
import mimetypes
from pathlib import Path

from prompt_improver.schemas import Attachment, AttachmentKind

logger = logging.getLogger(__name__)

MAX_FILE_CHARS = 50000
MAX_FOLDER_FILE_CHARS = 20000
MAX_FOLDER_FILES = 50
MAX_FOLDER_DEPTH = 3

EXCLUDE_NAMES = {"node_modules", "out", "dist", "build", "target"}


def resolve_workspace_path(workspace_root: Path, relative_path: str) -> Path:
    """Resolve a path inside the workspace; refuse anything that escapes it."""
    root = workspace_root.resolve()
    target = (root / relative_path).resolve()
    if target != root and root not in target.parents:
        raise PermissionError(f"Path is outside the workspace: {relative_path}")
    if not target.exists():
        raise FileNotFoundError(f"Path not found: {relative_path}")
    return target


def _is_text(text: str) -> bool:
    # Simple binary check
    return "\0" not in text[:100]


def read_file_attachment(path: Path) -> Attachment:
    text = path.read_bytes().decode("utf-8", errors="replace")
    return Attachment(name=path.name, kind=AttachmentKind.FILE, content=text[:MAX_FILE_CHARS])


def read_folder_attachment(path: Path) -> Attachment:
    """
    Concatenate text files under a folder, depth-first in name order.
    Raises ValueError when no text files are found.
    """
    root = path.resolve()
    parts: list[str] = []

    def walk(current: Path, depth: int) -> None:
        if depth > MAX_FOLDER_DEPTH or len(parts) >= MAX_FOLDER_FILES:
            return
        try:
            entries = sorted(current.iterdir())
        except OSError as e:
            logger.error(f"Error reading directory {current}: {e}")
            return

        for entry in entries:
            if len(parts) >= MAX_FOLDER_FILES:
                break
            # Skip hidden files and common ignore folders
            if entry.name.startswith(".") or entry.name in EXCLUDE_NAMES:
                continue

            # Links may not lead outside the attached folder
            resolved = entry.resolve()
            if resolved != root and root not in resolved.parents:
                logger.warning(f"Skipping {entry}: resolves outside {root}")
                continue

            if entry.is_file():
                try:
                    text = entry.read_bytes().decode("utf-8", errors="replace")
                except OSError as e:
                    logger.warning(f"Could not read {entry}: {e}")
                    continue
                if _is_text(text):
                    relative = "/" + entry.relative_to(path).as_posix()
                    parts.append(f"\n--- File: {relative} ---\n{text[:MAX_FOLDER_FILE_CHARS]}\n")
            elif entry.is_dir():
                walk(entry, depth + 1)

    walk(path, 1)

    if not parts:
        raise ValueError(f'No matching text files found in "{path.name}".')

    logger.info(f'Attached {len(parts)} files from folder "{path.name}"')
    return Attachment(name=path.name, kind=AttachmentKind.FOLDER, content="".join(parts))


def read_image_attachment(path: Path) -> Attachment:
    mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return Attachment(
        name=path.name,
        kind=AttachmentKind.IMAGE,
        content=f"data:{mime_type};base64,{encoded}"
    )


def load_attachment(workspace_root: Path, relative_path: str, kind: AttachmentKind) -> Attachment:
    """Read a workspace path as the requested attachment kind."""
    path = resolve_workspace_path(workspace_root, relative_path)

    if kind == AttachmentKind.FOLDER:
        if not path.is_dir():
            raise NotADirectoryError(f"Not a directory: {relative_path}")
        return read_folder_attachment(path)

    if not path.is_file():
        raise IsADirectoryError(f"Not a file: {relative_path}")
    if kind == AttachmentKind.IMAGE:
        return read_image_attachment(path)
    return read_file_attachment(path)
