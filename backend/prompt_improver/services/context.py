"""
Editor context gatherer - renders an editor snapshot as the opaque context blob.
"""
from pathlib import PurePath

from prompt_improver.schemas import Diagnostic, EditorState


def _format_diagnostic(diagnostic: Diagnostic) -> str:
    severity = "Error" if diagnostic.severity.lower() == "error" else "Warning"
    return f"Line {diagnostic.line + 1}: [{severity}] {diagnostic.message}"


def gather_editor_context(editor: EditorState | None) -> str:
    """Empty string when no editor is active."""
    if editor is None:
        return ""

    filename = PurePath(editor.file_name).name
    open_files = ", ".join(
        name for name in (PurePath(f).name for f in editor.open_files)
        if name != filename and not name.startswith("Extension:")
    )
    diagnostics = "\n".join(_format_diagnostic(d) for d in editor.diagnostics)

    return f"""
Context Information:
- Active File: {filename} ({editor.language_id})
- Open Files: {open_files}
- Diagnostics/Errors in Active File:
{diagnostics or "None"}

File Content:
```{editor.language_id}
{editor.content}
```
"""
