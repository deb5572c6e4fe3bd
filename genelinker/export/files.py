import re


def sanitize_filename(title: str) -> str:
    return re.sub(r"[^a-z0-9]", "_", title or "", flags=re.I).lower() or "untitled"


def png_filename(title: str) -> str:
    return f"mindmap_{sanitize_filename(title)}.png"


def pdf_filename(title: str) -> str:
    return f"{sanitize_filename(title)}.pdf"


def report_filename(title: str, ext: str) -> str:
    return f"{sanitize_filename(title)}_analysis.{ext}"


def attachment(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}
