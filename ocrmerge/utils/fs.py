import shutil
from pathlib import Path


def clear_directory(directory: Path) -> None:
    """Delete every file and subdirectory inside directory, creating it if missing."""
    directory.mkdir(parents=True, exist_ok=True)
    for entry in directory.iterdir():
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()


def is_empty(directory: Path) -> bool:
    """True if directory is missing or has no entries."""
    if not directory.is_dir():
        return True
    return next(directory.iterdir(), None) is None


def list_files(directory: Path, suffix: str | None = None) -> list[Path]:
    """Regular files in directory sorted by name.

    suffix, when given, filters by file extension ignoring case.
    """
    if not directory.is_dir():
        return []
    files = [entry for entry in directory.iterdir() if entry.is_file()]
    if suffix is not None:
        files = [entry for entry in files if entry.name.lower().endswith(suffix.lower())]
    return sorted(files, key=lambda entry: entry.name)
