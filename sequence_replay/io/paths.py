"""Path helpers for CLI inputs and rendered/exported artifacts."""

from __future__ import annotations

from pathlib import Path


def resolve_within_base(path: Path, base_dir: Path) -> Path:
    """Resolve *path* and ensure it stays within the trusted *base_dir*.

    Raises :exc:`ValueError` if the resolved path escapes the base directory.
    """
    candidate = path if path.is_absolute() else base_dir / path
    resolved = candidate.resolve()
    base_resolved = base_dir.resolve()
    if resolved != base_resolved and base_resolved not in resolved.parents:
        raise ValueError(f"Path escapes base_dir: {path}")
    return resolved


def read_episode_texts(actions_path: Path, valid_path: Path) -> tuple[str, str]:
    """Read the recorded-actions and valid-placement files as text."""
    return (
        Path(actions_path).read_text(encoding="utf-8"),
        Path(valid_path).read_text(encoding="utf-8"),
    )
