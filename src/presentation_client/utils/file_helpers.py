"""Shared file utilities for presentation-client.

- get_app_dir: OS-appropriate configuration directory
- require_file_exists: FileNotFoundError with a setup hint
- load_validated_json: JSON file -> validated pydantic model
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TypeVar

import click
from pydantic import BaseModel, ValidationError

from presentation_client.constants import APP_NAME

# Type variable for Pydantic models
T = TypeVar("T", bound=BaseModel)

__all__ = [
    "get_app_dir",
    "load_validated_json",
    "require_file_exists",
]


def get_app_dir() -> Path:
    """Get the OS-appropriate application directory.

    Uses click.get_app_dir() which returns:
    - macOS: ~/Library/Application Support/presentation-client
    - Linux: ~/.config/presentation-client (XDG compliant)
    - Windows: C:\\Users\\<user>\\AppData\\Roaming\\presentation-client

    Returns:
        Path to the application directory.
    """
    return Path(click.get_app_dir(APP_NAME))


def require_file_exists(file_path: Path, file_type: str = "file", init_hint: bool = True) -> None:
    """Raise FileNotFoundError if file_path does not exist.

    Args:
        file_path: Path to check.
        file_type: Description for the error message (e.g. "configuration").
        init_hint: If True, suggest running 'presentation-client init'.

    Raises:
        FileNotFoundError: If the file doesn't exist.
    """
    if file_path.exists():
        return

    hint = f"\nRun '{APP_NAME} init' to create a {file_type} file." if init_hint else ""
    raise FileNotFoundError(f"{file_type.capitalize()} file not found at {file_path}.{hint}")


def load_validated_json(
    file_path: Path,
    model_class: type[T],
    file_type: str = "file",
    recovery_hint: str | None = None,
) -> T:
    """Load a JSON file and validate it against a pydantic model.

    Args:
        file_path: Path to the JSON file.
        model_class: Model class to validate against.
        file_type: Description for error messages (e.g. "config").
        recovery_hint: Optional hint appended to validation errors.

    Returns:
        Validated model instance.

    Raises:
        ValueError: If the file cannot be read, is not JSON, or fails validation.
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_type} file {file_path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Could not read {file_type} file {file_path}: {e}") from e

    try:
        return model_class.model_validate(data)
    except ValidationError as e:
        errors = [f"  - {'.'.join(str(x) for x in error['loc']) or '<root>'}: {error['msg']}" for error in e.errors()]
        message = f"Invalid {file_type} file {file_path}:\n" + "\n".join(errors)
        if recovery_hint:
            message += f"\n{recovery_hint}"
        raise ValueError(message) from e
