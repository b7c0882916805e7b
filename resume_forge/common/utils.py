"""
Utility functions for resume files, prompt templating and folder paths.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Union


def read_file_content(file_path: Union[str, Path]) -> str:
    """
    Read a UTF-8 text file (resume text, job description, prompt template).

    Raises:
        FileNotFoundError: If the file does not exist.
        IOError: If the file cannot be read.
    """
    path = Path(file_path)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise FileNotFoundError(f"File not found: {path}") from e
    except Exception as e:
        raise IOError(f"Error reading file {path}: {e}") from e


def write_file_content(file_path: Union[str, Path], content: str) -> None:
    """
    Write ``content`` to ``file_path``, creating missing parent directories.

    Raises:
        IOError: If the file cannot be written.
    """
    path = Path(file_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except Exception as e:
        raise IOError(f"Error writing to file {path}: {e}") from e


def read_json_file(file_path: Union[str, Path]) -> Any:
    """
    Load a JSON document such as a stored resume profile.

    Raises:
        ValueError: If the file is not valid JSON.
    """
    content = read_file_content(file_path)
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_path}: {e}") from e


def write_json_file(file_path: Union[str, Path], data: Any) -> None:
    write_file_content(file_path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")


def replace_prompt_placeholders(prompt_template: str, **kwargs: str) -> str:
    """
    Fill ``{{NAME}}`` placeholders in a prompt template.

    ``{{CURRENT_DATE}}`` is always available so the model can reason about
    "present" positions and date ranges.

    Example:
        >>> template = "Today is {{CURRENT_DATE}}. Tailor for {{JOB_TITLE}}."
        >>> replace_prompt_placeholders(template, JOB_TITLE="Backend Engineer")
        "Today is December 15, 2024. Tailor for Backend Engineer."
    """
    values = {"CURRENT_DATE": datetime.now().strftime("%B %d, %Y"), **kwargs}
    result = prompt_template
    for key, value in values.items():
        result = result.replace(f"{{{{{key}}}}}", value)
    return result


def normalize_folder_path(folder_path: str | None) -> str | None:
    """
    Normalize a folder path to the one-level ``/<name>`` convention.

    Empty, missing or root-only inputs map to ``None`` (the root folder). Deeper
    inputs keep only their first segment.

    Example:
        >>> normalize_folder_path("applications/2024/q1")
        "/applications"
    """
    if folder_path is None:
        return None
    segments = [segment.strip() for segment in folder_path.split("/") if segment.strip()]
    if not segments:
        return None
    return f"/{segments[0]}"
