"""Markdown prompt templates grouped by feature (interview, evaluation, insights, ...)."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from prepwise.core.exceptions import ConfigurationError

_PROMPTS_ROOT = Path(__file__).resolve().parent


@lru_cache(maxsize=None)
def load_prompt(group: str, name: str) -> str:
    """Return the stripped text of ``<group>/<name>.md``."""

    filename = name if name.endswith(".md") else f"{name}.md"
    path = _PROMPTS_ROOT / group / filename
    if not path.is_file():  # pragma: no cover - packaging guard
        raise ConfigurationError(f"Prompt template missing: {group}/{filename}")
    return path.read_text(encoding="utf-8").strip()


def render_prompt(group: str, name: str, **values: object) -> str:
    """Fill a template's ``{placeholders}``.

    Literal braces in templates (JSON examples) are written doubled.
    """

    template = load_prompt(group, name)
    try:
        return template.format(**values)
    except KeyError as exc:
        raise ConfigurationError(
            f"Prompt template {group}/{name} expects a value for {exc.args[0]!r}"
        ) from exc


__all__ = ["load_prompt", "render_prompt"]
