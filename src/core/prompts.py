"""Load and fill rewriter prompts from prompts/search/ (substitution, validation)."""

from pathlib import Path

from src.core.config import Config

_PROMPT_CACHE: dict[tuple[Path, str], str] = {}


def _prompts_dir(prompts_dir: Path | None = None) -> Path:
    return prompts_dir or Config.load().prompts_dir


def load_search_prompt(name: str, prompts_dir: Path | None = None) -> str:
    base = _prompts_dir(prompts_dir)
    key = (base, name)
    if key in _PROMPT_CACHE:
        return _PROMPT_CACHE[key]
    path = base / "search" / f"{name}.md"
    if not path.exists():
        raise FileNotFoundError(f"Search prompt not found: {path}")
    text = path.read_text().rstrip()
    _PROMPT_CACHE[key] = text
    return text


def render_search_prompt(template: str, **values: object) -> str:
    """Replace {name} placeholders; every given value must have a placeholder."""
    rendered = template
    for name, value in values.items():
        placeholder = "{" + name + "}"
        if placeholder not in rendered:
            raise ValueError(f"Prompt has no placeholder {placeholder}")
        rendered = rendered.replace(placeholder, str(value))
    return rendered
