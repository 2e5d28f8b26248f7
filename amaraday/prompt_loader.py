"""Markdown prompts for the reflection model, read fresh from amaraday/prompts/.

A task prompt is sent as: the persona section of personality.md, a '---'
rule, then the task file itself.
"""

import logging
import re
from pathlib import Path

from amaraday.config import PROMPT_PERSONA_SECTION

log = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).resolve().parent / "prompts"
PERSONALITY = "personality"

# last good read per prompt, served if the file disappears mid-run
_last_read: dict[str, str] = {}


def _extract_section(text: str, heading: str) -> str:
    """Body under '## <heading>', up to the next '## ' heading."""
    match = re.search(
        rf"^## {re.escape(heading)}\s*\n(.*?)(?=^## |\Z)",
        text,
        re.MULTILINE | re.DOTALL,
    )
    return match.group(1).strip() if match else ""


def get_prompt(name: str) -> str:
    path = PROMPTS_DIR / f"{name}.md"
    try:
        text = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        if name in _last_read:
            log.warning("Prompt %s.md missing, reusing last read", name)
            return _last_read[name]
        log.error("Prompt not found: %s", name)
        return ""
    _last_read[name] = text
    return text


def get_personality(section: str = PROMPT_PERSONA_SECTION) -> str:
    return _extract_section(get_prompt(PERSONALITY), section)


def get_full_prompt(name: str, section: str = PROMPT_PERSONA_SECTION) -> str:
    task = get_prompt(name)
    persona = "" if name == PERSONALITY else get_personality(section)
    return f"{persona}\n\n---\n\n{task}" if persona else task


def list_prompts() -> list[str]:
    return sorted(p.stem for p in PROMPTS_DIR.glob("*.md"))
