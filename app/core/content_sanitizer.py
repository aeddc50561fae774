"""Sanitization of provider output before it is cached or rendered.

Provider text goes through an ordered pipeline of named passes. Each pass is a pure,
idempotent str -> str function so the pipeline can be tested and logged pass by pass.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from app.core.logging import get_logger, log_with_context

logger = get_logger(__name__)

MAIN_FLOW_MARKER = "FLUJO PRINCIPAL DE EVENTOS"
ALTERNATIVE_FLOWS_MARKER = "FLUJOS ALTERNATIVOS"
SECTION_MARKERS = (MAIN_FLOW_MARKER, ALTERNATIVE_FLOWS_MARKER)

# File-name-shaped token (AB123...) followed by a document extension
_FILE_EXTENSION_RE = re.compile(r"([A-Z]{2}\d{3}[^.\s]*)\.(?:json|docx|xml|txt)", re.IGNORECASE)

# Greetings and meta commentary; only the phrase is removed
_FILLER_PHRASES = [
    r"Claro,.*?aquí.*?tienes.*?\.",
    r"Por.*?supuesto.*?\.",
    r"Aquí.*?está.*?\.",
    r"Aquí.*?tienes.*?\.",
    r"Te.*?presento.*?\.",
]
_FILLER_RE = re.compile("|".join(_FILLER_PHRASES), re.IGNORECASE)

# Meta commentary that opens the response; never applied inside markup
_PREAMBLE_TOPICS = [
    r"documento.*?actualizado.*?mejoras",
    r"manteniendo.*?formato.*?HTML",
    r"como.*?lo.*?haría.*?experto",
    r"Se.*?han.*?incorporado.*?mejoras",
    r"estructura.*?profesional",
    r"historial.*?de.*?revisiones",
    r"claridad.*?y.*?consistencia",
    r"corrección.*?de.*?HTML",
    r"prototipos.*?mejorados",
    r"actualizado.*?cambios.*?recientes",
    r"estructurado.*?profesionalmente",
    r"añadido.*?nuevos.*?campos",
    r"tabla.*?control.*?versiones",
    r"reflejar.*?modificaciones",
]
_PREAMBLE_RE = re.compile(
    r"^(?!\s*<)[^\n]*?(?:" + "|".join(_PREAMBLE_TOPICS) + r")[^\n]*?\.",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class _Decoration:
    pattern: re.Pattern
    # Could match a mandatory section; only runs when no marker is present
    guarded: bool = False


_DECORATIONS: tuple[_Decoration, ...] = (
    _Decoration(re.compile(r"^\*\*.*?\*\*.*?\.", re.MULTILINE)),
    _Decoration(re.compile(r"\*\*\*.*?\*\*\*", re.MULTILINE)),
    _Decoration(re.compile(r"^-+$", re.MULTILINE)),
    _Decoration(re.compile(r"###.*?$", re.MULTILINE)),
    _Decoration(re.compile(r"```(?:html|css)?", re.IGNORECASE)),
    _Decoration(re.compile(r"---\s*")),
    _Decoration(re.compile(r"^.*?font-family.*?$", re.MULTILINE)),
    _Decoration(re.compile(r"^.*?line-height.*?$", re.MULTILINE)),
    _Decoration(re.compile(r"^.*?color.*?rgb.*?$", re.MULTILINE), guarded=True),
    _Decoration(re.compile(r"^.*?margin.*?$", re.MULTILINE)),
    _Decoration(re.compile(r"^.*?padding.*?$", re.MULTILINE)),
    _Decoration(re.compile(r"^body.*?\{[\s\S]*?\}", re.IGNORECASE)),
    _Decoration(re.compile(r"^p.*?\{[\s\S]*?\}", re.IGNORECASE)),
    _Decoration(re.compile(r"^h\d.*?\{[\s\S]*?\}", re.IGNORECASE), guarded=True),
    _Decoration(re.compile(r"^\..*?\{[\s\S]*?\}", re.IGNORECASE)),
    _Decoration(re.compile(r"^ol.*?\{[\s\S]*?\}", re.IGNORECASE)),
)

_STRUCTURAL_TAGS = "div|h1|h2|h3|p|ol|ul|table"
_OPEN_TAG_RE = re.compile(rf"<(?:{_STRUCTURAL_TAGS})\b", re.IGNORECASE)
_CLOSE_TAG_RE = re.compile(rf"</(?:{_STRUCTURAL_TAGS})\s*>", re.IGNORECASE)


def present_markers(text: str) -> set[str]:
    """Section markers found in text, case-insensitively."""
    upper = text.upper()
    return {marker for marker in SECTION_MARKERS if marker in upper}


def strip_file_extensions(text: str) -> str:
    """AB123Demo.json -> AB123Demo, for every file-name-shaped token."""
    return _FILE_EXTENSION_RE.sub(r"\1", text)


def remove_conversational_filler(text: str) -> str:
    text = _FILLER_RE.sub("", text)
    return _PREAMBLE_RE.sub("", text)


def remove_decorations(text: str) -> str:
    """Drop markdown and stylesheet debris without ever losing a section marker."""
    markers_before = present_markers(text)
    for decoration in _DECORATIONS:
        if decoration.guarded and markers_before:
            continue
        candidate = decoration.pattern.sub("", text)
        if present_markers(candidate) != markers_before:
            continue
        text = candidate
    return text


def clip_to_markup(text: str) -> str:
    """Keep only the span from the first structural opening tag to the last closing one."""
    opening = _OPEN_TAG_RE.search(text)
    if not opening:
        return text.strip()

    text = text[opening.start():]
    closing = None
    for closing in _CLOSE_TAG_RE.finditer(text):
        pass
    if closing is not None:
        text = text[: closing.end()]
    return text.strip()


@dataclass(frozen=True)
class SanitizerPass:
    """A named step of the sanitization pipeline."""

    name: str
    apply: Callable[[str], str]


SANITIZER_PASSES: tuple[SanitizerPass, ...] = (
    SanitizerPass("strip_file_extensions", strip_file_extensions),
    SanitizerPass("remove_conversational_filler", remove_conversational_filler),
    SanitizerPass("remove_decorations", remove_decorations),
    SanitizerPass("clip_to_markup", clip_to_markup),
)


def sanitize_generated_content(text: str | None) -> str:
    """
    Run every sanitizer pass over provider output.

    Args:
        text: Raw provider output

    Returns:
        Cleaned text; idempotent (sanitizing twice equals sanitizing once)
    """
    if not text:
        return ""

    changed: list[str] = []
    for step in SANITIZER_PASSES:
        result = step.apply(text)
        if result != text:
            changed.append(step.name)
        text = result

    if changed:
        log_with_context(
            logger,
            logging.DEBUG,
            "Sanitized generated content",
            passes=",".join(changed),
            length=len(text),
        )
    return text


def clean_file_name(value: str | None) -> str:
    """Strip a document extension from a single file name value."""
    return strip_file_extensions(value or "").strip()
