"""Accent correction for Spanish prose inserted into use case documents.

Restores missing accents on a curated word list while leaving identifiers, codes and
technical tokens alone. Each candidate occurrence is checked against a set of exclusion
patterns in a small window around it; any hit skips that occurrence only.
"""

import re
from dataclasses import dataclass

from app.core.logging import get_logger

logger = get_logger(__name__)

# Characters inspected on each side of a candidate
WINDOW_CHARS = 20

# Unaccented form -> accented form
ACCENT_CORRECTIONS: tuple[tuple[str, str], ...] = (
    ("descripcion", "descripción"),
    ("operacion", "operación"),
    ("informacion", "información"),
    ("validacion", "validación"),
    ("autenticacion", "autenticación"),
    ("autorizacion", "autorización"),
    ("transaccion", "transacción"),
    ("configuracion", "configuración"),
    ("administracion", "administración"),
    ("gestion", "gestión"),
    ("creacion", "creación"),
    ("modificacion", "modificación"),
    ("eliminacion", "eliminación"),
    ("integracion", "integración"),
    ("notificacion", "notificación"),
    ("verificacion", "verificación"),
    ("confirmacion", "confirmación"),
    ("cancelacion", "cancelación"),
    ("actualizacion", "actualización"),
    ("revision", "revisión"),
    ("sesion", "sesión"),
    ("ejecucion", "ejecución"),
    ("programacion", "programación"),
    ("planificacion", "planificación"),
    ("automatico", "automático"),
    ("automatica", "automática"),
    ("electronico", "electrónico"),
    ("electronica", "electrónica"),
    ("publico", "público"),
    ("publica", "pública"),
    ("basico", "básico"),
    ("basica", "básica"),
    ("logico", "lógico"),
    ("logica", "lógica"),
    ("tecnico", "técnico"),
    ("tecnica", "técnica"),
    ("practico", "práctico"),
    ("practica", "práctica"),
    ("metodo", "método"),
    ("codigo", "código"),
    ("numero", "número"),
    ("telefono", "teléfono"),
    ("direccion", "dirección"),
    ("ubicacion", "ubicación"),
    ("razon", "razón"),
    ("organizacion", "organización"),
    ("institucion", "institución"),
    ("solucion", "solución"),
    ("funcion", "función"),
    ("opcion", "opción"),
    ("situacion", "situación"),
    ("condicion", "condición"),
    ("posicion", "posición"),
    ("relacion", "relación"),
    ("aplicacion", "aplicación"),
    ("comunicacion", "comunicación"),
    ("presentacion", "presentación"),
    ("documentacion", "documentación"),
    ("deposito", "depósito"),
    ("credito", "crédito"),
    ("debito", "débito"),
    ("comision", "comisión"),
    ("interes", "interés"),
    ("periodo", "período"),
    ("prestamo", "préstamo"),
    ("garantia", "garantía"),
)

_TECH_TERMS = (
    "endpoint|token|timestamp|payload|response|request|callback|webhook|username|"
    "password|login|logout|signup|email|url|uri|http|https|json|xml|html|css|"
    "javascript|sql|api|rest|soap|oauth"
)

# Tokens that must never be rewritten, nor anything right next to them
EXCLUSION_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\b[A-Z]{2,}\b"),  # all-caps codes and acronyms
    re.compile(r"\b[A-Z]{2}\d{3}\b"),  # use case codes (ST003)
    re.compile(r"\b\w+\d+\b"),  # alphanumeric identifiers
    re.compile(r"\b\d+\w*\b"),  # numbers with suffixes
    re.compile(rf"\b({_TECH_TERMS})\b", re.IGNORECASE),
    re.compile(r"\.\w{2,4}\b"),  # file extensions
    re.compile(r"\b\w+[A-Z]\w+\b"),  # camelCase
    re.compile(r"\b\w+_\w+\b"),  # snake_case
    re.compile(r"\b\w+-\w+\b"),  # hyphenated
    re.compile(r"\bid\w*\b", re.IGNORECASE),
    re.compile(r"\b\w*(Id|ID)\b"),
)

_RULES: tuple[tuple[re.Pattern, str], ...] = tuple(
    (re.compile(rf"\b{word}\b", re.IGNORECASE), corrected)
    for word, corrected in ACCENT_CORRECTIONS
)


@dataclass
class Correction:
    """A single replacement that correct_accents would apply."""

    original: str
    corrected: str
    position: int


def preserve_case(original: str, replacement: str) -> str:
    """Apply the capitalization of original to replacement."""
    if original.isupper():
        return replacement.upper()
    if original.islower():
        return replacement.lower()
    if original[:1].isupper():
        return replacement[:1].upper() + replacement[1:].lower()
    return replacement


def _is_excluded(text: str, start: int, end: int) -> bool:
    """Check the window around text[start:end] against the exclusion patterns.

    The candidate itself is masked with neutral lowercase letters so that its own
    casing (e.g. DESCRIPCION) does not count as an all-caps code.
    """
    window_start = max(0, start - WINDOW_CHARS)
    window_end = min(len(text), end + WINDOW_CHARS)
    window = text[window_start:start] + "x" * (end - start) + text[end:window_end]
    return any(pattern.search(window) for pattern in EXCLUSION_PATTERNS)


def _find_corrections(text: str) -> list[Correction]:
    corrections: list[Correction] = []
    for pattern, corrected in _RULES:
        for match in pattern.finditer(text):
            if _is_excluded(text, match.start(), match.end()):
                continue
            corrections.append(
                Correction(
                    original=match.group(0),
                    corrected=preserve_case(match.group(0), corrected),
                    position=match.start(),
                )
            )
    corrections.sort(key=lambda c: c.position)
    return corrections


def correct_accents(text: str | None) -> str:
    """
    Restore missing accents in prose.

    Args:
        text: Free text from a user or a provider

    Returns:
        Text with curated words accented; excluded occurrences untouched
    """
    if not text:
        return ""

    corrections = _find_corrections(text)
    if not corrections:
        return text

    # Apply right to left so earlier positions stay valid
    result = text
    for correction in reversed(corrections):
        end = correction.position + len(correction.original)
        result = result[: correction.position] + correction.corrected + result[end:]

    logger.debug(f"Applied {len(corrections)} accent corrections")
    return result

