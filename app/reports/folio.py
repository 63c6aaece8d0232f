"""
Asignación de folios de reportes.

Formato: ``DESV-<DDMMYY>-<NN|NNN>``

  - DDMMYY es la fecha de negocio del reporte (campo ``fecha``), no la
    fecha de creación del registro.
  - La secuencia se reinicia por fecha de negocio: 01..99 con dos dígitos,
    100..999 con tres. Superar 999 es un error, nunca se recicla un número.

El cálculo solo propone un candidato. La exclusividad la garantiza el
índice único sobre ``reports.folio``; ante una colisión el llamador vuelve
a calcular el candidato con ``retry_on_duplicate``.

Uso:
    from app.reports.folio import next_folio, retry_on_duplicate

    folio = next_folio("2025-01-05", repo)   # DESV-050125-01
"""

import logging
import re
from datetime import date, datetime

from app.exceptions import ConflictError, DuplicateKeyError, FolioOverflowError

logger = logging.getLogger(__name__)

FOLIO_PREFIX = "DESV"
MAX_SEQUENCE = 999
MAX_ALLOCATION_ATTEMPTS = 5

_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_FOLIO_RE = re.compile(rf"^{FOLIO_PREFIX}-(\d{{6}})-(\d{{2,3}})$")

# Formatos aceptados cuando la fecha no viene como YYYY-MM-DD.
_FALLBACK_FORMATS = ("%d/%m/%Y", "%Y/%m/%d", "%d-%m-%Y", "%d.%m.%Y")


def parse_business_date(value):
    """
    Interpreta la fecha de negocio; devuelve ``date`` o None si no es válida.

    ``YYYY-MM-DD`` se interpreta como fecha de calendario local, sin
    conversión de zona horaria. Cualquier otro texto se intenta interpretar
    de forma genérica.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    match = _ISO_DATE_RE.match(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def normalize_business_date(value, today=None):
    """Fecha de negocio como ``date``; si no es válida se usa la fecha actual en lugar de fallar."""
    parsed = parse_business_date(value)
    if parsed is None:
        logger.debug(f"No se pudo interpretar la fecha '{value}', se usa la fecha actual.")
        return today or date.today()
    return parsed


def date_key(value, today=None):
    """Segmento DDMMYY del folio para una fecha de negocio."""
    d = normalize_business_date(value, today=today)
    return f"{d.day:02d}{d.month:02d}{d.year % 100:02d}"


def folio_prefix(key):
    return f"{FOLIO_PREFIX}-{key}-"


def format_folio(key, sequence):
    """Compone el folio; dos dígitos hasta 99, tres a partir de 100."""
    if sequence < 1:
        raise ValueError(f"Secuencia de folio inválida: {sequence}")
    if sequence > MAX_SEQUENCE:
        raise FolioOverflowError(
            f"No se pudo asignar folio: la fecha {key} alcanzó {MAX_SEQUENCE} reportes."
        )
    width = 3 if sequence >= 100 else 2
    return f"{folio_prefix(key)}{sequence:0{width}d}"


def parse_folio(folio):
    """Devuelve ``(DDMMYY, secuencia)`` o None si el texto no es un folio."""
    match = _FOLIO_RE.match(folio or "")
    if not match:
        return None
    return match.group(1), int(match.group(2))


def next_sequence(suffixes):
    return max(suffixes, default=0) + 1


def next_folio(fecha, repo, today=None):
    """Calcula el siguiente folio candidato para la fecha de negocio dada."""
    key = date_key(fecha, today=today)
    suffixes = repo.find_folio_suffixes(folio_prefix(key))
    return format_folio(key, next_sequence(suffixes))


def accept_supplied_folio(folio, fecha, repo, today=None):
    """
    Folio enviado por el cliente, si es aceptable; None en caso contrario.

    Debe tener el formato canónico, corresponder a la fecha de negocio del
    reporte y no saltar por delante del siguiente número de la secuencia.
    """
    parsed = parse_folio(folio)
    if parsed is None:
        return None
    key, sequence = parsed
    if sequence < 1 or key != date_key(fecha, today=today) or format_folio(key, sequence) != folio:
        return None
    if sequence > next_sequence(repo.find_folio_suffixes(folio_prefix(key))):
        return None
    return folio


def retry_on_duplicate(operation, candidate, recompute,
                       field="folio", max_attempts=MAX_ALLOCATION_ATTEMPTS):
    """
    Ejecuta ``operation(candidate)`` reintentando ante colisiones de índice único.

    Solo se recupera la violación sobre ``field``; cualquier otra excepción
    se propaga. Tras ``max_attempts`` intentos fallidos se lanza ConflictError.
    """
    for attempt in range(1, max_attempts + 1):
        try:
            return operation(candidate)
        except DuplicateKeyError as e:
            if e.field != field:
                raise
            logger.warning(
                f"Colisión de {field} '{candidate}' (intento {attempt}/{max_attempts})."
            )
            if attempt < max_attempts:
                candidate = recompute()

    logger.error(f"No se pudo asignar un {field} único tras {max_attempts} intentos.")
    raise ConflictError("No se pudo generar folio único, reintente.")
