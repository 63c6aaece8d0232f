"""
Ciclo de vida del estado de un reporte.

    pendiente ──► tratamiento ──► concluido
        └──────────────────────────►┘

``concluido`` es terminal. Pasar al mismo estado es una operación nula.
"""

from enum import Enum

from app.exceptions import ValidationError


class ReportStatus(str, Enum):
    PENDIENTE = "pendiente"
    TRATAMIENTO = "tratamiento"
    CONCLUIDO = "concluido"


INITIAL_STATUS = ReportStatus.PENDIENTE

ALLOWED_TRANSITIONS = frozenset({
    (ReportStatus.PENDIENTE, ReportStatus.TRATAMIENTO),
    (ReportStatus.PENDIENTE, ReportStatus.CONCLUIDO),
    (ReportStatus.TRATAMIENTO, ReportStatus.CONCLUIDO),
})


def parse_status(value):
    """Convierte texto en ReportStatus o lanza ValidationError."""
    try:
        return ReportStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ReportStatus)
        raise ValidationError(
            f"Estado inválido: '{value}'. Valores permitidos: {allowed}.",
            details={"status": [f"Debe ser uno de: {allowed}."]},
        )


def current_status(report):
    """Estado almacenado de un reporte; los documentos sin estado cuentan como pendientes."""
    return parse_status(report.get("status") or INITIAL_STATUS.value)


def check_transition(current, target):
    """
    Valida la transición y devuelve True si implica un cambio real,
    False si es una operación nula (mismo estado).
    """
    current, target = ReportStatus(current), ReportStatus(target)
    if current == target:
        return False
    if (current, target) not in ALLOWED_TRANSITIONS:
        raise ValidationError(
            f"Transición de estado inválida: {current.value} → {target.value}.",
            details={"status": [f"No se puede pasar de '{current.value}' a '{target.value}'."]},
        )
    return True
