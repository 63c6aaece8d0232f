import pytest

from app.exceptions import ValidationError
from app.reports.lifecycle import ReportStatus, check_transition, current_status, parse_status

P, T, C = ReportStatus.PENDIENTE, ReportStatus.TRATAMIENTO, ReportStatus.CONCLUIDO


@pytest.mark.parametrize("current,target", [(P, T), (P, C), (T, C)])
def test_allowed_transitions(current, target):
    assert check_transition(current, target) is True


@pytest.mark.parametrize("status", [P, T, C])
def test_same_status_is_noop(status):
    assert check_transition(status, status) is False


@pytest.mark.parametrize("current,target", [(T, P), (C, P), (C, T)])
def test_forbidden_transitions(current, target):
    """
    GIVEN una transición hacia atrás o desde el estado terminal
    WHEN se valida
    THEN se lanza ValidationError
    """
    with pytest.raises(ValidationError) as exc:
        check_transition(current, target)
    assert "Transición de estado inválida" in exc.value.message


def test_parse_status_rejects_unknown_values():
    with pytest.raises(ValidationError) as exc:
        parse_status("cerrado")
    assert "status" in exc.value.details
    with pytest.raises(ValidationError):
        parse_status(None)


def test_current_status_defaults_to_pendiente():
    assert current_status({}) == P
    assert current_status({"status": "tratamiento"}) == T
