# app/forms.py

from flask_wtf import FlaskForm
from wtforms import Form, StringField
from wtforms.validators import DataRequired, Length, URL

from app.exceptions import ValidationError


def strip_text(value):
    """Normaliza a texto sin espacios laterales; None se conserva."""
    if value is None:
        return None
    return str(value).strip()


def as_text(value):
    return None if value is None else str(value)


def text_or_empty(value):
    return strip_text(value) or ""


class JSONForm(FlaskForm):
    """
    Formulario que se valida contra el cuerpo JSON de la petición.
    La API usa tokens Bearer, así que no aplica protección CSRF.
    """
    class Meta:
        csrf = False

    @classmethod
    def from_payload(cls, payload, partial=False, **kwargs):
        """
        Construye y valida el formulario.

        Con ``partial=True`` solo se validan los campos presentes en el
        cuerpo; el resto se ignora. Devuelve el formulario validado o lanza
        ValidationError con los mensajes por campo.
        """
        if not isinstance(payload, dict):
            raise ValidationError("El cuerpo de la petición debe ser un objeto JSON.")
        form = cls(formdata=None, data=payload, **kwargs)
        form.validate()
        errors = form.errors
        if partial:
            errors = {name: msgs for name, msgs in errors.items() if name in payload}
        if errors:
            raise ValidationError("Datos inválidos.", details=errors)
        return form

    def cleaned_data(self, only=None):
        """Datos validados, opcionalmente limitados a ``only``."""
        return {
            name: field.data
            for name, field in self._fields.items()
            if only is None or name in only
        }


class FotoForm(Form):
    url = StringField("URL", filters=[strip_text], validators=[
        DataRequired(message="La foto requiere una URL."),
        URL(require_tld=False, message="URL de foto inválida."),
    ])
    nota = StringField("Nota", filters=[text_or_empty], validators=[Length(max=500)])


def clean_fotos(fotos):
    """Conserva solo fotos con URL http(s), en el orden recibido."""
    cleaned = []
    for foto in fotos or []:
        url = (foto or {}).get("url")
        if isinstance(url, str) and url.startswith(("http://", "https://")):
            cleaned.append({"url": url, "nota": foto.get("nota") or ""})
    return cleaned


def ensure_list(payload, name):
    """FieldList itera cualquier valor; se exige una lista explícita."""
    if not isinstance(payload, dict):
        return
    value = payload.get(name)
    if value is not None and not isinstance(value, list):
        raise ValidationError("Datos inválidos.", details={name: ["Debe ser una lista."]})
