from wtforms import FieldList, FormField, StringField
from wtforms.validators import AnyOf, DataRequired, Length, Regexp

from app.forms import FotoForm, JSONForm, strip_text, text_or_empty
from app.models import SEVERIDADES

REQUIRED = "Este campo es obligatorio"


class ReportForm(JSONForm):
    folio = StringField("Folio", filters=[text_or_empty], validators=[Length(max=30)])
    # La fecha no se restringe a YYYY-MM-DD: el folio tolera fechas mal formadas.
    fecha = StringField("Fecha", filters=[strip_text], validators=[DataRequired(message=REQUIRED), Length(max=40)])
    hora = StringField("Hora", filters=[strip_text], validators=[
        DataRequired(message=REQUIRED),
        Regexp(r"^([01]\d|2[0-3]):[0-5]\d$", message="Formato esperado: HH:mm."),
    ])
    tipo = StringField("Tipo", filters=[strip_text], validators=[DataRequired(message=REQUIRED), Length(max=100)])
    severidad = StringField("Severidad", filters=[strip_text], validators=[
        DataRequired(message=REQUIRED),
        AnyOf(SEVERIDADES, message="Severidad inválida."),
    ])
    descripcion = StringField("Descripción", filters=[strip_text], validators=[
        DataRequired(message=REQUIRED),
        Length(min=10, max=5000, message="La descripción debe tener entre 10 y 5000 caracteres."),
    ])
    reportante = StringField("Reportante", filters=[text_or_empty], validators=[Length(max=120)])
    area = StringField("Área", filters=[text_or_empty], validators=[Length(max=120)])
    ubicacion = StringField("Ubicación", filters=[text_or_empty], validators=[Length(max=200)])
    causas = StringField("Causas", filters=[text_or_empty], validators=[Length(max=5000)])
    acciones = StringField("Acciones", filters=[text_or_empty], validators=[Length(max=5000)])
    responsable = StringField("Responsable", filters=[text_or_empty], validators=[Length(max=120)])
    compromiso = StringField("Compromiso", filters=[text_or_empty], validators=[Length(max=200)])
    tags = StringField("Etiquetas", filters=[text_or_empty], validators=[Length(max=500)])
    sapAviso = StringField("Aviso SAP", filters=[text_or_empty], validators=[Length(max=50)])
    fotos = FieldList(FormField(FotoForm), min_entries=0)
