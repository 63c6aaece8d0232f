from wtforms import FieldList, FormField, StringField
from wtforms.validators import DataRequired, Length, Regexp

from app.forms import FotoForm, JSONForm, strip_text, text_or_empty


class ShiftSummaryForm(JSONForm):
    fecha = StringField("Fecha", filters=[strip_text], validators=[
        DataRequired(message="Este campo es obligatorio"),
        Regexp(r"^\d{4}-\d{2}-\d{2}$", message="Formato esperado: YYYY-MM-DD."),
    ])
    area = StringField("Área", filters=[strip_text], validators=[
        DataRequired(message="Este campo es obligatorio"),
        Length(min=2, max=120),
    ])
    ubicacion = StringField("Ubicación", filters=[text_or_empty], validators=[Length(max=200)])
    novedades = StringField("Novedades", filters=[strip_text], validators=[
        DataRequired(message="Este campo es obligatorio"),
        Length(min=3, max=10000, message="Describe las novedades (mínimo 3 caracteres)."),
    ])
    fotos = FieldList(FormField(FotoForm), min_entries=0)
