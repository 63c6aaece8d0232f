from wtforms import PasswordField, StringField
from wtforms.validators import AnyOf, DataRequired, Length, Regexp

from app.auth.models import ROLES
from app.forms import JSONForm, as_text, strip_text

REQUIRED = "Este campo es obligatorio"

# Vacía, http(s) o data URL
PHOTO_URL_RE = r"^$|^https?://|^data:"


def username_field():
    return StringField("Nombre de Usuario", filters=[strip_text], validators=[
        DataRequired(message=REQUIRED), Length(min=3, max=50),
    ])


def password_field(label="Contraseña"):
    return PasswordField(label, filters=[as_text], validators=[DataRequired(message=REQUIRED), Length(min=6, max=200)])


def full_name_field():
    return StringField("Nombre completo", filters=[strip_text], validators=[
        DataRequired(message=REQUIRED), Length(min=3, max=120),
    ])


def photo_url_field():
    return StringField("Foto", filters=[strip_text], validators=[
        Length(max=1000), Regexp(PHOTO_URL_RE, message="URL de foto inválida"),
    ])


class CredentialsForm(JSONForm):
    username = username_field()
    password = password_field()


class ProfileForm(JSONForm):
    fullName = full_name_field()
    photoUrl = photo_url_field()


class ChangePasswordForm(JSONForm):
    currentPassword = password_field("Contraseña Actual")
    newPassword = password_field("Nueva Contraseña")


class UserCreateForm(JSONForm):
    username = username_field()
    fullName = full_name_field()
    password = password_field()
    role = StringField("Tipo de usuario", filters=[strip_text], default="user", validators=[AnyOf(ROLES, message="Rol inválido.")])


class UserUpdateForm(JSONForm):
    username = username_field()
    fullName = full_name_field()
    photoUrl = photo_url_field()
    role = StringField("Tipo de usuario", filters=[strip_text], validators=[AnyOf(ROLES, message="Rol inválido.")])
    password = password_field()
