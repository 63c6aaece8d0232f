class BaseAppException(Exception):
    """Clase base para excepciones personalizadas de la aplicación.

    Cada subclase define un ``kind`` estable (legible por máquina) y el
    código HTTP con el que se responde al cliente.
    """
    kind = "internal_error"
    status_code = 500
    default_message = "Error interno."

    def __init__(self, message=None, details=None, original_exception=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details
        self.original_exception = original_exception

    def to_dict(self):
        payload = {"error": self.kind, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(BaseAppException):
    """Datos de entrada inválidos o transición de estado no permitida."""
    kind = "validation_error"
    status_code = 400
    default_message = "Datos inválidos."


class UnauthenticatedError(BaseAppException):
    """Credenciales ausentes o inválidas."""
    kind = "unauthenticated"
    status_code = 401
    default_message = "No autenticado."


class ForbiddenError(BaseAppException):
    """Usuario autenticado sin permiso sobre el recurso."""
    kind = "forbidden"
    status_code = 403
    default_message = "No tienes permiso para realizar esta acción."


class NotFoundError(BaseAppException):
    kind = "not_found"
    status_code = 404
    default_message = "No encontrado."


class ConflictError(BaseAppException):
    """Conflicto de unicidad que no se pudo resolver (folio o nombre de usuario)."""
    kind = "conflict"
    status_code = 409
    default_message = "Conflicto con el estado actual del recurso."


class FolioOverflowError(ConflictError):
    """La secuencia diaria de folios superó su capacidad máxima."""
    default_message = "No se pudo asignar un folio: se agotó la secuencia del día."


class DuplicateKeyError(BaseAppException):
    """Violación de un índice único en la capa de persistencia."""
    kind = "conflict"
    status_code = 409
    default_message = "Valor duplicado."

    def __init__(self, field, message=None, original_exception=None):
        super().__init__(message or f"Valor duplicado para '{field}'.", original_exception=original_exception)
        self.field = field


class DatabaseQueryError(BaseAppException):
    """Excepción para errores ocurridos durante una consulta a la base de datos."""
    kind = "database_error"
    default_message = "Error al ejecutar la consulta en la base de datos."
