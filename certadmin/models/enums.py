import enum

class Origin(str, enum.Enum):
    HISTORICAL = "historico"
    NEW = "nuevo"

class ContactSource(str, enum.Enum):
    NONE = "ninguno"
    ENROLLMENT = "inscripcion"
    IN_PERSON_WITHDRAWAL = "retiro_presencial"

class DeliveryStatus(str, enum.Enum):
    FILED = "en_archivo"
    READY_FOR_DELIVERY = "listo_para_entrega"
    DELIVERED = "entregado"
    SENT_DIGITALLY = "digital_enviado"
    VOIDED = "anulado" # Terminal

class CourseType(str, enum.Enum):
    COURSE = "Curso"
    DIPLOMA_PROGRAM = "Diplomado"
    WEBINAR = "Webinar"
    WORKSHOP = "Taller"
    SEMINAR = "Seminario"

class CourseStatus(str, enum.Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"

class UserRole(str, enum.Enum):
    VIEWER = "VIEWER"
    EDITOR = "EDITOR"
    ADMIN = "ADMIN"
    MASTER_ADMIN = "MASTER_ADMIN"

class ToastType(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


# Statuses for which delivery metadata (date, recipient) is meaningful.
DELIVERED_STATUSES = frozenset({DeliveryStatus.DELIVERED, DeliveryStatus.SENT_DIGITALLY})

ROLE_HIERARCHY = {
    UserRole.VIEWER: 1,
    UserRole.EDITOR: 2,
    UserRole.ADMIN: 3,
    UserRole.MASTER_ADMIN: 4,
}
