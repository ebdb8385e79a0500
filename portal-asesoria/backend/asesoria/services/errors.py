"""
Errores de dominio del flujo de cuestionario.
Los routers los traducen a HTTPException; los mensajes son para el usuario.
"""


class FlowError(Exception):
    """Base de los errores del flujo."""


class QuestionSourceError(FlowError):
    """No se pudieron obtener las preguntas de la categoría."""


class AnswerRequiredError(FlowError):
    """Falta la respuesta (o está vacía) para avanzar."""


class InvalidAnswerError(FlowError):
    """La respuesta no corresponde al tipo u opciones de la pregunta."""


class FlowTransitionError(FlowError):
    """Transición no permitida en el estado actual."""


class SubmissionInProgressError(FlowTransitionError):
    """Ya hay un envío en curso para esta sesión."""


class ScoringError(Exception):
    """El servicio de puntuación falló o respondió algo inválido."""


class SubmissionError(FlowError):
    """El envío falló; las respuestas se conservan y se puede reintentar."""


class CategoryNotFoundError(QuestionSourceError):
    """La categoría pedida no existe en la fuente."""
