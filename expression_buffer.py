"""Buffer de expresión propiedad de la interfaz.

La interfaz conserva aquí el texto tecleado y lo entrega por valor al
motor al pulsar '='. El motor nunca recibe ni modifica este objeto.
"""

import logging

from display_format import format_result
from expression_engine import DIGITS, OPERATORS, EvaluationError


logger = logging.getLogger(__name__)

EQUALS = "="
POINT = "."
CLEAR = "C"
BACKSPACE = "⌫"


class ExpressionBuffer:
    """Acumula pulsaciones y delega la evaluación al motor."""

    def __init__(self, engine, text: str = ""):
        self.engine = engine
        self._text = text
        self.last_error: EvaluationError | None = None

    @property
    def text(self) -> str:
        return self._text

    def press(self, label: str) -> str:
        """Aplica una pulsación y devuelve el texto a mostrar.

        Raises:
            EvaluationError: '=' sobre una expresión inválida; el texto
                queda igual que antes de pulsar.
            ValueError: etiqueta de botón desconocida.
        """
        if label == EQUALS:
            self._calculate()
        elif label == POINT:
            # Sin punto en un buffer vacío ni dos puntos seguidos
            if self._text and self._text[-1] != POINT:
                self._text += label
        elif label == CLEAR:
            self._text = ""
            self.last_error = None
        elif label == BACKSPACE:
            self._text = self._text[:-1]
        elif len(label) == 1 and (label in DIGITS or label in OPERATORS):
            self._text += label
        else:
            raise ValueError(f"Botón desconocido: {label!r}")
        return self._text

    def _calculate(self):
        expression = self._text
        try:
            result = self.engine.evaluate(expression)
        except EvaluationError as exc:
            self.last_error = exc
            logger.warning("Error in calculation of %r: %s", expression, exc)
            raise
        self.last_error = None
        self._text = format_result(result, getattr(self.engine, "digits", None))
        logger.debug("%r = %s", expression, self._text)
