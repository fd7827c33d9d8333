"""Domain errors raised by the ingestion and question-answering services.

Routes translate these into HTTP responses: ``ValidationError`` and
``EmptyContentError`` are client errors, everything else is a server error.
"""


class TutorError(RuntimeError):
    pass


class ValidationError(TutorError):
    """A required input field is missing or blank."""


class EmptyContentError(TutorError):
    """An upload resolved to no parseable text."""


class ExtractionError(TutorError):
    """Text could not be extracted from a binary document."""


class SummarizationError(TutorError):
    """The completion API could not produce a digest for a fragment."""


class AnswerGenerationError(TutorError):
    """The completion API could not produce an answer."""


class PersistenceError(TutorError):
    """The knowledge store could not be written."""
