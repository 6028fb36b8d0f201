"""Custom exception classes."""


class FichaTecnicaException(Exception):
    """Base exception for the technical sheet application."""

    pass


class NoInputError(FichaTecnicaException):
    """Raised when the request carries no recipe source."""

    pass


class AmbiguousInputError(NoInputError):
    """Raised when the request carries more than one recipe source."""

    pass


class ValidationError(FichaTecnicaException):
    """Raised when input validation fails."""

    pass


class ImageProcessingError(FichaTecnicaException):
    """Raised when an uploaded image is rejected."""

    pass


class FetchError(FichaTecnicaException):
    """Raised when a recipe link cannot be fetched."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(
            f"Não consegui acessar o link {url}. "
            "Por favor, copie e cole o conteúdo da receita."
        )


class ExtractionError(FichaTecnicaException):
    """Raised when the image-to-text Gemini call fails."""

    pass


class StructuringError(FichaTecnicaException):
    """Raised when recipe text cannot be turned into a structured recipe."""

    pass


class MalformedResponseError(StructuringError):
    """Raised when the model reply holds no JSON object at all."""

    pass


class JsonParseError(StructuringError):
    """Raised when the JSON object in the model reply does not parse."""

    pass


class RecipeSchemaError(StructuringError):
    """Raised when the parsed JSON does not have the recipe shape."""

    pass


class FileSystemError(FichaTecnicaException):
    """Raised when the template cannot be loaded or the output not written."""

    pass


class PipelineError(FichaTecnicaException):
    """Raised for unexpected failures while processing a recipe."""

    pass
