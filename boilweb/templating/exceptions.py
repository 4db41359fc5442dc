"""Template registry specific exceptions."""


class TemplateError(Exception):
    """Base class for template registry errors."""


class TemplateLoadError(TemplateError):
    """Raised when the template set cannot be read or parsed."""


class MissingTemplateError(TemplateLoadError):
    """Raised when a parsed template set lacks a template the application requires."""

    def __init__(self, names: list[str]) -> None:
        self.names = names
        super().__init__(f"required templates missing: {', '.join(names)}")


class TemplateNotFoundError(TemplateError):
    """Raised when looking up a template name the active set does not contain."""
