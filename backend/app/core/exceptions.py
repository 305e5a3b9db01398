class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class GenerationError(AppError):
    """Raised when the external timetable generator fails or returns garbage."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=502, details=details)

class GenerationInProgressError(AppError):
    """Raised when a generation request arrives while another one is running."""
    def __init__(self):
        super().__init__(
            "A timetable generation is already in progress. Wait for it to finish and try again.",
            status_code=409,
        )

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)

class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)
