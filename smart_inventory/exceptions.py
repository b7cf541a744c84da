class InventoryAppError(Exception):
    """Base exception for Smart Inventory errors."""

    default_message = "An error occurred in the Smart Inventory service"

    def __init__(self, message=None, code=None, details=None):
        """Initialize the exception.

        Args:
            message: User-facing error message
            code: Short machine-readable error code
            details: Additional error details
        """
        self.message = message or self.default_message
        self.code = code
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self):
        """Convert the exception to a dictionary."""
        error_dict = {
            "error": self.__class__.__name__,
            "message": self.message,
        }

        if self.code:
            error_dict["code"] = self.code

        if self.details:
            error_dict["details"] = self.details

        return error_dict

class FileParseError(InventoryAppError):
    """The uploaded file could not be read as CSV. The user must select another file."""

    default_message = "Failed to parse CSV"

class FieldValidationError(InventoryAppError):
    """Rows failed field checks; raised only when an action is blocked by them."""

    default_message = "Validation errors must be resolved before uploading"

class NetworkError(InventoryAppError):
    """A call to Boltic or Fynd failed. Local state is kept so the user can retry."""

    default_message = "Network request failed"

class EmptyInputError(InventoryAppError):
    """Nothing valid was left to send after filtering."""

    default_message = "No valid rows to submit"
