# surfkin/errors.py

class InputError(ValueError):
    """Raised for invalid or inconsistent mechanism and rate input.

    Errors of this kind are detected while a rate object is configured or
    attached to a reaction, never during rate evaluation.
    """

    def __init__(self, message, context=None):
        if context:
            message = f"{message}\n  (while processing: {context})"
        super().__init__(message)
        self.context = context
