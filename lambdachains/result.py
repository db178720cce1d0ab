"""
Result - The single outcome of one invocation.
"""

from .exceptions import as_exception


class Result:
    """
    Represents the outcome of an invocation.
    Holds either a value or an error, never both.
    """

    def __init__(self, success, error=None, value=None):
        """
        Initialize a Result.

        Args:
            success: Boolean indicating if the invocation succeeded
            error: The error value (any object) when it failed
            value: The final result when it succeeded
        """
        self.success = success
        self.error = error
        self.value = value

    @staticmethod
    def ok(value=None):
        """
        Create a successful result.

        Args:
            value: The final result of the invocation

        Returns:
            Result instance indicating success
        """
        return Result(True, value=value)

    @staticmethod
    def fail(error):
        """
        Create a failed result.

        Args:
            error: Exception or any other error value

        Returns:
            Result instance indicating failure
        """
        return Result(False, error=error)

    def is_success(self):
        """Return True if the result indicates success."""
        return self.success

    def is_failure(self):
        """Return True if the result indicates failure."""
        return not self.success

    def deliver(self, callback=None):
        """
        Hand the outcome to the completion callback, then to the caller.

        The callback is called exactly once, as ``callback(None, value)`` on
        success or ``callback(error, None)`` on failure. Afterwards the value
        is returned, or the error is raised, so that awaiting the invocation
        mirrors what the callback saw.

        Args:
            callback: Optional ``callback(error, result)`` function

        Returns:
            The final value

        Raises:
            The final error (non-exception errors wrapped in Rejection)
        """
        if callback is not None:
            if self.success:
                callback(None, self.value)
            else:
                callback(self.error, None)

        if not self.success:
            raise as_exception(self.error)
        return self.value

    def __bool__(self):
        """Allow Result to be used in boolean context (if result: ...)"""
        return self.success

    def __repr__(self):
        if self.success:
            return f"Result.ok(value={self.value!r})"
        else:
            return f"Result.fail(error={self.error!r})"

    def __str__(self):
        if self.success:
            return "Success"
        else:
            return f"Failure: {self.error}"
