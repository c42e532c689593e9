class TakeoffError(Exception):
    """Base class for plan takeoff errors."""


class PlanFileError(TakeoffError):
    """The plan's PDF could not be located or read from storage."""


class AnalysisError(TakeoffError):
    """
    Failure of a plan analysis call.

    Carries the machine readable ``error_code`` and ``http_status`` the
    analyze endpoint answers with; any extra keyword arguments are echoed
    back to the caller in the response body.
    """

    def __init__(self, error_code, http_status=500, message=None, **details):
        self.error_code = error_code
        self.http_status = http_status
        self.message = message
        self.details = details
        super().__init__(message or error_code)

    @property
    def retryable(self):
        return self.http_status >= 500

    def to_dict(self):
        data = {"error_code": self.error_code}
        if self.message:
            data["error"] = self.message
        data.update(self.details)
        return data
