"""Error taxonomy shared by the client, the controller and the adapters."""


class UGCEngineError(Exception):
    """Base class for all engine errors."""


class BriefValidationError(UGCEngineError):
    """The brief is incomplete and cannot be submitted."""


class JobServiceError(UGCEngineError):
    """A call to the external job service failed."""


class AuthorizationError(JobServiceError):
    """The credential is missing or was rejected."""


class QuotaExceededError(JobServiceError):
    """The caller has no generations left or is being throttled."""


class UpstreamUnavailable(JobServiceError):
    """The job service could not be reached or failed to answer."""


class TransientNetworkError(UpstreamUnavailable):
    """A network-level failure that may succeed on retry."""


class MalformedResponse(UpstreamUnavailable):
    """The job service answered with a body that does not match the contract."""
