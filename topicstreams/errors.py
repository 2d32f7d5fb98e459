class StreamClosedError(EOFError):
  pass

class UpstreamFailure(Exception):
  """Raised by a combined stream when one of its upstream streams failed. The original exception is kept in `error`."""
  def __init__(self, error: BaseException):
    super().__init__(f"upstream stream failed: {error!r}")
    self.error = error
    self.__cause__ = error
