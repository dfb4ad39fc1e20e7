"""Exceptions raised by pipeline stages.

Every stage failure derives from PipelineError so the command line
driver can report it and exit non-zero.
"""


class PipelineError(Exception):
    pass


class DiscoveryError(PipelineError):
    """No sample directories matching the `<prefix>_<suffix>` layout."""


class DuplicateSampleError(PipelineError):
    """Two inputs resolve to the same sample identifier."""


class AggregationError(PipelineError):
    """A read fragment could not be read while concatenating a sample."""

    def __init__(self, sample, msg):
        self.sample = sample
        super(AggregationError, self).__init__("Sample %s: %s" % (sample, msg))


class FilterToolError(PipelineError):
    """One or more samples failed quality filtering.

    failures is a list of (sample, message) tuples.
    """

    def __init__(self, failures):
        self.failures = list(failures)
        msg = "Filtering failed for %s sample(s): %s" % (
            len(self.failures), ", ".join(sample for sample, _ in self.failures))
        super(FilterToolError, self).__init__(msg)


class NoInputError(PipelineError):
    pass


class DiscoveryInvariantError(PipelineError):
    """Discovered files and their labels are out of step."""


class ToolEnvironmentError(PipelineError):
    """A required tool installation or conda environment is missing."""


class ReportError(PipelineError):
    pass


class SubmissionError(PipelineError):
    """The batch scheduler rejected or could not receive a job."""
