"""Exceptions raised by the HPV analysis pipeline.

QC findings are never raised; they are returned as ``QcResult`` issues.
"""


class AnalysisError(ValueError):
    """Base class for structural failures that abort an analysis run."""


class InvalidFileFormat(AnalysisError):
    """The text is not a recognized instrument export."""


class EmptyDataSet(AnalysisError):
    """No data rows could be extracted from the export."""


class MissingNameColumn(AnalysisError):
    """The section header has no recognizable sample name column."""


class FileTooLarge(AnalysisError):
    pass


class RegistryError(AnalysisError):
    pass


class InsufficientTestCredits(AnalysisError):
    """More unique samples were requested than there are remaining tests.

    Carries the candidate sample names so the caller can pick a subset and
    run again with ``selected_samples``.
    """

    def __init__(self, requested: int, remaining: int, sample_names=None):
        self.requested = requested
        self.remaining = remaining
        self.sample_names = list(sample_names or [])
        super().__init__(
            f"{requested} samples requested but only {remaining} tests remain."
        )
