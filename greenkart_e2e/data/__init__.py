from .test_structures import (
    RunSummary,
    SpecResult,
    StepRecord,
    TestResult,
    TestStatus,
)

__all__ = ["TestStatus", "StepRecord", "TestResult", "SpecResult", "RunSummary"]
