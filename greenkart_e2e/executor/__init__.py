from .result_aggregator import ResultAggregator
from .spec_loader import SpecFile, discover_spec_paths, load_spec_file, load_spec_files
from .spec_runner import SpecRunner

__all__ = [
    "SpecRunner",
    "SpecFile",
    "ResultAggregator",
    "discover_spec_paths",
    "load_spec_file",
    "load_spec_files",
]
