import importlib.util
import inspect
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Type

from greenkart_e2e.specs import Spec


@dataclass
class SpecFile:
    path: Path
    name: str
    specs: List[Type[Spec]] = field(default_factory=list)


def _relative_pattern(specs_folder: Path, pattern: str) -> str:
    """Express an absolute glob relative to ``specs_folder``; Path.glob only takes relative ones."""
    if not Path(pattern).is_absolute():
        return pattern
    try:
        return Path(pattern).resolve().relative_to(specs_folder.resolve()).as_posix()
    except ValueError:
        raise FileNotFoundError(f"Spec pattern {pattern} is outside the specs folder {specs_folder}") from None


def discover_spec_paths(specs_folder: Path, spec_pattern: str, spec_filter: Optional[str] = None) -> List[Path]:
    """Spec files under ``specs_folder`` matching ``spec_pattern``, sorted.

    ``spec_filter`` narrows the result to files that also match it. Either glob
    may be absolute as long as it points inside ``specs_folder``.

    Raises:
        FileNotFoundError: the folder is missing, a glob points outside it, or
            nothing matches.
    """
    specs_folder = Path(specs_folder)
    if not specs_folder.is_dir():
        raise FileNotFoundError(f"Specs folder not found: {specs_folder}")
    spec_pattern = _relative_pattern(specs_folder, spec_pattern)
    if spec_filter:
        spec_filter = _relative_pattern(specs_folder, spec_filter)

    paths = sorted(
        p for p in specs_folder.glob(spec_pattern) if p.is_file() and p.suffix == ".py" and not p.name.startswith("_")
    )
    if spec_filter:
        selected = {p.resolve() for p in specs_folder.glob(spec_filter)}
        paths = [p for p in paths if p.resolve() in selected]

    if not paths:
        pattern = f"{spec_pattern} (filtered by {spec_filter})" if spec_filter else spec_pattern
        raise FileNotFoundError(f"No spec files found in {specs_folder} matching {pattern}")
    return paths


def load_spec_file(path: Path, specs_folder: Optional[Path] = None) -> SpecFile:
    """Import a spec file and collect the Spec subclasses it defines."""
    path = Path(path)
    relative = path.relative_to(specs_folder) if specs_folder else Path(path.name)
    name = relative.with_suffix("").as_posix()

    module_name = "greenkart_e2e_spec_" + name.replace("/", "_").replace("-", "_")
    module_spec = importlib.util.spec_from_file_location(module_name, path)
    if module_spec is None or module_spec.loader is None:
        raise ImportError(f"Cannot import spec file {path}")
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)

    specs = [
        obj
        for obj in vars(module).values()
        if inspect.isclass(obj) and issubclass(obj, Spec) and obj is not Spec and obj.__module__ == module.__name__
    ]
    if not specs:
        logging.warning(f"Spec file {path} defines no Spec classes")
    return SpecFile(path=path, name=name, specs=specs)


def load_spec_files(specs_folder: Path, spec_pattern: str, spec_filter: Optional[str] = None) -> List[SpecFile]:
    specs_folder = Path(specs_folder)
    return [
        load_spec_file(path, specs_folder)
        for path in discover_spec_paths(specs_folder, spec_pattern, spec_filter)
    ]
