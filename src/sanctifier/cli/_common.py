"""Shared CLI helpers: target validation, source discovery, report building."""

from pathlib import Path
from typing import Iterator, List

from rich.console import Console

from ..analyzer import Analyzer
from ..config import SanctifyConfig
from ..exceptions import FileAccessError, InvalidPathError, NotAContractProjectError
from ..logging_config import get_logger
from ..models import AnalysisReport

logger = get_logger(__name__)

console = Console()
err_console = Console(stderr=True)


def validate_target(path: Path) -> Path:
    """Accept a ``.rs`` file or a directory holding ``Cargo.toml``.

    Raises:
        InvalidPathError: If the path does not exist
        NotAContractProjectError: If it is neither a Rust file nor a Cargo project
    """
    if not path.exists():
        raise InvalidPathError(path, "path does not exist")
    if path.is_file() and path.suffix == ".rs":
        return path
    if path.is_dir() and (path / "Cargo.toml").is_file():
        return path
    raise NotAContractProjectError(path)


def iter_sources(path: Path, ignore_paths: frozenset) -> Iterator[Path]:
    """Yield ``.rs`` files under ``path`` in sorted order, skipping ignored dirs."""
    if path.is_file():
        yield path
        return
    for entry in sorted(path.iterdir()):
        if entry.name in ignore_paths:
            continue
        if entry.is_dir() and not entry.is_symlink():
            yield from iter_sources(entry, ignore_paths)
        elif entry.is_file() and entry.suffix == ".rs":
            yield entry


def read_source(path: Path) -> str:
    """Read a source file as UTF-8.

    Raises:
        FileAccessError: If the file cannot be read or decoded
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileAccessError(path, str(e))


def analyze_target(target: Path, config: SanctifyConfig) -> tuple[List[AnalysisReport], int]:
    """Analyze every source file under ``target``.

    Unreadable files are logged and skipped.

    Returns:
        (reports with path-qualified locations, number of files scanned)
    """
    analyzer = Analyzer(config)
    reports: List[AnalysisReport] = []
    scanned = 0
    for source_path in iter_sources(target, config.ignore_paths):
        try:
            text = read_source(source_path)
        except FileAccessError as e:
            logger.warning(str(e))
            continue
        scanned += 1
        display = _display_path(source_path, target)
        logger.debug(f"Analyzing {display}")
        reports.append(analyzer.analyze(text, display).with_prefix(display))
    return reports, scanned


def _display_path(path: Path, target: Path) -> str:
    if target.is_dir():
        try:
            return path.relative_to(target).as_posix()
        except ValueError:
            pass
    return path.as_posix()
