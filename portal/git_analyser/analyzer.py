"""
Static reference analysis of a checked out repository.

Each analysable file is scanned with per-language regular expressions. A
reference that does not resolve to a tracked file is reported as broken, and a
tracked file that no other file references is reported as unused.
"""
import logging
import os
import posixpath
import re
from dataclasses import dataclass
from pathlib import Path

from portal.git_analyser.schemas import AnalysisResult, BrokenReference, UnusedFile

logger = logging.getLogger(__name__)

UNUSED_REASON = "No references found in codebase"

_SKIPPED_EXTENSIONS = frozenset({"md", "txt", "log", "gitignore"})
_UNUSED_IGNORED_EXTENSIONS = frozenset({"md", "txt", "readme"})
_UNUSED_IGNORED_PARTS = ("README", ".git", "node_modules")


@dataclass(frozen=True)
class ReferencePattern:
    reference_type: str
    pattern: re.Pattern
    extensions: frozenset[str]

    def matches(self, extension: str) -> bool:
        return extension in self.extensions


def _pattern(reference_type: str, regex: str, *extensions: str) -> ReferencePattern:
    return ReferencePattern(reference_type, re.compile(regex, re.MULTILINE), frozenset(extensions))


REFERENCE_PATTERNS: tuple[ReferencePattern, ...] = (
    _pattern("import", r"^\s*import\s+([\w.]+)\s*;", "java"),
    _pattern("import", r"""import\s+.*?from\s+['"]([^'"]+)['"]""", "js", "ts", "jsx", "tsx"),
    _pattern("require", r"""require\(['"]([^'"]+)['"]\)""", "js", "ts"),
    _pattern("include", r"""(?:include|require)(?:_once)?\s*['"]([^'"]+)['"]""", "php"),
    _pattern("import", r"^\s*(?:from\s+)?import\s+([\w.]+)", "py"),
    _pattern("include", r"""#include\s+[<"]([^>"]+)[>"]""", "c", "cpp", "h", "hpp"),
    _pattern("link", r"""(?:href|src)=['"]([^'"]+)['"]""", "html", "htm", "css"),
    _pattern("include", r"""(?:href|src)=['"]([^'"]+)['"]""", "xml", "xsl"),
    _pattern("path", r"""['"]([^'"]+\.(?:json|yaml|yml|properties|conf|config))['"]""", "json", "yaml", "yml"),
)


def normalize_path(path: str) -> str:
    return path.replace("\\", "/").lower()


def file_extension(path: str) -> str:
    """Extension of the file name without the dot; dotfiles have none."""
    name = posixpath.basename(path.replace("\\", "/"))
    dot = name.rfind(".")
    return name[dot + 1:].lower() if dot > 0 else ""


def strip_extension(path: str) -> str:
    name_start = path.replace("\\", "/").rfind("/") + 1
    dot = path.rfind(".")
    return path[:dot] if dot > name_start else path


def file_name(path: str) -> str:
    return posixpath.basename(path.replace("\\", "/"))


def resolve_reference(source_file: str, reference: str) -> str | None:
    """Resolves a reference relative to the directory of the source file, from the repository root."""
    reference = re.split(r"[?#]", reference, maxsplit=1)[0]
    if not reference:
        return None
    if reference.startswith("/"):
        return reference[1:]

    source_dir = posixpath.dirname(source_file.replace("\\", "/"))
    resolved = posixpath.normpath(posixpath.join(source_dir, reference.replace("\\", "/")))
    while resolved.startswith("../"):
        resolved = resolved[3:]
    return resolved


def build_file_map(files: list[str]) -> dict[str, str]:
    """Lookup from normalized path, path without extension and bare file name to the tracked file."""
    file_map: dict[str, str] = {}
    for path in files:
        file_map[normalize_path(path)] = path
        without_extension = strip_extension(path)
        if without_extension != path:
            file_map[normalize_path(without_extension)] = path
        file_map[normalize_path(file_name(path))] = path
    return file_map


def file_exists(reference: str, file_map: dict[str, str]) -> bool:
    return (
        normalize_path(reference) in file_map
        or normalize_path(strip_extension(reference)) in file_map
        or normalize_path(file_name(reference)) in file_map
    )


def should_analyze(path: str) -> bool:
    extension = file_extension(path)
    return bool(extension) and extension not in _SKIPPED_EXTENSIONS


def should_check_for_unused(path: str) -> bool:
    if file_extension(path) in _UNUSED_IGNORED_EXTENSIONS:
        return False
    return not any(part in path for part in _UNUSED_IGNORED_PARTS)


def find_line_number(content: str, reference: str) -> int:
    for number, line in enumerate(content.splitlines(), start=1):
        if reference in line:
            return number
    return 0


def detect_reference_type(source_file: str, reference: str) -> str:
    extension = file_extension(source_file)
    if extension == "java":
        return "import"
    if extension in ("js", "ts"):
        return "require" if "require" in reference else "import"
    if extension == "php":
        return "include"
    if extension == "py":
        return "import"
    if extension in ("c", "cpp", "h"):
        return "include"
    if extension in ("html", "css"):
        return "link"
    return "path"


def extract_references(source_file: str, content: str) -> set[str]:
    extension = file_extension(source_file)
    references: set[str] = set()
    for reference_pattern in REFERENCE_PATTERNS:
        if not reference_pattern.matches(extension):
            continue
        for match in reference_pattern.pattern.finditer(content):
            resolved = resolve_reference(source_file, match.group(1))
            if resolved:
                references.add(resolved)
    return references


class FileReferenceAnalyzer:
    def analyze(self, repo_path: Path, files: list[str]) -> AnalysisResult:
        logger.info(f"Starting file reference analysis for {len(files)} files")
        file_map = build_file_map(files)
        file_references: dict[str, set[str]] = {}
        broken_references: list[BrokenReference] = []
        analyzed_files = 0

        for path in files:
            if not should_analyze(path):
                continue
            analyzed_files += 1
            content = self._read_file(repo_path, path)
            if content is None:
                continue

            references = extract_references(path, content)
            file_references[path] = references
            for reference in sorted(references):
                if not file_exists(reference, file_map):
                    broken_references.append(
                        BrokenReference(
                            source_file=path,
                            referenced_path=reference,
                            line_number=find_line_number(content, reference),
                            reference_type=detect_reference_type(path, reference),
                        )
                    )

        unused_files = self._find_unused_files(repo_path, files, file_references, file_map)
        logger.info(
            f"Analysis complete: {len(unused_files)} unused files, {len(broken_references)} broken references"
        )
        return AnalysisResult(
            unused_files=unused_files,
            broken_references=broken_references,
            total_files=len(files),
            analyzed_files=analyzed_files,
        )

    @staticmethod
    def _find_unused_files(
        repo_path: Path,
        files: list[str],
        file_references: dict[str, set[str]],
        file_map: dict[str, str],
    ) -> list[UnusedFile]:
        referenced = {
            file_map[normalize_path(reference)]
            for references in file_references.values()
            for reference in references
            if normalize_path(reference) in file_map
        }

        unused = []
        for path in files:
            if path in referenced or not should_check_for_unused(path):
                continue
            full_path = repo_path / path
            size = os.path.getsize(full_path) if full_path.is_file() else 0
            unused.append(UnusedFile(file_path=path, reason=UNUSED_REASON, file_size=size))
        return unused

    @staticmethod
    def _read_file(repo_path: Path, path: str) -> str | None:
        full_path = repo_path / path
        if not full_path.is_file():
            return None
        return full_path.read_text(encoding="utf-8", errors="replace")
