from pathlib import Path

import pytest

from portal.git_analyser.analyzer import (
    UNUSED_REASON,
    FileReferenceAnalyzer,
    build_file_map,
    detect_reference_type,
    extract_references,
    file_exists,
    file_extension,
    resolve_reference,
    should_analyze,
    should_check_for_unused,
    strip_extension,
)


@pytest.mark.parametrize(
    "path, expected",
    [
        ("src/app.JS", "js"),
        ("archive.tar.gz", "gz"),
        (".gitignore", ""),
        ("Makefile", ""),
        ("dir.v1\\file", ""),
    ],
)
def test_file_extension(path, expected):
    assert file_extension(path) == expected


def test_strip_extension__ignores_dots_in_directories():
    assert strip_extension("web/js/util.js") == "web/js/util"
    assert strip_extension("dir.v1/Makefile") == "dir.v1/Makefile"


@pytest.mark.parametrize(
    "source, reference, expected",
    [
        ("web/index.html", "css/site.css", "web/css/site.css"),
        ("web/index.html", "css/site.css?v=2#top", "web/css/site.css"),
        ("web/index.html", "/assets/logo.png", "assets/logo.png"),
        ("web/js/app.js", "../../../shared/util.js", "shared/util.js"),
        ("web\\js\\app.js", ".\\util", "web/js/util"),
        ("web/index.html", "?v=2", None),
    ],
)
def test_resolve_reference(source, reference, expected):
    assert resolve_reference(source, reference) == expected


def test_file_exists__matches_path_stem_or_file_name():
    file_map = build_file_map(["web/js/Util.js", "config/app.yaml"])

    assert file_exists("web/js/util", file_map)
    assert file_exists("WEB/JS/UTIL.JS", file_map)
    assert file_exists("elsewhere/app.yaml", file_map)
    assert not file_exists("web/js/legacy", file_map)


def test_should_analyze__skips_documentation_and_extensionless_files():
    assert should_analyze("src/Main.java")
    assert not should_analyze("README.md")
    assert not should_analyze("notes.txt")
    assert not should_analyze("Makefile")


def test_should_check_for_unused__ignores_docs_and_vendored_paths():
    assert should_check_for_unused("src/Main.java")
    assert not should_check_for_unused("docs/guide.md")
    assert not should_check_for_unused("web/node_modules/lib/index.js")
    assert not should_check_for_unused("README")


@pytest.mark.parametrize(
    "source, content, expected",
    [
        ("src/Main.java", "import com.acme.Order;\nimport java.util.List;\n", {"src/com.acme.Order", "src/java.util.List"}),
        ("web/app.ts", "import { a } from './a';\nconst b = require('./b');\n", {"web/a", "web/b"}),
        ("site/index.php", "require_once 'lib/db.php';\ninclude \"header.php\";\n", {"site/lib/db.php", "site/header.php"}),
        ("src/main.c", '#include "util.h"\n#include <stdio.h>\n', {"src/util.h", "src/stdio.h"}),
        ("docs/page.xml", '<xi:include href="parts/intro.xml"/>', {"docs/parts/intro.xml"}),
        ("conf/app.yaml", "logging: 'logging.yaml'\n", {"conf/logging.yaml"}),
        ("web/site.css", "body { color: red; }", set()),
    ],
)
def test_extract_references__per_language(source, content, expected):
    assert extract_references(source, content) == expected


@pytest.mark.parametrize(
    "source, reference, expected",
    [
        ("src/Main.java", "com.acme.Order", "import"),
        ("web/app.js", "web/require-shim", "require"),
        ("web/app.ts", "web/a", "import"),
        ("site/index.php", "site/db.php", "include"),
        ("src/util.h", "src/types.h", "include"),
        ("web/index.html", "web/app.js", "link"),
        ("conf/app.yaml", "conf/other.yaml", "path"),
    ],
)
def test_detect_reference_type(source, reference, expected):
    assert detect_reference_type(source, reference) == expected


def test_analyze__reports_broken_references_and_unused_files(
    file_reference_analyzer: FileReferenceAnalyzer, web_repository: tuple[Path, list[str]]
):
    """
    Scenario: a web project where index.html links a missing logo and app.js requires a missing module.
    Asserts:
        - both missing targets are reported with the file that references them
        - files nothing points to are unused, documentation is not
    """
    repo_path, files = web_repository

    result = file_reference_analyzer.analyze(repo_path, files)

    assert result.total_files == 6
    assert result.analyzed_files == 5
    assert [(b.source_file, b.referenced_path, b.reference_type) for b in result.broken_references] == [
        ("web/index.html", "assets/logo.png", "link"),
        ("web/js/app.js", "web/js/legacy", "import"),
    ]
    assert result.broken_references[0].line_number == 3
    assert [(u.file_path, u.reason) for u in result.unused_files] == [
        ("web/index.html", UNUSED_REASON),
        ("docs/orphan.xml", UNUSED_REASON),
    ]
    assert result.unused_files[1].file_size == (repo_path / "docs/orphan.xml").stat().st_size


def test_analyze__missing_file_on_disk_is_counted_but_not_read(
    file_reference_analyzer: FileReferenceAnalyzer, tmp_path: Path
):
    result = file_reference_analyzer.analyze(tmp_path, ["src/gone.js"])

    assert result.analyzed_files == 1
    assert result.broken_references == []
    assert result.unused_files[0].file_size == 0
