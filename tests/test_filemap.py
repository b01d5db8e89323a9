import logging

from cdnadd.filemap import (
    FileMapEntry,
    build_file_map,
    glob_files,
    match_file_map,
    normalize_base_path,
)


def test_glob_files_returns_sorted_files_only(package_tree):
    assert glob_files(package_tree / "src", "*") == ["a.js", "b.css"]


def test_glob_files_recursive(package_tree):
    assert glob_files(package_tree / "src", "**/*.js") == ["a.js", "sub/c.js"]


def test_glob_files_missing_base(package_tree):
    assert glob_files(package_tree / "nope", "*.js") == []


def test_match_preserves_declaration_order(package_tree):
    entries = [
        FileMapEntry("src", ["*.css", "*.js"]),
        FileMapEntry("dist", ["lib.min.js", "lib.js"]),
    ]
    first = match_file_map(package_tree, entries)
    assert first == ["b.css", "a.js", "lib.min.js", "lib.js"]
    assert match_file_map(package_tree, entries) == first


def test_match_keeps_duplicates(package_tree):
    entries = [FileMapEntry("dist", ["*.js", "lib.js"])]
    assert match_file_map(package_tree, entries) == ["lib.js", "lib.min.js", "lib.js"]


def test_match_tolerates_bad_pattern(package_tree):
    entries = [
        FileMapEntry("dist", ["[unclosed"]),
        FileMapEntry("src", ["*.js"]),
    ]
    assert match_file_map(package_tree, entries) == ["a.js"]


def test_matched_paths_exist_under_base(package_tree):
    entries = [FileMapEntry("src", ["**/*"]), FileMapEntry("", ["*.json"])]
    for entry in entries:
        for path in match_file_map(package_tree, [entry]):
            assert (package_tree / entry.base_path / path).is_file()


def test_entry_serialization():
    assert FileMapEntry("dist", ["*.js"]).to_dict() == {"basePath": "dist", "files": ["*.js"]}


def test_normalize_base_path(tmp_path):
    assert normalize_base_path(".", cwd=tmp_path) == ""
    assert normalize_base_path(str(tmp_path), cwd=tmp_path) == ""
    assert normalize_base_path("dist", cwd=tmp_path) == "dist"


def test_builder_requires_entries_and_patterns(scripted, caplog):
    ask = scripted(["", "dist", "", "*.js", "*.css", "", ""])
    with caplog.at_level(logging.ERROR, logger="cdnadd"):
        file_map = build_file_map(ask)

    assert file_map == [FileMapEntry("dist", ["*.js", "*.css"])]
    assert "At least one file map is required" in caplog.text
    assert "At least one glob pattern is required" in caplog.text
    assert not ask.answers


def test_builder_multiple_entries(scripted):
    ask = scripted(["dist", "*.min.js", "", "src", "**/*.js", "", ""])
    assert build_file_map(ask) == [
        FileMapEntry("dist", ["*.min.js"]),
        FileMapEntry("src", ["**/*.js"]),
    ]


def test_builder_normalizes_working_directory(scripted, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    ask = scripted([".", "*.js", "", ""])
    assert build_file_map(ask) == [FileMapEntry("", ["*.js"])]


def test_glob_files_braces(package_tree):
    assert glob_files(package_tree / "src", "*.{js,css}") == ["a.js", "b.css"]


def test_glob_files_extglob(package_tree):
    assert glob_files(package_tree / "dist", "*.@(min).js") == ["lib.min.js"]
    assert glob_files(package_tree / "src", "**/*.@(js|css)") == ["a.js", "b.css", "sub/c.js"]


def test_match_leading_slash_base_stays_in_root(package_tree):
    entries = [FileMapEntry("/dist", ["*.js"])]
    assert match_file_map(package_tree, entries) == ["lib.js", "lib.min.js"]
