import pytest

from bucketfs.filesystem.keys import (
    content_type_for,
    directory_prefix,
    normalize_path,
    normalize_prefix,
    to_key,
)

PATHS = [
    "",
    "/",
    ".",
    "./",
    "config.json",
    "/config.json",
    "///config.json",
    "./config.json",
    ".//config.json",
    "/./a//b///c.txt",
    "././a",
    "a/./b",
    ".hidden",
    "dir/",
    "dir//sub//",
]


@pytest.mark.parametrize("path", PATHS)
def test_normalize_is_idempotent(path):
    once = normalize_path(path)
    assert normalize_path(once) == once
    assert to_key(to_key(path)) == to_key(path)


@pytest.mark.parametrize("path", PATHS)
def test_normalized_path_has_no_leading_or_double_slash(path):
    normalized = normalize_path(path)
    assert not normalized.startswith("/")
    assert not normalized.startswith("./")
    assert "//" not in normalized


def test_normalize_examples():
    assert normalize_path("/config.json") == "config.json"
    assert normalize_path("./config.json") == "config.json"
    assert normalize_path("a//b///c") == "a/b/c"
    assert normalize_path(".hidden") == ".hidden"
    assert normalize_path("a/./b") == "a/./b"


def test_to_key_with_prefix():
    assert to_key("config.json", "myapp/") == "myapp/config.json"
    assert to_key("/config.json", "/myapp/") == "myapp/config.json"
    assert to_key("data//x.txt", "//tenant//a//") == "tenant/a/data/x.txt"


def test_to_key_without_prefix():
    assert to_key("/config.json") == "config.json"
    assert to_key("/config.json", "") == "config.json"
    assert to_key("/config.json", "///") == "config.json"


def test_to_key_empty_path_is_bare_prefix():
    assert to_key("", "myapp/") == "myapp"
    assert to_key("/", "myapp") == "myapp"
    assert to_key("") == ""


def test_normalize_prefix():
    assert normalize_prefix("/myapp/") == "myapp"
    assert normalize_prefix("") == ""


def test_directory_prefix():
    assert directory_prefix("") == ""
    assert directory_prefix("docs") == "docs/"
    assert directory_prefix("docs/") == "docs/"


def test_content_type_for():
    assert content_type_for("config.json") == "application/json"
    assert content_type_for("README.MD") == "text/markdown"
    assert content_type_for("notes.txt") == "text/plain"
    assert content_type_for("index.html") == "text/html"
    assert content_type_for("site.css") == "text/css"
    assert content_type_for("app.js") == "application/javascript"
    assert content_type_for("feed.xml") == "application/xml"
    assert content_type_for("archive.zip") == "application/octet-stream"
    assert content_type_for("Makefile") == "application/octet-stream"
    assert content_type_for("dir.d/file") == "application/octet-stream"
    assert content_type_for(".json") == "application/json"
    assert content_type_for("archive.tar.JSON") == "application/json"
