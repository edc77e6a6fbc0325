import pytest

from tplfetch.core.classify import SINGLE_FILE_EXTENSIONS, is_single_file


@pytest.mark.parametrize(
    "subpath",
    ["README.md", "sketch.js", "examples/basic/index.HTML", "shaders/blur.frag", "bundle.tar.gz"],
)
def test_known_extensions_are_files(subpath):
    assert is_single_file(subpath) is True


@pytest.mark.parametrize(
    "subpath",
    ["", "examples", "v1.0", "releases/v2.3", "examples/basic/", ".github", "notes.unknownext"],
)
def test_directories_and_unknown_names_are_not_files(subpath):
    assert is_single_file(subpath) is False


def test_only_the_final_segment_counts():
    assert is_single_file("docs.md/examples") is False


def test_allow_list_is_lowercase_dotted():
    assert all(ext.startswith(".") and ext == ext.lower() for ext in SINGLE_FILE_EXTENSIONS)
