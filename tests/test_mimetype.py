import pytest
import formstream


@pytest.mark.parametrize(
    ["filename", "expected"],
    [
        ("report.pdf", "application/pdf"),
        ("photo.JPG", "image/jpeg"),
        ("/var/tmp/archive.tar.gz", "application/gzip"),
        ("file:///srv/uploads/clip.mp4", "video/mp4"),
        ("notes.txt", "text/plain"),
        ("song.mp3", "audio/mpeg"),
        ("file.xyz123", None),
        ("README", None),
        ("/tmp/dir.d/noext", None),
        ("trailing.", None),
        ("", None),
    ],
)
def test_lookup(filename, expected):
    assert formstream.MimetypeHelper().lookup(filename) == expected


def test_custom_mimetypes():
    helper = formstream.CustomMimetypeHelper({"foo": "foo/bar"})

    assert helper.get_mimetype_from_extension("foo") == "foo/bar"
    assert helper.get_mimetype_from_extension("rar") == "application/x-rar-compressed"

    assert helper.add_mimetype("rar", "test/test") is helper
    assert helper.get_mimetype_from_extension("rar") == "test/test"


def test_custom_mimetypes_are_case_insensitive():
    helper = formstream.CustomMimetypeHelper({"XYZ123": "application/x-test"})

    assert helper.lookup("data.xyz123") == "application/x-test"
    assert helper.lookup("DATA.XyZ123") == "application/x-test"
    assert helper.lookup("other.unknown") is None


def test_default_table_is_not_modified_by_custom_helper():
    formstream.CustomMimetypeHelper({"pdf": "application/x-not-pdf"})

    assert formstream.MimetypeHelper().lookup("report.pdf") == "application/pdf"
