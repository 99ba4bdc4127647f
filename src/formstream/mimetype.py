import typing

from .utils import basename

# Subset of Apache's mime.types covering what usually gets uploaded.
DEFAULT_MIMETYPES: typing.Dict[str, str] = {
    # Images
    "bmp": "image/bmp",
    "gif": "image/gif",
    "heic": "image/heic",
    "ico": "image/x-icon",
    "jpe": "image/jpeg",
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "png": "image/png",
    "psd": "image/vnd.adobe.photoshop",
    "svg": "image/svg+xml",
    "svgz": "image/svg+xml",
    "tif": "image/tiff",
    "tiff": "image/tiff",
    "webp": "image/webp",
    # Documents
    "csv": "text/csv",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "epub": "application/epub+zip",
    "odp": "application/vnd.oasis.opendocument.presentation",
    "ods": "application/vnd.oasis.opendocument.spreadsheet",
    "odt": "application/vnd.oasis.opendocument.text",
    "pdf": "application/pdf",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "ps": "application/postscript",
    "rtf": "application/rtf",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    # Archives
    "7z": "application/x-7z-compressed",
    "bz2": "application/x-bzip2",
    "gz": "application/gzip",
    "jar": "application/java-archive",
    "rar": "application/x-rar-compressed",
    "tar": "application/x-tar",
    "tgz": "application/gzip",
    "xz": "application/x-xz",
    "zip": "application/zip",
    # Text and source code
    "css": "text/css",
    "htm": "text/html",
    "html": "text/html",
    "ics": "text/calendar",
    "js": "application/javascript",
    "json": "application/json",
    "log": "text/plain",
    "md": "text/markdown",
    "py": "text/x-python",
    "txt": "text/plain",
    "xml": "application/xml",
    "yaml": "application/x-yaml",
    "yml": "application/x-yaml",
    # Audio
    "aac": "audio/aac",
    "flac": "audio/flac",
    "m4a": "audio/mp4",
    "mid": "audio/midi",
    "midi": "audio/midi",
    "mp3": "audio/mpeg",
    "oga": "audio/ogg",
    "ogg": "audio/ogg",
    "wav": "audio/x-wav",
    "weba": "audio/webm",
    # Video
    "avi": "video/x-msvideo",
    "flv": "video/x-flv",
    "m4v": "video/x-m4v",
    "mkv": "video/x-matroska",
    "mov": "video/quicktime",
    "mp4": "video/mp4",
    "mpeg": "video/mpeg",
    "mpg": "video/mpeg",
    "ogv": "video/ogg",
    "webm": "video/webm",
    "wmv": "video/x-ms-wmv",
    # Fonts
    "otf": "font/otf",
    "ttf": "font/ttf",
    "woff": "font/woff",
    "woff2": "font/woff2",
    # Everything else
    "bin": "application/octet-stream",
    "exe": "application/x-msdownload",
    "wasm": "application/wasm",
}


class MimetypeHelper:
    """Guesses a mimetype from a filename's extension using a static table."""

    def lookup(self, filename: str) -> typing.Optional[str]:
        name = basename(filename)
        if "." not in name:
            return None
        return self.get_mimetype_from_extension(name.rpartition(".")[2])

    def get_mimetype_from_extension(self, extension: str) -> typing.Optional[str]:
        return DEFAULT_MIMETYPES.get(extension.lower())


class CustomMimetypeHelper(MimetypeHelper):
    """Lets you add your own mimetypes. They're checked before
    the default table so they can also override its entries.
    """

    def __init__(self, mimetypes: typing.Optional[typing.Mapping[str, str]] = None):
        self._mimetypes: typing.Dict[str, str] = {}
        for extension, mimetype in (mimetypes or {}).items():
            self.add_mimetype(extension, mimetype)

    def add_mimetype(self, extension: str, mimetype: str) -> "CustomMimetypeHelper":
        self._mimetypes[extension.lower()] = mimetype
        return self

    def get_mimetype_from_extension(self, extension: str) -> typing.Optional[str]:
        extension = extension.lower()
        if extension in self._mimetypes:
            return self._mimetypes[extension]
        return super().get_mimetype_from_extension(extension)
