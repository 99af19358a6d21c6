"""URL extraction from free-form message text."""

_WRAPPER_CHARS = "<>()[]\"'"
_SCHEMES = ("http://", "https://")


def is_valid_url(value: str) -> bool:
    """Check whether a token looks like a fetchable URL.

    Any http(s) URL is accepted; yt-dlp decides whether the site is
    supported and fails the job otherwise.
    """
    value = value.strip()
    for scheme in _SCHEMES:
        if value.startswith(scheme):
            return len(value) > len(scheme)
    return False


def extract_urls(text: str) -> list[str]:
    """Extract all URLs from a message text, in order of appearance.

    Tokens are split on whitespace and common wrapping characters are
    stripped, so "(https://youtu.be/x)" yields "https://youtu.be/x".
    """
    urls: list[str] = []
    for word in text.split():
        word = word.strip(_WRAPPER_CHARS)
        if is_valid_url(word):
            urls.append(word)
    return urls
