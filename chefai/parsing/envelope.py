"""Single-field extractor for the generateContent response envelope.

The reply text is the first ``"text":"..."`` string in the JSON document.
Rather than decoding the whole envelope, this module finds that one field,
reads it up to the next unescaped double quote and undoes the JSON string
escapes. Whitespace around the colon is tolerated because the live API
pretty-prints its JSON.
"""

import re
import string
from typing import Optional, Union

TEXT_FIELD_PATTERN = re.compile(r'"text"\s*:\s*"')

_SIMPLE_ESCAPES = {
    "n": "\n",
    '"': '"',
    "\\": "\\",
    "t": "\t",
    "r": "\r",
    "/": "/",
}


def _decode(raw: Union[bytes, bytearray, str]) -> str:
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw).decode("utf-8", errors="replace")
    return raw


def extract_text_payload(raw: Union[bytes, bytearray, str, None]) -> Optional[str]:
    """Return the unescaped value of the first ``text`` field, or None.

    None means the marker is missing or the string is truncated (no closing
    quote, or a dangling backslash at the end of input).

    Examples:
        >>> extract_text_payload(b'{"text":"a\\\\nb"}')
        'a\\nb'
        >>> extract_text_payload('{"other": 1}') is None
        True
    """
    if raw is None:
        return None
    document = _decode(raw)

    match = TEXT_FIELD_PATTERN.search(document)
    if match is None:
        return None

    chars: list[str] = []
    index = match.end()
    length = len(document)
    while index < length:
        char = document[index]
        if char == '"':
            return _join(chars)
        if char != "\\":
            chars.append(char)
            index += 1
            continue

        if index + 1 >= length:
            return None
        code = document[index + 1]
        if code == "u":
            hex_digits = document[index + 2 : index + 6]
            if len(hex_digits) == 4 and all(digit in string.hexdigits for digit in hex_digits):
                chars.append(chr(int(hex_digits, 16)))
                index += 6
                continue
        # Unknown escapes are kept verbatim
        chars.append(_SIMPLE_ESCAPES.get(code, "\\" + code))
        index += 2

    return None


def _join(chars: list[str]) -> str:
    text = "".join(chars)
    # \uD83C\uDF73 style pairs arrive as two surrogates; fold them into one code point
    return text.encode("utf-16", "surrogatepass").decode("utf-16", errors="replace")
