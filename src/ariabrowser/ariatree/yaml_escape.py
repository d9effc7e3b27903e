import json
import re


_RESERVED_WORDS = frozenset({"y", "n", "yes", "no", "true", "false", "on", "off", "null"})
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_NUMBER = re.compile(
    r"^[+-]?((\d+\.?\d*|\.\d+)([eE][+-]?\d+)?|Infinity)$"
    r"|^0[xX][0-9a-fA-F]+$|^0[oO][0-7]+$|^0[bB][01]+$"
)
_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _needs_escaping(text: str) -> bool:
    if not text:
        return True
    if text.strip() != text:
        return True
    if _CONTROL_CHARS.search(text):
        return True
    if text.startswith("-"):
        return True
    if re.search(r"[\n:](\s|$)", text):
        return True
    if re.search(r"\s#", text):
        return True
    if re.search(r"[\n\r]", text):
        return True
    if text[0] in "&*],?!>|@\"'#%":
        return True
    if re.search(r"[{}`]", text):
        return True
    if text.startswith("["):
        return True
    if _NUMBER.match(text):
        return True
    return text.lower() in _RESERVED_WORDS


def _escape_char(char: str) -> str:
    if char in _ESCAPES:
        return _ESCAPES[char]
    if ord(char) < 0x20 or 0x7F <= ord(char) <= 0x9F:
        return f"\\x{ord(char):02x}"
    return char


def yaml_escape_key_if_needed(text: str) -> str:
    if not _needs_escaping(text):
        return text
    return "'" + text.replace("'", "''") + "'"


def yaml_escape_value_if_needed(text: str) -> str:
    if not _needs_escaping(text):
        return text
    return '"' + "".join(_escape_char(c) for c in text) + '"'


def quote_name(name: str, max_length: int) -> str:
    """JSON-quote an accessible name for a key line, truncating very long names"""
    if len(name) > max_length:
        name = name[:max_length] + "..."
    return json.dumps(name, ensure_ascii=False)
