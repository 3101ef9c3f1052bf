"""
Shared text clean-ups used by the rule-based parser.
"""
from __future__ import annotations
import re, unicodedata
from typing import List

_BULLET  = re.compile(r"^\s*[-•*]\s*")
_SPLIT   = re.compile(r"[,;\n]")
_SPACES  = re.compile(r"[ \t]+")
_FENCE   = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")

# ───────────────────────────────────────── helpers ──
def normalise_text(text: str) -> str:
    """NFKC-normalise and unify line endings."""
    text = unicodedata.normalize("NFKC", text or "")
    return text.replace("\r\n", "\n").replace("\r", "\n")

def squeeze(s: str) -> str:
    return _SPACES.sub(" ", s or "").strip()

def split_list(text: str) -> List[str]:
    """Split a comma / semicolon / newline separated list, dropping blanks."""
    return [squeeze(tok) for tok in _SPLIT.split(text or "") if tok.strip()]

def is_bullet(line: str) -> bool:
    return line.lstrip().startswith("-")

def strip_bullet(line: str) -> str:
    return _BULLET.sub("", line).strip()

def strip_fences(raw: str) -> str:
    """Drop a surrounding ```markdown fence that models like to add."""
    return _FENCE.sub("", (raw or "").strip()).strip()

def expand_username_url(token: str, domain: str) -> str:
    token = token.strip()
    if token.startswith("http"):
        return token
    if domain in token:
        return f"https://{token.lstrip('/')}"
    return f"https://{domain}/{token.lstrip('@').split('/')[-1]}" if token else ""
