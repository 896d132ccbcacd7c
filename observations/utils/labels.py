"""라벨 정규화 유틸리티.

Label normalization utilities.
Free-text area and user names are entered inconsistently ("Chancado",
"CHANCADO ", "chancádo"); grouping uses a canonical key while charts show a
human-friendly label.
"""

import re
import unicodedata

from observations.config import settings

_WHITESPACE = re.compile(r"\s+")
# UUID 형태 또는 긴 16진수 — 이름/이메일 없이 id만 있는 사용자
_UUID_LIKE = re.compile(r"^[0-9a-fA-F]{8}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{12}$")
_LONG_TOKEN = re.compile(r"^[0-9A-Za-z_-]{20,}$")
# DNI — 6~12자리 숫자 (National ID digits)
_DNI_PATTERN = re.compile(r"^\d{6,12}$")

# 알려진 약어 — 정규 표기 유지 (Canonical spelling of known acronyms)
KNOWN_ACRONYMS: dict[str, str] = {
    "cu": "Cu",
    "mo": "Mo",
    "zn": "Zn",
    "pb": "Pb",
    "ag": "Ag",
    "au": "Au",
    "fe": "Fe",
    "epp": "EPP",
    "sso": "SSO",
    "ssoma": "SSOMA",
    "sst": "SST",
    "iperc": "IPERC",
    "ats": "ATS",
}

OPAQUE_ID_PREFIX: str = "Usuario"


def normalize_key(raw: str | None) -> str:
    """그룹 키 — 소문자, 발음 구별 기호 제거, 공백 축약."""
    if not raw:
        return ""
    decomposed = unicodedata.normalize("NFD", raw)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _WHITESPACE.sub(" ", stripped).strip().lower()


def is_opaque_id(raw: str | None) -> bool:
    if not raw:
        return False
    value = raw.strip()
    if " " in value or "@" in value:
        return False
    if _UUID_LIKE.match(value):
        return True
    # 문자+숫자 혼합 긴 토큰만 id로 간주 (digits-only tokens such as a DNI are not ids)
    return (
        bool(_LONG_TOKEN.match(value))
        and any(ch.isdigit() for ch in value)
        and any(ch.isalpha() for ch in value)
    )


def _display_token(token: str) -> str:
    if any(ch.isdigit() for ch in token):
        return token
    acronym = KNOWN_ACRONYMS.get(normalize_key(token))
    if acronym is not None:
        return acronym
    return token[:1].upper() + token[1:].lower()


def display_label(raw: str | None) -> str:
    """표시용 라벨 — 단어별 대문자화, 약어/숫자 토큰 유지.

    Human-friendly capitalized form of a free-text name. Tokens containing
    digits are left unchanged, known acronyms keep their canonical spelling,
    and opaque ids are rendered as a truncated placeholder.

    Args:
        raw: 원본 텍스트 (Raw free text)

    Returns:
        str: 표시 라벨 (Display label; "" for empty input)
    """
    if not raw:
        return ""
    value = _WHITESPACE.sub(" ", raw).strip()
    if is_opaque_id(value):
        return f"{OPAQUE_ID_PREFIX} {value.replace('-', '')[:8]}"
    return " ".join(_display_token(token) for token in value.split(" "))


def user_label(name: str | None, email: str | None = None, user_id: str | None = None) -> str:
    """사용자 표시 이름 — 이름 > 이메일 로컬 파트 > id 축약."""
    if name and name.strip():
        return display_label(name)
    if email and email.strip():
        return email.strip().split("@", 1)[0]
    if user_id:
        return display_label(str(user_id))
    return ""


def is_dni(raw: str | None) -> bool:
    """DNI 형태 여부 — 6~12자리 숫자 (Whether the input is a bare national id)."""
    return bool(_DNI_PATTERN.match((raw or "").strip()))


def normalize_login(raw: str | None) -> str:
    """로그인 입력 정규화 — DNI면 DNI@도메인, 아니면 소문자 이메일.

    Identity-provider convention: a bare 6-12 digit national id logs in as
    ``<dni>@<LOGIN_EMAIL_DOMAIN>``.
    """
    value = (raw or "").strip()
    if is_dni(value):
        return f"{value}@{settings.LOGIN_EMAIL_DOMAIN}"
    return value.lower()
