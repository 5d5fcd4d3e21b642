"""
Maps symptom descriptions to a specialty tag with ordered keyword rules.
"""

import re

from triage_handoff.models.domain import Specialty
from triage_handoff.utils.text import fold_diacritics, lowercase_text

# Evaluated top to bottom; the first match wins.
SPECIALTY_RULES: list[tuple[Specialty, re.Pattern]] = [
    (
        Specialty.CARDIOLOGY,
        re.compile(
            r"\btim\b|tim mạch|đau ngực|tức ngực|huyết áp|hồi hộp|đánh trống ngực"
            r"|\bheart\b|chest pain|cardio"
        ),
    ),
    (
        Specialty.NEUROLOGY,
        re.compile(
            r"đau đầu|nhức đầu|đau nửa đầu|chóng mặt|hoa mắt|co giật|tê bì|đột quỵ"
            r"|mất ngủ|thần kinh|headache|migraine|dizz|seizure"
        ),
    ),
    (
        Specialty.RESPIRATORY,
        re.compile(
            r"\bho\b|khó thở|hen suyễn|viêm phổi|\bphổi\b|khò khè|\bđờm\b|hô hấp"
            r"|\bcough|asthma|short of breath"
        ),
    ),
    (
        Specialty.GASTROENTEROLOGY,
        re.compile(
            r"đau bụng|tiêu chảy|táo bón|buồn nôn|\bnôn\b|dạ dày|ợ chua|đầy hơi"
            r"|tiêu hóa|stomach|diarrh|nausea|vomit"
        ),
    ),
    (
        Specialty.DERMATOLOGY,
        re.compile(
            r"\bngứa\b|phát ban|mẩn đỏ|mề đay|\bmụn\b|da liễu|nổi mẩn"
            r"|\brash\b|\bskin\b|eczema|acne"
        ),
    ),
    (
        Specialty.ENT,
        re.compile(
            r"đau họng|viêm họng|ù tai|đau tai|nghẹt mũi|sổ mũi|viêm xoang"
            r"|tai mũi họng|sore throat|\bsinus|\bear\b"
        ),
    ),
    (
        Specialty.MUSCULOSKELETAL,
        re.compile(
            r"đau lưng|đau khớp|\bxương\b|\bkhớp\b|đau vai|đau gối|bong gân"
            r"|back pain|\bjoint|\bknee|sprain"
        ),
    ),
    (
        Specialty.OPHTHALMOLOGY,
        re.compile(r"\bmắt\b|nhìn mờ|mờ mắt|\beyes?\b|blurred vision"),
    ),
    (
        Specialty.OBSTETRICS,
        re.compile(
            r"mang thai|có thai|\bthai\b|kinh nguyệt|phụ khoa|sản khoa|pregnan"
            r"|menstrua"
        ),
    ),
    (
        Specialty.PEDIATRICS,
        re.compile(r"\bbé\b|trẻ em|trẻ sơ sinh|con tôi|\bchild|\bbaby|\bkids?\b"),
    ),
]

# Same order, matched on diacritic-folded text when no accented rule fires.
# Words that collide once folded (tìm/tim, còn tôi/con tôi, hội họp/hồi hộp)
# are left out.
UNACCENTED_SPECIALTY_RULES: list[tuple[Specialty, re.Pattern]] = [
    (
        Specialty.CARDIOLOGY,
        re.compile(
            r"tim mach|dau nguc|tuc nguc|huyet ap|danh trong nguc"
            r"|dau tim|benh tim"
        ),
    ),
    (
        Specialty.NEUROLOGY,
        re.compile(
            r"dau dau|nhuc dau|dau nua dau|chong mat|hoa mat|co giat|\bte bi\b"
            r"|dot quy|mat ngu|than kinh"
        ),
    ),
    (
        Specialty.RESPIRATORY,
        re.compile(r"\bbi ho\b|kho tho|hen suyen|viem phoi|kho khe|ho hap"),
    ),
    (
        Specialty.GASTROENTEROLOGY,
        re.compile(
            r"dau bung|tieu chay|tao bon|buon non|(dau|viem|benh) da day|\bo chua\b"
            r"|day hoi|tieu hoa"
        ),
    ),
    (
        Specialty.DERMATOLOGY,
        re.compile(r"bi ngua|ngua ngay|phat ban|man do|me day|\bmun\b|da lieu|noi man"),
    ),
    (
        Specialty.ENT,
        re.compile(
            r"dau hong|viem hong|\bu tai\b|dau tai|nghet mui|so mui|viem xoang"
            r"|tai mui hong"
        ),
    ),
    (
        Specialty.MUSCULOSKELETAL,
        re.compile(r"dau lung|dau khop|dau xuong|gay xuong|dau vai|dau goi|bong gan"),
    ),
    (
        Specialty.OPHTHALMOLOGY,
        re.compile(r"dau mat do|nhin mo|mat mo|kho mat"),
    ),
    (
        Specialty.OBSTETRICS,
        re.compile(r"mang thai|co thai|kinh nguyet|phu khoa|san khoa"),
    ),
    (
        Specialty.PEDIATRICS,
        re.compile(r"tre em|tre so sinh|\bem be\b|\bbe nha\b"),
    ),
]


def _first_match(text: str, rules: list[tuple[Specialty, re.Pattern]]) -> Specialty | None:
    for specialty, pattern in rules:
        if pattern.search(text):
            return specialty
    return None


def match_specialty(symptoms: str) -> Specialty:
    """
    Returns the specialty of the first rule matching the symptom text.
    Accented rules take precedence; unaccented input is matched against
    the folded rules. Unmatched or empty text falls back to general medicine.
    """
    text = lowercase_text(symptoms)
    if not text:
        return Specialty.GENERAL
    specialty = _first_match(text, SPECIALTY_RULES) or _first_match(
        fold_diacritics(text), UNACCENTED_SPECIALTY_RULES
    )
    return specialty or Specialty.GENERAL
