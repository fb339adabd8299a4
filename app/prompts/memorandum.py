"""
Legal Memorandum Prompts

System and user prompts for drafting court memorandums in Arabic or English.
The two languages have their own drafting guidelines rather than translations
of each other.
"""

from enum import Enum
from typing import Optional

MEMO_TYPES = {
    "defense_memorandum": {"en": "Defense Memorandum", "ar": "مذكرة دفاع"},
    "response_memorandum": {"en": "Response Memorandum", "ar": "مذكرة رد"},
    "reply_memorandum": {"en": "Reply Memorandum", "ar": "مذكرة جوابية"},
    "statement_of_claim": {"en": "Statement of Claim", "ar": "صحيفة دعوى"},
    "appeal_memorandum": {"en": "Appeal Memorandum", "ar": "مذكرة استئناف"},
    "legal_motion": {"en": "Legal Motion", "ar": "طلب قانوني"},
}

STRENGTHS = {
    "strong": {"en": "assertive and compelling", "ar": "قوية ومقنعة"},
    "neutral": {"en": "balanced and objective", "ar": "متوازنة وموضوعية"},
    "defensive": {"en": "cautious and protective", "ar": "حذرة ودفاعية"},
}

ENGLISH_SYSTEM_TEMPLATE = """You are an expert lawyer specializing in drafting legal memorandums in English.

DOCUMENT TYPE: {memo_type}
WRITING STYLE: {strength}

DRAFTING GUIDELINES:
1. Use formal legal English appropriate for court submissions
2. Follow the standard structure of a {memo_type}: heading, parties and case reference, facts, legal analysis, requests
3. Analyse the facts as provided; do not assume facts that were not given
4. Use established legal terminology and phrasing
5. Do not cite any law, article, regulation or case reference that does not appear in the information provided
6. Draft this memorandum for this case only; ignore any other matter, party or earlier request
7. Keep the arguments coherent and the tone {strength}
8. Conclude with clear and specific requests/prayers

Draft the legal memorandum based on the following information:"""

ARABIC_SYSTEM_TEMPLATE = """أنت محامٍ متمرس في إعداد المذكرات القانونية وصياغتها باللغة العربية الفصحى.

نوع المذكرة: {memo_type}
أسلوب الصياغة: {strength}

ضوابط الصياغة:
1. اكتب بلغة قانونية فصحى تليق بالمخاطبة أمام القضاء
2. رتّب المذكرة وفق الترتيب المعتمد: الديباجة، ثم بيانات الخصوم والقضية، ثم الوقائع، ثم الأسانيد والدفوع، ثم الطلبات
3. ابنِ التحليل على الوقائع الواردة فقط، ولا تفترض وقائع لم تُذكر
4. لا تستشهد بأي نظام أو مادة أو لائحة أو سابقة قضائية غير واردة في المعلومات المقدمة
5. هذه المذكرة خاصة بهذه القضية وحدها، فلا تخلطها بأي قضية أو خصوم أو طلبات سابقة
6. اجعل الحجج مترابطة ومتدرجة بأسلوب {strength}
7. اختم المذكرة بطلبات واضحة ومحددة

قم بصياغة المذكرة القانونية بناءً على المعلومات التالية:"""


def _key(value) -> str:
    return value.value if isinstance(value, Enum) else value


def _describe(table, value, language: str) -> str:
    """Look up a descriptor; unknown values pass through verbatim."""
    key = _key(value)
    entry = table.get(key)
    if entry is None:
        return key
    return entry[language]


def _is_arabic(language) -> bool:
    return _key(language) == "ar"


def build_memorandum_prompt(type: str, language: str, strength: str) -> str:
    """Build the system prompt for drafting a memorandum."""
    output_language = "ar" if _is_arabic(language) else "en"
    template = ARABIC_SYSTEM_TEMPLATE if output_language == "ar" else ENGLISH_SYSTEM_TEMPLATE

    return template.format(
        memo_type=_describe(MEMO_TYPES, type, output_language),
        strength=_describe(STRENGTHS, strength, output_language),
    )


def build_memorandum_user_prompt(
    language: str,
    court_name: str,
    case_number: str,
    case_facts: str,
    legal_requests: str,
    defense_points: Optional[str] = None
) -> str:
    """Lay out the case details as the user message."""
    has_defense_points = bool(defense_points and defense_points.strip())

    if _is_arabic(language):
        prompt = (
            f"اسم المحكمة: {court_name}\n"
            f"رقم القضية: {case_number}\n\n"
            f"وقائع القضية:\n{case_facts}\n\n"
            f"الطلبات القانونية:\n{legal_requests}"
        )
        if has_defense_points:
            prompt += f"\n\nنقاط الدفاع:\n{defense_points}"
        return prompt

    prompt = (
        f"Court Name: {court_name}\n"
        f"Case Number: {case_number}\n\n"
        f"Case Facts:\n{case_facts}\n\n"
        f"Legal Requests:\n{legal_requests}"
    )
    if has_defense_points:
        prompt += f"\n\nDefense Points:\n{defense_points}"
    return prompt
