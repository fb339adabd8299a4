"""
Legal Translation Prompts

System prompt for translating legal text between Arabic and English.
The instruction template is written in the target language.
"""

from enum import Enum
from typing import Dict

LANGUAGE_NAMES = {
    "ar": {"en": "Arabic", "ar": "العربية"},
    "en": {"en": "English", "ar": "الإنجليزية"},
}

DOCUMENT_TYPES = {
    "legal_memorandum": {"en": "legal memorandum", "ar": "مذكرة قانونية"},
    "contract": {"en": "contract", "ar": "عقد"},
    "statement_of_claim": {"en": "statement of claim", "ar": "صحيفة دعوى"},
    "court_judgment": {"en": "court judgment", "ar": "حكم قضائي"},
    "legal_correspondence": {"en": "legal correspondence", "ar": "مراسلة قانونية"},
}

PURPOSES = {
    "court": {"en": "court submission", "ar": "تقديم إلى المحكمة"},
    "internal": {"en": "internal use", "ar": "استخدام داخلي"},
    "client": {"en": "client communication", "ar": "مراسلة الموكل"},
}

TONES = {
    "formal": {"en": "highly formal and ceremonial", "ar": "رسمي للغاية ووقور"},
    "professional": {"en": "professional and business-like", "ar": "مهني وعملي"},
    "concise": {"en": "clear and concise", "ar": "واضح وموجز"},
}

JURISDICTIONS = {
    "qatar": {"en": "Qatari legal system", "ar": "النظام القانوني القطري"},
    "gcc": {"en": "GCC regional legal standards", "ar": "المعايير القانونية لدول مجلس التعاون الخليجي"},
    "neutral": {"en": "international legal standards", "ar": "المعايير القانونية الدولية"},
}

ENGLISH_TEMPLATE = """You are an expert legal translator specializing in {source_lang} to {target_lang} translation for legal documents.

DOCUMENT TYPE: {document_type}
PURPOSE: {purpose}
TONE: {tone}
JURISDICTION: {jurisdiction}

TRANSLATION GUIDELINES:
1. Provide context-aware legal translation (not literal word-for-word)
2. Preserve legal terminology accuracy and precision
3. Keep the register {tone} throughout
4. Use wording and phrasing customary in the {jurisdiction}
5. Keep the original structure, numbering and formatting where appropriate
6. Render every legal term with its established equivalent
7. Do not add any legal citation, statute, article number or case reference that is not present in the source text
8. Treat this text as a standalone document: do not bring in names, facts or terms from any other case or earlier request
9. Do not add explanations or notes - provide only the translation

Translate the following legal text from {source_lang} to {target_lang}:"""

ARABIC_TEMPLATE = """أنت مترجم قانوني محترف، تنقل الوثائق القانونية من {source_lang} إلى {target_lang} بدقة وأمانة.

نوع الوثيقة: {document_type}
الغرض من الترجمة: {purpose}
الأسلوب المطلوب: {tone}
المرجعية القانونية: {jurisdiction}

قواعد الترجمة:
1. انقل المعنى القانوني في سياقه، ولا تكتفِ بالترجمة الحرفية كلمة بكلمة
2. التزم بالمصطلح القانوني المستقر في {jurisdiction}
3. حافظ على أسلوب {tone} من أول النص إلى آخره
4. أبقِ على تقسيم النص وترقيمه وتنسيقه كما ورد في الأصل قدر الإمكان
5. لا تُضف أي نص نظامي أو رقم مادة أو سابقة قضائية أو مرجع لم يرد في النص الأصلي
6. تعامل مع هذا النص بوصفه وثيقة مستقلة، ولا تستحضر أسماء أو وقائع أو مصطلحات من أي قضية أخرى أو طلب سابق
7. لا تكتب أي شرح أو تعليق أو ملاحظة؛ اكتب الترجمة وحدها

ترجم النص القانوني التالي من {source_lang} إلى {target_lang}:"""


def _key(value) -> str:
    return value.value if isinstance(value, Enum) else value


def _describe(table: Dict[str, Dict[str, str]], value, language: str) -> str:
    """Look up a descriptor; unknown values pass through verbatim."""
    key = _key(value)
    entry = table.get(key)
    if entry is None:
        return key
    return entry[language]


def build_translation_prompt(
    source_language: str,
    target_language: str,
    document_type: str,
    purpose: str,
    tone: str,
    jurisdiction: str
) -> str:
    """Build the system prompt for a legal translation request."""
    instruction_language = "ar" if _key(target_language) == "ar" else "en"
    template = ARABIC_TEMPLATE if instruction_language == "ar" else ENGLISH_TEMPLATE

    return template.format(
        source_lang=_describe(LANGUAGE_NAMES, source_language, instruction_language),
        target_lang=_describe(LANGUAGE_NAMES, target_language, instruction_language),
        document_type=_describe(DOCUMENT_TYPES, document_type, instruction_language),
        purpose=_describe(PURPOSES, purpose, instruction_language),
        tone=_describe(TONES, tone, instruction_language),
        jurisdiction=_describe(JURISDICTIONS, jurisdiction, instruction_language),
    )
