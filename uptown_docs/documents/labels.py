"""Localized strings and the Arabic schedule-label rewrite rules.

Rewrite rules are data: an ordered table of (English token, Arabic label)
substring matches, then the `Year N (frequency)` pattern. They are applied
only to right-to-left documents; labels no rule matches pass through.
"""

from __future__ import annotations

import re

from uptown_docs.documents.locale import ARABIC

# ── Schedule label rewrite rules ─────────────────────────────────────

LABEL_RULES: tuple[tuple[str, str], ...] = (
    ("down payment", "دفعة التعاقد"),
    ("equal installment", "قسط متساوي"),
    ("handover", "التسليم"),
    ("maintenance", "وديعة الصيانة"),
    ("garage fee", "مصروفات الجراج"),
)

FREQUENCY_RULES: tuple[tuple[str, str], ...] = (
    ("monthly", "شهري"),
    ("quarter", "ربع سنوي"),
    ("bi", "نصف سنوي"),
)
DEFAULT_FREQUENCY_AR = "سنوي"

_YEAR_PATTERN = re.compile(r"^year\s+(\d+)\s*\(([^)]+)\)?", re.IGNORECASE)


def arabic_label(label: str) -> str:
    """Rewrite an English schedule label into its Arabic equivalent."""
    if not label:
        return ""
    lowered = label.lower()
    for token, arabic in LABEL_RULES:
        if token in lowered:
            return arabic

    m = _YEAR_PATTERN.match(label.strip())
    if m:
        frequency = m.group(2).lower()
        freq_ar = next((ar for token, ar in FREQUENCY_RULES if token in frequency), DEFAULT_FREQUENCY_AR)
        return f"سنة {m.group(1)} ({freq_ar})"
    return label


def schedule_label(label: str, lang: str) -> str:
    return arabic_label(label) if lang == ARABIC else label


# ── Fixed strings ────────────────────────────────────────────────────

BRAND = {
    "en": "Uptown 6 October Financial System",
    "ar": "نظام شركة أبتاون 6 أكتوبر المالي",
}

DISCLAIMER = {
    "en": "This document is not a contract and is generated for client viewing only. "
    "Values are indicative and subject to final contract.",
    "ar": "هذا المستند ليس عقدًا وهو مُعد لعرض الأسعار للعميل فقط. قد تختلف القيم عند التعاقد النهائي.",
}

TERMS_AND_CONDITIONS = {
    "en": (
        "The Client may not assign this Reservation Form to third parties without written approval "
        "from the Company.",
        "The Client commits to delivering checks to the Company within a maximum of (15) fifteen days "
        "from the date of this Reservation Form. This period may be extended with Company approval if "
        "the delay is due to Client bank procedures.",
        "This Form ceases to be effective immediately upon the Client signing the Purchase Contract, "
        "at which point the Contract terms apply and replace this Form.",
        "In the event the Client wishes to withdraw from the sale before receiving the Contract, they "
        "must notify the Company in writing. In this case, (20%) of the Down Payment will be deducted.",
    ),
    "ar": (
        "لا يجوز للعميل التنازل عن استمارة الحجز للغير إلا بموافقة كتابية من الشركة.",
        "يلتزم العميل بتسليم الشيكات للشركة في مدة أقصاها (15) خمسة عشر يوم من تاريخ تحرير استمارة "
        "الحجز، يجوز مد المدة بموافقة الشركة اذا كان سبب التأخير راجع لإجراءات بنك العميل.",
        "ينتهي العمل بهذه الاستمارة فور توقيع العميل على عقد الشراء وتطبق بنود العقد ويحل محل هذه الاستمارة.",
        "في حالة رغبة العميل، في العدول عن إتمام البيع قبل استلامه للعقد، يقوم بإخطار الشركة برغبته في "
        "ذلك كتابة وفي هذه الحالة يخصم من العميل (20%) من الدفعة المقدمة.",
    ),
}

SIGNATURE_ROLES = {
    "en": ("Reservation Officer", "Accounts Manager", "Client"),
    "ar": ("مسئول الحجز", "مدير الحسابات", "العميل"),
}

# key → (English, Arabic)
_TEXT: dict[str, tuple[str, str]] = {
    # shared
    "generated": ("Generated", "تم الإنشاء"),
    "consultant": ("Property Consultant", "المستشار العقاري"),
    "unit": ("Unit", "الوحدة"),
    "buyer": ("Buyer", "العميل"),
    "name": ("Name", "الاسم"),
    "phone": ("Phone", "الهاتف"),
    "email": ("Email", "البريد الإلكتروني"),
    "nationality": ("Nationality", "الجنسية"),
    "id_or_passport": ("ID/Passport", "الرقم القومي / جواز السفر"),
    "id_issue_date": ("ID Issue Date", "تاريخ الإصدار"),
    "birth_date": ("Birth Date", "تاريخ الميلاد"),
    "address": ("Address", "العنوان"),
    "no_client_data": ("No client data", "لا يوجد بيانات عملاء"),
    "no_data": ("No data", "لا توجد بيانات"),
    "page": ("Page", "صفحة"),
    "of": ("of", "من"),
    # client offer
    "client_offer": ("Client Offer", "عرض السعر للعميل"),
    "offer_date": ("Offer Date", "تاريخ العرض"),
    "first_payment": ("First Payment", "تاريخ أول دفعة"),
    "payment_plan": ("Payment Plan", "خطة السداد"),
    "month": ("Month", "الشهر"),
    "label": ("Label", "الوصف"),
    "amount": ("Amount", "القيمة"),
    "date": ("Date", "التاريخ"),
    "amount_in_words": ("Amount in Words", "المبلغ بالحروف"),
    "schedule_total": ("Schedule Total", "إجمالي الدفعات"),
    "base": ("Base", "السعر الأساسي"),
    "garden": ("Garden", "الحديقة"),
    "roof": ("Roof", "السطح"),
    "storage": ("Storage", "غرفة التخزين"),
    "garage": ("Garage", "الجراج"),
    "maintenance": ("Maintenance Deposit", "وديعة الصيانة"),
    "total_excl": ("Total (excl. maintenance)", "الإجمالي (بدون وديعة الصيانة)"),
    "total_incl": ("Total (incl. maintenance)", "الإجمالي (شامل وديعة الصيانة)"),
    # reservation form
    "reservation_form": ("Reservation Form", "استمارة حجز وحدة"),
    "project": ("Uptown Residence Project - Uptown 6 October", "مشروع ابتاون ريزيدنس - حي ابتاون 6 أكتوبر"),
    "intro": (
        "A unit reservation has been registered on",
        "تم تسجيل حجز وحدة يوم",
    ),
    "dated": ("dated", "الموافق"),
    "reservation_date": ("Reservation Date", "تاريخ الحجز"),
    "client_information": ("Client Information", "بيانات العملاء"),
    "unit_information": ("Unit Information", "بيانات الوحدة"),
    "unit_type": ("Unit Type", "نوع الوحدة"),
    "unit_area": ("Unit Area", "مساحة الوحدة"),
    "garden_area": ("Garden Area", "مساحة الحديقة"),
    "unit_code": ("Unit Code", "كود الوحدة"),
    "building": ("Building", "رقم المبنى"),
    "block_sector": ("Block / Sector", "رقم البلوك"),
    "zone": ("Zone", "رقم المجاورة"),
    "financial_details": ("Financial Details", "البيانات المالية"),
    "item": ("Item", "البند"),
    "words": ("Amount in Words", "المبلغ بالحروف"),
    "rf_total_excl": ("Total price excl. maintenance", "إجمالي سعر الوحدة بدون وديعة الصيانة"),
    "rf_maintenance": ("Maintenance deposit", "وديعة الصيانة"),
    "rf_total_incl": ("Total price incl. maintenance", "إجمالي سعر الوحدة شامل وديعة الصيانة"),
    "dp_total": ("Total Down Payment", "إجمالي دفعة المقدم"),
    "dp_preliminary": ("Preliminary payment at reservation", "الدفعة المبدئية عند الحجز"),
    "dp_paid": ("Amounts paid from Down Payment value", "مبالغ مدفوعة من قيمة دفعة المقدم"),
    "dp_remaining": ("Remaining from Down Payment value", "المتبقي من قيمة دفعة المقدم"),
    "remaining_balance": ("Remaining amount to be paid per attached schedule", "يتم سداد باقي المبلغ طبقا لملحق السداد المرفق"),
    "paid_on": ("Paid on", "تم سدادها بتاريخ"),
    "terms": ("General Agreed Conditions", "شروط عامة متفق عليها"),
    "only": ("only", "لاغير"),
}


def text(key: str, lang: str) -> str:
    """Localized string for `key`."""
    en, ar = _TEXT[key]
    return ar if lang == ARABIC else en
