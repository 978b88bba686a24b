"""Tests for localized strings and the Arabic schedule-label rules."""

from __future__ import annotations

import pytest

from uptown_docs.documents.labels import (
    BRAND,
    DISCLAIMER,
    LABEL_RULES,
    TERMS_AND_CONDITIONS,
    arabic_label,
    schedule_label,
    text,
)


class TestArabicLabel:
    @pytest.mark.parametrize(
        ("label", "expected"),
        [
            ("Down Payment", "دفعة التعاقد"),
            ("down payment (10%)", "دفعة التعاقد"),
            ("Equal Installment 3", "قسط متساوي"),
            ("Handover", "التسليم"),
            ("Maintenance Deposit", "وديعة الصيانة"),
            ("Garage Fee", "مصروفات الجراج"),
        ],
    )
    def test_token_rules(self, label: str, expected: str) -> None:
        assert arabic_label(label) == expected

    def test_rule_order_first_match_wins(self) -> None:
        # Contains both "down payment" and "maintenance"
        assert arabic_label("Down payment incl. maintenance") == "دفعة التعاقد"

    @pytest.mark.parametrize(
        ("label", "expected"),
        [
            ("Year 1 (monthly)", "سنة 1 (شهري)"),
            ("Year 3 (quarterly)", "سنة 3 (ربع سنوي)"),
            ("Year 2 (bi-annual)", "سنة 2 (نصف سنوي)"),
            ("Year 4 (annual)", "سنة 4 (سنوي)"),
            ("year 5 (yearly", "سنة 5 (سنوي)"),
        ],
    )
    def test_year_pattern(self, label: str, expected: str) -> None:
        assert arabic_label(label) == expected

    def test_unmatched_passes_through(self) -> None:
        assert arabic_label("Bonus payment") == "Bonus payment"
        assert arabic_label("Year without frequency") == "Year without frequency"

    def test_empty(self) -> None:
        assert arabic_label("") == ""

    def test_rules_are_data(self) -> None:
        assert [token for token, _ in LABEL_RULES] == [
            "down payment",
            "equal installment",
            "handover",
            "maintenance",
            "garage fee",
        ]


class TestScheduleLabel:
    def test_only_rewritten_for_arabic(self) -> None:
        assert schedule_label("Down Payment", "en") == "Down Payment"
        assert schedule_label("Down Payment", "ar") == "دفعة التعاقد"


class TestFixedStrings:
    def test_disclaimers(self) -> None:
        assert DISCLAIMER["ar"] == (
            "هذا المستند ليس عقدًا وهو مُعد لعرض الأسعار للعميل فقط. قد تختلف القيم عند التعاقد النهائي."
        )
        assert DISCLAIMER["en"] == (
            "This document is not a contract and is generated for client viewing only. "
            "Values are indicative and subject to final contract."
        )

    def test_brand(self) -> None:
        assert BRAND["ar"] == "نظام شركة أبتاون 6 أكتوبر المالي"
        assert BRAND["en"] == "Uptown 6 October Financial System"

    def test_four_terms_each_locale(self) -> None:
        assert len(TERMS_AND_CONDITIONS["en"]) == 4
        assert len(TERMS_AND_CONDITIONS["ar"]) == 4
        assert "(20%)" in TERMS_AND_CONDITIONS["en"][3]

    def test_text_lookup(self) -> None:
        assert text("no_data", "en") == "No data"
        assert text("no_data", "ar") == "لا توجد بيانات"
        assert text("no_client_data", "en") == "No client data"
