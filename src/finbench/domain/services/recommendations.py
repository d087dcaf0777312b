"""Bilingual recommendation templates keyed by analysis category and tier."""
from __future__ import annotations

from typing import Dict, Optional, Tuple

from finbench.domain.catalog.definitions import Category
from finbench.domain.models.results import BilingualText, Tier

_T = BilingualText

TEMPLATES: Dict[Tuple[Category, Tier], BilingualText] = {
    (Category.CLASSICAL_RATIO, Tier.EXCELLENT): _T(
        ar="أداء {name} متفوق على متوسط القطاع؛ يُنصح بالمحافظة على السياسات الحالية.",
        en="{name} is well ahead of the industry average; maintain current policies.",
    ),
    (Category.CLASSICAL_RATIO, Tier.VERY_GOOD): _T(
        ar="أداء {name} أفضل من متوسط القطاع؛ تابع المؤشر لضمان استمرار التفوق.",
        en="{name} is above the industry average; keep monitoring to sustain the lead.",
    ),
    (Category.CLASSICAL_RATIO, Tier.GOOD): _T(
        ar="أداء {name} قريب من متوسط القطاع؛ ابحث عن فرص تحسين تدريجية.",
        en="{name} is in line with the industry average; look for incremental improvements.",
    ),
    (Category.CLASSICAL_RATIO, Tier.ACCEPTABLE): _T(
        ar="أداء {name} دون متوسط القطاع؛ راجع العوامل المؤثرة وضع خطة تحسين.",
        en="{name} trails the industry average; review its drivers and plan improvements.",
    ),
    (Category.CLASSICAL_RATIO, Tier.WEAK): _T(
        ar="أداء {name} ضعيف مقارنة بالقطاع؛ يتطلب إجراءات تصحيحية عاجلة.",
        en="{name} is weak against the industry; corrective action is needed promptly.",
    ),
    (Category.STRUCTURAL, Tier.EXCELLENT): _T(
        ar="هيكل {name} متفوق على نظرائه في القطاع؛ حافظ على هذا التوازن.",
        en="The structure of {name} compares very favourably with peers; preserve this balance.",
    ),
    (Category.STRUCTURAL, Tier.VERY_GOOD): _T(
        ar="هيكل {name} أفضل من المعتاد في القطاع.",
        en="The structure of {name} is better than is typical for the industry.",
    ),
    (Category.STRUCTURAL, Tier.GOOD): _T(
        ar="هيكل {name} متوافق مع متوسط القطاع.",
        en="The structure of {name} is consistent with the industry average.",
    ),
    (Category.STRUCTURAL, Tier.ACCEPTABLE): _T(
        ar="هيكل {name} يميل إلى الضعف؛ راجع توزيع البنود وتطورها عبر السنوات.",
        en="The structure of {name} is drifting unfavourably; review item mix and its evolution.",
    ),
    (Category.STRUCTURAL, Tier.WEAK): _T(
        ar="هيكل {name} غير متوازن مقارنة بالقطاع؛ يلزم إعادة هيكلة البنود المعنية.",
        en="The structure of {name} is out of balance with the industry; restructuring is advisable.",
    ),
    (Category.CASH_FLOW, Tier.EXCELLENT): _T(
        ar="{name} يعكس قدرة نقدية قوية؛ يمكن توظيف الفائض في فرص النمو.",
        en="{name} shows strong cash generation; surplus cash can fund growth opportunities.",
    ),
    (Category.CASH_FLOW, Tier.VERY_GOOD): _T(
        ar="{name} يعكس وضعا نقديا جيدا جدا مقارنة بالقطاع.",
        en="{name} reflects a cash position better than the industry.",
    ),
    (Category.CASH_FLOW, Tier.GOOD): _T(
        ar="{name} في حدود المعتاد؛ حافظ على انضباط إدارة النقد.",
        en="{name} is within the usual range; keep cash management disciplined.",
    ),
    (Category.CASH_FLOW, Tier.ACCEPTABLE): _T(
        ar="{name} أقل من المستوى المرغوب؛ راجع دورة التحصيل والإنفاق الرأسمالي.",
        en="{name} is below the desired level; review collections and capital spending.",
    ),
    (Category.CASH_FLOW, Tier.WEAK): _T(
        ar="{name} يشير إلى ضغط نقدي؛ ضع خطة عاجلة لتعزيز السيولة.",
        en="{name} points to cash pressure; put an urgent liquidity plan in place.",
    ),
    (Category.ADVANCED, Tier.EXCELLENT): _T(
        ar="مؤشر {name} ممتاز ويدل على متانة مالية عالية.",
        en="{name} is excellent and signals high financial resilience.",
    ),
    (Category.ADVANCED, Tier.VERY_GOOD): _T(
        ar="مؤشر {name} جيد جدا ويدل على وضع مستقر.",
        en="{name} is very good and signals a stable position.",
    ),
    (Category.ADVANCED, Tier.GOOD): _T(
        ar="مؤشر {name} ضمن النطاق الطبيعي للقطاع.",
        en="{name} is within the normal range for the industry.",
    ),
    (Category.ADVANCED, Tier.ACCEPTABLE): _T(
        ar="مؤشر {name} يستدعي المتابعة الدقيقة خلال الفترات القادمة.",
        en="{name} warrants close monitoring over the coming periods.",
    ),
    (Category.ADVANCED, Tier.WEAK): _T(
        ar="مؤشر {name} يكشف مخاطر مرتفعة؛ يُنصح بتحليل معمق لأسبابه.",
        en="{name} reveals elevated risk; an in-depth review of its causes is advised.",
    ),
}

NO_BENCHMARK = _T(
    ar="لا يتوفر معيار صناعي صالح لـ{name}؛ فسّر القيمة بحذر.",
    en="No usable industry benchmark for {name}; interpret the value with care.",
)


def recommend(category: Category, tier: Optional[Tier], name: BilingualText) -> BilingualText:
    """Pick the template for ``(category, tier)`` and fill in the analysis name per language."""
    template = NO_BENCHMARK if tier is None else TEMPLATES[(category, tier)]
    return BilingualText(ar=template.ar.format(name=name.ar), en=template.en.format(name=name.en))
