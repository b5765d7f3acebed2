"""Resolve free-text insurance names to a canonical category.

Insurance types are named in Turkish or English ("Konut Sigortası",
"İş Yeri", "Travel Insurance"), so names are folded to lowercase ASCII
before being matched against a keyword table.
"""

from typing import Optional, Tuple

from insurance_api.schemas.enums import InsuranceCategory

_TURKISH_FOLD = str.maketrans({
    "ı": "i",
    "ş": "s",
    "ğ": "g",
    "ü": "u",
    "ö": "o",
    "ç": "c",
    "â": "a",
    "î": "i",
    "û": "u",
})

_SUFFIXES = ("sigortasi", "sigorta", "insurance")

# Checked in order; first keyword contained in the folded name wins.
_KEYWORDS: Tuple[Tuple[InsuranceCategory, Tuple[str, ...]], ...] = (
    (InsuranceCategory.AUTO, ("trafik", "kasko", "arac", "auto", "traffic", "motor")),
    (InsuranceCategory.TRAVEL, ("seyahat", "travel")),
    (InsuranceCategory.HOME, ("konut", "home")),
    (InsuranceCategory.WORKPLACE, ("is yeri", "isyeri", "workplace")),
    (InsuranceCategory.HEALTH, ("saglik", "health")),
    (InsuranceCategory.LIFE, ("hayat", "life")),
)


def fold_name(value: Optional[str]) -> str:
    """Fold a Turkish/English label to lowercase ASCII without the product suffix.

    >>> fold_name("İş Yeri Sigortası")
    'is yeri'
    """
    if not value:
        return ""
    # "İ".lower() yields "i" + U+0307; fold it before casefolding
    folded = value.replace("İ", "i").replace("I", "i").casefold().replace("\u0307", "")
    folded = folded.translate(_TURKISH_FOLD)
    folded = " ".join(folded.split())
    for suffix in _SUFFIXES:
        if folded.endswith(suffix):
            folded = folded[: -len(suffix)].strip()
            break
    return folded


def resolve_category(*names: Optional[str]) -> Optional[InsuranceCategory]:
    """Return the category of the first name that matches a keyword."""
    for name in names:
        folded = fold_name(name)
        if not folded:
            continue
        for category, keywords in _KEYWORDS:
            if any(keyword in folded for keyword in keywords):
                return category
    return None


def resolve_type_category(insurance_type) -> Optional[InsuranceCategory]:
    """Resolve an insurance type by its name first, then its category label."""
    if insurance_type is None:
        return None
    return resolve_category(insurance_type.name, insurance_type.category)


def same_department(agent_department: Optional[str], offer_department: Optional[str]) -> bool:
    """Compare department labels by resolved category, else by folded text."""
    left = resolve_category(agent_department)
    right = resolve_category(offer_department)
    if left is not None and right is not None:
        return left == right
    return fold_name(agent_department) == fold_name(offer_department) != ""
