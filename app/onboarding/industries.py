from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Industry:
    name: str
    subcategories: tuple[str, ...]


INDUSTRIES: tuple[Industry, ...] = (
    Industry(
        "Technology",
        ("Software Development", "Data Science", "Cybersecurity", "Cloud Computing", "AI/ML"),
    ),
    Industry(
        "Healthcare",
        ("Nursing", "Medical Research", "Healthcare Administration", "Pharmacy", "Medical Technology"),
    ),
    Industry(
        "Finance",
        ("Investment Banking", "Financial Analysis", "Accounting", "Risk Management", "Fintech"),
    ),
    Industry(
        "Marketing",
        ("Digital Marketing", "Content Marketing", "Brand Management", "SEO/SEM", "Social Media"),
    ),
    Industry(
        "Education",
        ("Teaching", "Educational Technology", "Curriculum Development", "Administration", "Online Learning"),
    ),
    Industry(
        "Engineering",
        ("Mechanical", "Electrical", "Civil", "Chemical", "Aerospace"),
    ),
)

_BY_NAME = {industry.name: industry for industry in INDUSTRIES}


def industry_names() -> list[str]:
    return [industry.name for industry in INDUSTRIES]


def find_industry(name: str) -> Industry | None:
    return _BY_NAME.get(name)


def sub_industries_for(name: str) -> list[str]:
    industry = find_industry(name)
    if industry is None:
        return []
    return list(industry.subcategories)
