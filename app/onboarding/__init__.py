from .industries import INDUSTRIES, Industry, find_industry, industry_names, sub_industries_for

__all__ = ["INDUSTRIES", "Industry", "find_industry", "industry_names", "sub_industries_for"]
