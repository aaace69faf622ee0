#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
分类器模块：基于关键词规则推断数据源类型、来源置信度、指标分类与颗粒层级

每个分类器都是一个有序的 (判定, 结果) 规则列表，自上而下评估，
第一条命中的规则生效，全部未命中时使用兜底结果。
"""

from typing import List, Sequence

import keywords as kw
from keyword_matcher import Rule, contains_any, first_match
from logger import logger
from models import GranularityLevel, IndicatorCategory, SourceConfidence, SourceType


def classify_source_type(source_name: str) -> SourceType:
    """根据数据来源名称判断数据源类型"""
    rules: List[Rule] = [
        (lambda: contains_any(source_name, kw.GOVERNMENT_KEYWORDS), SourceType.GOVERNMENT),
        (lambda: contains_any(source_name, kw.ASSOCIATION_KEYWORDS), SourceType.ASSOCIATION),
        (lambda: contains_any(source_name, kw.INTERNATIONAL_ORG_KEYWORDS), SourceType.INTERNATIONAL_ORG),
        (lambda: contains_any(source_name, kw.EXCHANGE_KEYWORDS), SourceType.INDUSTRY_WEBSITE),
        (lambda: contains_any(source_name, kw.CONSULTANCY_KEYWORDS), SourceType.CONSULTANCY),
        (lambda: contains_any(source_name, kw.COMPANY_KEYWORDS), SourceType.ENTERPRISE),
        (lambda: contains_any(source_name, kw.MEDIA_KEYWORDS), SourceType.NEWS_MEDIA),
        (lambda: contains_any(source_name, kw.INDEX_KEYWORDS), SourceType.PRICE_INDEX),
    ]
    result = first_match(rules, SourceType.OTHER)
    logger.debug(f"数据源 {source_name} 的类型判定为 {result.value}")
    return result


def classify_confidence(source_name: str) -> SourceConfidence:
    """
    根据数据来源名称判断来源置信度。

    官方/统计/央行/交易所为 L3，协会/研究院/咨询/智库为 L2，其余为 L1。
    L0 只表示置信度从未设置，不会由本函数产生。
    """
    rules: List[Rule] = [
        (lambda: contains_any(source_name, kw.OFFICIAL_SOURCE_KEYWORDS), SourceConfidence.L3),
        (lambda: contains_any(source_name, kw.PROFESSIONAL_SOURCE_KEYWORDS), SourceConfidence.L2),
    ]
    result = first_match(rules, SourceConfidence.L1)
    logger.debug(f"数据源 {source_name} 的置信度判定为 {result.value}")
    return result


def _entity_categories(name: str, source_name: str) -> List[IndicatorCategory]:
    """实体路径：企业与区域信号可同时命中，均未命中时默认为行业数据"""
    categories: List[IndicatorCategory] = []

    is_enterprise = kw.ANNOUNCEMENT_KEYWORD in source_name or contains_any(name, kw.ENTERPRISE_KEYWORDS)
    if is_enterprise:
        categories.append(IndicatorCategory.ENTERPRISE)

    is_regional = contains_any(name, kw.REGIONAL_KEYWORDS)
    is_national = contains_any(name, kw.NATIONAL_KEYWORDS)
    if is_regional and not is_national:
        categories.append(IndicatorCategory.REGIONAL)

    if not categories:
        categories.append(IndicatorCategory.INDUSTRY)
    return categories


def classify_categories(name: str, source_name: str) -> List[IndicatorCategory]:
    """
    判断指标分类，结果有序、无重复且不为空。

    政策、研报、新闻关键词依次优先，命中任一即只返回该单一分类；
    否则进入实体路径。

    Args:
        name: 指标名称
        source_name: 数据来源名称

    Returns:
        按判定顺序排列的分类列表
    """
    rules: List[Rule] = [
        (lambda: contains_any(name, kw.POLICY_KEYWORDS), [IndicatorCategory.POLICY]),
        (lambda: contains_any(name, kw.RESEARCH_REPORT_KEYWORDS), [IndicatorCategory.RESEARCH_REPORT]),
        (lambda: contains_any(name, kw.NEWS_KEYWORDS), [IndicatorCategory.NEWS]),
    ]
    categories = first_match(rules, None)
    if categories is None:
        categories = _entity_categories(name, source_name)

    if not categories:
        categories = [IndicatorCategory.OTHER]

    logger.debug(f"指标 {name} 的分类判定为 {[c.value for c in categories]}")
    return list(categories)


def classify_granularity(
    name: str, source_name: str, categories: Sequence[IndicatorCategory]
) -> GranularityLevel:
    """根据指标名称、来源与分类判断数据颗粒层级"""
    rules: List[Rule] = [
        (
            lambda: kw.STATISTICS_BUREAU_KEYWORD in source_name
            and contains_any(name, kw.MACRO_KEYWORDS, ignore_case=True),
            GranularityLevel.MACRO,
        ),
        (lambda: contains_any(name, kw.MACRO_SCOPE_KEYWORDS), GranularityLevel.MACRO),
        (
            lambda: IndicatorCategory.ENTERPRISE in categories
            or kw.ANNOUNCEMENT_KEYWORD in source_name,
            GranularityLevel.MICRO,
        ),
        (lambda: contains_any(name, kw.MICRO_KEYWORDS), GranularityLevel.MICRO),
    ]
    result = first_match(rules, GranularityLevel.MESO)
    logger.debug(f"指标 {name} 的颗粒层级判定为 {result.value}")
    return result
