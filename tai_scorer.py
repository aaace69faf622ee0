#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
TAI评分引擎：将元数据归约为可用性、可信度、业务匹配度三个维度的得分与TAI等级
"""

from typing import List, Optional, Sequence, Tuple

from keyword_matcher import Rule, first_match
from logger import logger
from models import NOT_APPLICABLE, Metadata, SourceConfidence, TaiDimensions, TaiLevel, TaiScore

# (缺失率百分比上限, 得分)，按升序评估，上限包含在内
AVAILABILITY_BRACKETS: Tuple[Tuple[float, int], ...] = (
    (0, 10),
    (5, 9),
    (10, 8),
    (20, 7),
    (30, 6),
    (50, 4),
    (80, 2),
)

CREDIBILITY_SCORES = {
    SourceConfidence.L3: 10,
    SourceConfidence.L2: 8,
    SourceConfidence.L1: 6,
    SourceConfidence.L0: 0,
}

# (数量下限, 得分)
COUNT_SCORES: Tuple[Tuple[int, int], ...] = ((5, 10), (4, 8), (3, 6), (2, 4), (1, 2))

SCENE_WEIGHT = 0.6
COMPANY_WEIGHT = 0.1
INDUSTRY_WEIGHT = 0.3


def availability_score(miss_rate_percent: float) -> int:
    """按缺失率百分比查表得到可用性得分"""
    for upper, score in AVAILABILITY_BRACKETS:
        if miss_rate_percent <= upper:
            return score
    return 0


def credibility_score(confidence: SourceConfidence) -> int:
    return CREDIBILITY_SCORES.get(confidence, 0)


def count_score(count: int) -> int:
    """数量-得分映射：≥5→10, 4→8, 3→6, 2→4, 1→2, 0→0"""
    for lower, score in COUNT_SCORES:
        if count >= lower:
            return score
    return 0


def company_score(involved_company: Optional[str]) -> int:
    if involved_company and involved_company.strip() and involved_company != NOT_APPLICABLE:
        return 10
    return 0


def _count(values: Optional[Sequence[str]]) -> int:
    return len(values) if values else 0


def determine_level(availability: float, credibility: float, business_match: float) -> TaiLevel:
    """按优先级依次判定 TAI3 → TAI2 → TAI1，均不满足时为 NONE"""
    rules: List[Rule] = [
        (lambda: credibility == 10 and availability > 6 and business_match >= 3, TaiLevel.TAI3),
        (lambda: credibility >= 6 and availability > 6 and business_match >= 3, TaiLevel.TAI2),
        (lambda: credibility >= 6, TaiLevel.TAI1),
    ]
    return first_match(rules, TaiLevel.NONE)


def score(meta: Metadata) -> TaiScore:
    """
    计算元数据的TAI评分。

    纯函数：不修改元数据，对同一快照重复调用得到相同结果。

    Args:
        meta: 元数据快照

    Returns:
        TAI评分结果，details 按 可用性 → 可信度 → 业务匹配 的顺序记录评分依据
    """
    details: List[str] = []

    # 数据可用性
    mr = round(meta.miss_rate * 100, 6)
    avail = availability_score(mr)
    if mr == 0:
        details.append("完整性完美 (0%缺失)")
    elif avail == 9:
        details.append("完整性极高 (≤5%)")
    elif avail == 0:
        details.append("缺失率过高 (>80%)")

    # 数据可信度
    cred = credibility_score(meta.src_conf)
    if meta.src_conf == SourceConfidence.L3:
        details.append("权威来源 (L3)")
    elif meta.src_conf == SourceConfidence.L2:
        details.append("专业机构来源 (L2)")
    elif meta.src_conf == SourceConfidence.L0:
        details.append("来源未知 (L0)")

    # 业务匹配度
    scene_count = _count(meta.main_scene)
    scene = count_score(scene_count)
    if scene_count >= 3:
        details.append(f"场景覆盖丰富 ({scene_count}个)")

    company = company_score(meta.involved_company)
    if company > 0:
        details.append(f"关联企业: {meta.involved_company}")

    industry = count_score(_count(meta.industry))

    match = round(scene * SCENE_WEIGHT + company * COMPANY_WEIGHT + industry * INDUSTRY_WEIGHT, 1)

    level = determine_level(avail, cred, match)
    total = round(avail + cred + match, 1)

    logger.debug(
        f"指标 {meta.indi_id} 评分: 可用性={avail}, 可信度={cred}, 业务匹配={match}, 等级={level.value}"
    )
    return TaiScore(
        level=level,
        totalScore=total,
        dimensions=TaiDimensions(availability=avail, credibility=cred, businessMatch=match),
        details=details,
    )
