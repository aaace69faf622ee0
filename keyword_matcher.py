#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
关键词匹配模块：所有分类器共用的子串匹配工具
"""

from typing import Callable, Iterable, Sequence, Tuple, TypeVar

T = TypeVar("T")

# (判定函数, 命中结果)
Rule = Tuple[Callable[[], bool], T]


def contains_any(text: str, keywords: Iterable[str], ignore_case: bool = False) -> bool:
    """判断文本中是否包含任一关键词"""
    if not text:
        return False
    if ignore_case:
        text = text.upper()
        return any(k.upper() in text for k in keywords)
    return any(k in text for k in keywords)


def first_match(rules: Sequence[Rule], default: T) -> T:
    """
    按顺序评估规则列表，返回第一条命中规则的结果。

    Args:
        rules: 有序的 (判定函数, 结果) 列表
        default: 所有规则均未命中时的兜底结果

    Returns:
        命中规则的结果或兜底结果
    """
    for predicate, result in rules:
        if predicate():
            return result
    return default
