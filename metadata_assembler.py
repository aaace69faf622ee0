#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
元数据组装模块：合并分类器结果、数值字段与运营默认值，生成待增强的元数据
"""

import math
import random
import re
from datetime import date
from typing import Callable, Optional

import keywords as kw
from classifiers import (
    classify_categories,
    classify_confidence,
    classify_granularity,
    classify_source_type,
)
from keyword_matcher import contains_any
from logger import logger
from models import DataType, IndicatorCategory, IndicatorInput, Metadata


_INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")
_DECIMAL_TEXT = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


def random_indicator_id() -> str:
    """默认的指标ID生成方式"""
    return f"IND_{random.randrange(999999)}"


def _parse_float(text: Optional[str]) -> Optional[float]:
    if text is None or not _DECIMAL_TEXT.fullmatch(text.strip()):
        return None
    value = float(text.strip())
    if not math.isfinite(value):
        return None
    return value


def parse_miss_rate(percent_text: Optional[str]) -> float:
    """
    将缺失率百分比文本转换为 [0, 1] 之间的比例，保留4位小数。

    空值、无法解析或超出 [0, 100] 的输入按缺失处理，返回 0。
    """
    value = _parse_float(percent_text)
    if value is None or value < 0 or value > 100:
        return 0.0
    return round(value / 100, 4)


def parse_data_volume(volume_text: Optional[str]) -> int:
    """将数据量文本转换为非负整数，小数部分截断，非法输入返回 0"""
    if volume_text is None or not volume_text.strip():
        return 0
    text = volume_text.strip()
    if _INTEGER_TEXT.fullmatch(text):
        value = int(text)
    else:
        parsed = _parse_float(text)
        if parsed is None:
            return 0
        value = int(parsed)
    return max(value, 0)


def assemble(
    indicator: IndicatorInput,
    id_factory: Callable[[], str] = random_indicator_id,
    today: Callable[[], date] = date.today,
) -> Metadata:
    """
    根据指标输入生成元数据（语义字段留空，由增强服务填充）。

    Args:
        indicator: 指标输入
        id_factory: 指标ID生成函数
        today: 返回当前日期的函数，用于 update_time

    Returns:
        不含语义字段的元数据快照
    """
    name = indicator.name
    source_name = indicator.source_name

    is_text = contains_any(name, kw.TEXT_TYPE_KEYWORDS)
    if is_text:
        data_unit = "N/A"
    elif contains_any(name, kw.RATIO_KEYWORDS):
        data_unit = "%"
    else:
        data_unit = "单位"

    categories = classify_categories(name, source_name)
    granularity = classify_granularity(name, source_name, categories)

    metadata = Metadata(
        indi_id=id_factory(),
        indi_name_cn=name,
        data_type=DataType.TEXT if is_text else DataType.FLOAT,
        upd_freq="不定期" if is_text else "月度",
        data_unit=data_unit,
        update_time=today().isoformat(),
        src_name=source_name,
        src_type=classify_source_type(source_name),
        src_conf=classify_confidence(source_name),
        data_volume=parse_data_volume(indicator.data_volume),
        miss_rate=parse_miss_rate(indicator.miss_rate_percent),
        indi_cat=categories,
        gran_level=granularity,
        is_data_extraction_involved=is_text,
        is_industry=IndicatorCategory.INDUSTRY in categories,
    )
    logger.info(
        f"指标 {name} 元数据组装完成: ID={metadata.indi_id}, "
        f"分类={[c.value for c in categories]}, 颗粒度={granularity.value}, 置信度={metadata.src_conf.value}"
    )
    return metadata
