#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
语义增强模块：为元数据补充指标解释、标签、使用说明、适用场景、重要性、涉及企业与行业

提供两种实现：调用LLM的 LLMEnricher 与固定兜底数据的 FallbackEnricher，
由调用方选择，核心分类与评分逻辑不依赖任何配置。
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from config import Config
from llm_service import LLMService
from logger import logger
from models import NOT_APPLICABLE, EnrichmentResult, IndicatorInput, Metadata


def _is_blank(value: Any) -> bool:
    """空字符串、纯空白字符串与空列表视为未提供"""
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, list):
        return not any(isinstance(item, str) and item.strip() for item in value)
    return False


class MetadataEnricher(ABC):
    """语义增强服务接口"""

    @abstractmethod
    def enrich(self, indicator: IndicatorInput, metadata: Metadata) -> EnrichmentResult:
        """返回指标的语义字段"""


class FallbackEnricher(MetadataEnricher):
    """增强服务不可用时使用的固定兜底数据，每个语义字段都有非空值"""

    def enrich(self, indicator: IndicatorInput, metadata: Metadata) -> EnrichmentResult:
        return EnrichmentResult(
            industry=["通用行业"],
            involved_company=NOT_APPLICABLE,
            indi_name_en="mock_indicator_code",
            indi_def=f"基于该指标{indicator.name}的标准定义。",
            enhanced_tags=["统计", "分析", "示例标签"],
            data_usage_instructions="建议用于趋势分析。",
            main_scene=["市场分析", "绩效评估", "趋势研判"],
            indi_imp="具有一定参考价值。",
        )


class LLMEnricher(MetadataEnricher):
    """
    调用LLM生成语义字段。

    LLM调用失败时返回兜底数据；LLM只返回部分字段时，缺失字段同样由兜底数据补齐。
    """

    def __init__(self, llm_service: Optional[LLMService] = None, fallback: Optional[MetadataEnricher] = None):
        self.llm_service = llm_service or LLMService()
        self.fallback = fallback or FallbackEnricher()

    def enrich(self, indicator: IndicatorInput, metadata: Metadata) -> EnrichmentResult:
        fallback = self.fallback.enrich(indicator, metadata)
        try:
            result = self.llm_service.get_enrichment_with_retry(indicator, metadata)
        except Exception as e:
            logger.error(f"ID {metadata.indi_id} 语义增强异常，使用兜底数据: {e}", exc_info=True)
            return fallback

        if result["status"] != "success":
            logger.warning(f"ID {metadata.indi_id} 语义增强失败，使用兜底数据: {result.get('error')}")
            return fallback

        live: EnrichmentResult = result["data"]
        provided = {k: v for k, v in live.model_dump(exclude_none=True).items() if not _is_blank(v)}
        filled = {**fallback.model_dump(), **provided}
        return EnrichmentResult.model_validate(filled)


def build_enricher(api_key: str = Config.API_KEY) -> MetadataEnricher:
    """配置了API Key时使用LLM增强，否则使用兜底数据"""
    if not api_key:
        logger.warning("未配置 API Key，语义字段将使用兜底数据")
        return FallbackEnricher()
    return LLMEnricher()


def apply_enrichment(metadata: Metadata, result: EnrichmentResult) -> Metadata:
    """将语义字段合并进元数据，返回新的快照"""
    return metadata.with_changes(**result.model_dump(exclude_none=True))
