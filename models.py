#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
数据模型定义模块：定义指标输入、元数据与TAI评分结果的数据结构
"""

import re
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SourceConfidence(str, Enum):
    """来源置信度，L0 < L1 < L2 < L3"""
    L0 = "L0"
    L1 = "L1"
    L2 = "L2"
    L3 = "L3"


class TaiLevel(str, Enum):
    """TAI可信等级，TAI3 为最高"""
    NONE = "NONE"
    TAI1 = "TAI1"
    TAI2 = "TAI2"
    TAI3 = "TAI3"


class SourceType(str, Enum):
    """数据源类型"""
    GOVERNMENT = "国家机关"
    ASSOCIATION = "行业协会"
    INTERNATIONAL_ORG = "国际组织"
    INDUSTRY_WEBSITE = "行业信息网站"
    CONSULTANCY = "数据、咨询公司"
    ENTERPRISE = "企业"
    NEWS_MEDIA = "新闻媒体"
    PRICE_INDEX = "价格指数"
    OTHER = "其他"


class IndicatorCategory(str, Enum):
    """指标分类（固定词表）"""
    INDUSTRY = "行业数据"
    REGIONAL = "区域数据"
    ENTERPRISE = "企业数据"
    POLICY = "政策相关"
    RESEARCH_REPORT = "研报相关"
    NEWS = "新闻相关"
    OTHER = "其他"


class GranularityLevel(str, Enum):
    """数据颗粒层级"""
    MICRO = "L1 (微观层级)"
    MESO = "L2 (中观层级)"
    MACRO = "L3 (宏观层级)"


class DataType(str, Enum):
    TEXT = "文本"
    FLOAT = "浮点数"


# 涉及企业字段的"不涉及"取值
NOT_APPLICABLE = "不涉及"

QUALITATIVE_CATEGORIES = (
    IndicatorCategory.POLICY,
    IndicatorCategory.NEWS,
    IndicatorCategory.RESEARCH_REPORT,
)

# 编辑器以顿号连接列表字段
_LIST_SEPARATORS = re.compile(r"[、，,]")


def split_list_text(value: Any) -> Any:
    """将编辑器中以分隔符连接的文本拆分为列表"""
    if isinstance(value, str):
        return [part.strip() for part in _LIST_SEPARATORS.split(value) if part.strip()]
    return value


class IndicatorInput(BaseModel):
    """调用方提交的指标信息"""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1, description="指标名称")
    source_name: str = Field(..., min_length=1, description="数据来源")
    miss_rate_percent: Optional[str] = Field(None, description="缺失率百分比文本，如 '5' 表示 5%")
    data_volume: Optional[str] = Field(None, description="数据量文本")

    @field_validator("miss_rate_percent", "data_volume", mode="before")
    @classmethod
    def _numbers_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class EnrichmentResult(BaseModel):
    """语义增强服务返回的部分元数据，所有字段均可缺省"""
    indi_name_en: Optional[str] = None
    indi_def: Optional[str] = None
    enhanced_tags: Optional[List[str]] = None
    data_usage_instructions: Optional[str] = None
    main_scene: Optional[List[str]] = None
    indi_imp: Optional[str] = None
    involved_company: Optional[str] = None
    industry: Optional[List[str]] = None

    @field_validator("enhanced_tags", "main_scene", "industry", mode="before")
    @classmethod
    def _split_text(cls, value: Any) -> Any:
        return split_list_text(value)


SEMANTIC_FIELDS = tuple(EnrichmentResult.model_fields)


class Metadata(BaseModel):
    """
    指标元数据记录。

    记录不可变：编辑通过 with_changes() 生成新的快照，
    评分引擎只读取快照而不会修改它。
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    # 标识
    indi_id: str
    indi_name_cn: str = Field(..., min_length=1)
    indi_name_en: Optional[str] = None

    # 描述
    data_type: DataType
    access_level: str = "公开"
    upd_freq: str
    data_unit: str
    update_time: Optional[str] = None
    cov_start_dt: Optional[str] = "2018-01-01"
    cov_end_dt: Optional[str] = "2023-12-31"

    # 来源
    src_name: str = Field(..., min_length=1)
    src_type: SourceType
    src_conf: SourceConfidence = SourceConfidence.L0

    # 质量
    data_volume: int = Field(0, ge=0)
    miss_rate: float = Field(0.0, ge=0.0, le=1.0)

    # 分类
    indi_cat: List[IndicatorCategory] = Field(..., min_length=1)
    gran_level: GranularityLevel

    # 语义字段，由增强服务填充
    indi_def: Optional[str] = None
    enhanced_tags: Optional[List[str]] = None
    data_usage_instructions: Optional[str] = None
    main_scene: Optional[List[str]] = None
    indi_imp: Optional[str] = None
    involved_company: Optional[str] = None
    industry: Optional[List[str]] = None

    # 运营与审计
    is_data_extraction_involved: bool = False
    is_industry: bool = False
    is_exclusive: bool = False
    related_indicators: List[str] = Field(default_factory=list)
    indi_status: str = "生效中"
    data_owner: str = "数据运营组"
    ver_no: str = "v1.0"
    chg_hist: str = "初始创建"

    @field_validator("indi_cat")
    @classmethod
    def _unique_categories(cls, value: List[IndicatorCategory]) -> List[IndicatorCategory]:
        if len(set(value)) != len(value):
            raise ValueError("indi_cat 中存在重复分类")
        return value

    @field_validator("indi_cat", "enhanced_tags", "main_scene", "industry", "related_indicators", mode="before")
    @classmethod
    def _split_text(cls, value: Any) -> Any:
        return split_list_text(value)

    def with_changes(self, **changes: Any) -> "Metadata":
        """返回应用编辑后的新快照（重新校验）"""
        data = self.model_dump()
        data.update(changes)
        return Metadata.model_validate(data)


class TaiDimensions(BaseModel):
    """TAI三个维度得分"""
    model_config = ConfigDict(frozen=True)

    availability: float = Field(..., ge=0, le=10, description="数据可用性")
    credibility: float = Field(..., ge=0, le=10, description="数据可信度")
    businessMatch: float = Field(..., ge=0, le=10, description="业务匹配度")


class TaiScore(BaseModel):
    """TAI评分结果"""
    model_config = ConfigDict(frozen=True)

    level: TaiLevel
    totalScore: float
    dimensions: TaiDimensions
    details: List[str] = Field(default_factory=list)
