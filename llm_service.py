#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
LLM服务模块：封装与语言模型交互的功能，为指标生成语义元数据
"""

import json
import time
from typing import Any, Dict, List, Optional, Sequence

from langchain_community.chat_models.tongyi import ChatTongyi
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from pydantic import ValidationError
from pydantic.types import SecretStr

from config import Config
from logger import logger
from models import (
    QUALITATIVE_CATEGORIES,
    EnrichmentResult,
    GranularityLevel,
    IndicatorCategory,
    IndicatorInput,
    Metadata,
    NOT_APPLICABLE,
)


def build_system_prompt(categories: Sequence[IndicatorCategory], granularity: GranularityLevel) -> str:
    """根据指标分类与颗粒层级拼装系统提示词"""
    prompt = """
# Role
你是一名专业的数据治理专家和高级数据分析师。你擅长理解业务指标，并能为这些指标精确地生成符合规范的元数据。

# Task
你的任务是接收"指标信息"，然后根据我提供的"字段生成指南"，为该指标生成一个格式严谨的JSON对象。

# 输出说明
你的输出必须且只能是一个格式完整的JSON对象，不要包含任何其他文字说明。
JSON的键(key)必须是我在指南中定义的字段名。
JSON的值(value)必须严格遵循指南中的定义、枚举选项和数据类型。对于Array[String]类型，如果无适用内容，请返回空数组[]。
"""

    if any(cat in QUALITATIVE_CATEGORIES for cat in categories):
        prompt += """
# 字段生成指南 (定性/文本类指标)

## 1. 【数据使用说明】 (data_usage_instructions)
- 定义：为大模型提供操作性指导，明确该文本类信息在分析或推理任务中的具体使用方式与边界。
- 说明：由于该指标为政策、新闻或研报等文本类信息相关指标，你需要从“逻辑应用”而非“数值计算”的角度，指导AI如何使用。

## 2. 【指标适用场景】 (main_scene)
- 定义：数据的主要适用场景或业务应用领域，描述指标适用的具体领域。
- 说明：请生成2–5个中性名词或词组（2–8字），用于描述该指标的主要分析场景或决策语境。
"""
    else:
        prompt += f"""
# 字段生成指南 (定量指标)

## 1. 【指标解释】 (indi_def)
- 定义：说明指标的业务含义。
- 说明：请仅基于输入信息生成解释，严禁包含任何你无法确认真实性的信息。

## 2. 【指标增强标签】 (enhanced_tags)
- 定义：指标的标签或关键词，用于分类和快速检索指标。
- 说明：从不同维度生成3-6个增强标签。

## 3. 【数据使用说明】 (data_usage_instructions)
- 定义：说明指标的功能逻辑、分析方法、依赖搭配、使用边界与注意事项。

## 4. 【指标适用场景】 (main_scene)
- 定义：描述指标适用的具体业务领域或分析任务。
- 当前指标的【数据颗粒层级】为 **{granularity.value}**。
- 说明：基于此信息，生成2–5个中性名词或词组（2–8字）。
    - L1 (微观): 聚焦单一对象（企业、产品）的内部诊断与评估。
    - L2 (中观): 聚焦行业、产业链或特定群体的趋势与结构分析。
    - L3 (宏观): 聚焦全局性的社会、经济运行状况分析。
"""
        if IndicatorCategory.INDUSTRY in categories:
            prompt += """
## 5. 【指标重要性】 (indi_imp)
- 定义：衡量指标在业务决策中的影响程度和关注优先级的定性或定量标签。
- 说明：解释“为什么这个指标很重要”。
"""
        else:
            prompt += """
## 5. 【指标重要性】 (indi_imp)
- 定义：论证该指标在业务决策中的价值和影响程度。
- 说明：解释“为什么这个指标很重要”。
"""

    prompt += f"""
## 6. 其他基础字段
- 【英文标识】(indi_name_en): Snake case 风格。
- 【涉及企业】(involved_company): 字符串类型。如果是【企业数据】或明确涉及某个特定企业的指标，请填写该企业简称（仅限1个）。如果该指标是行业通用指标，不涉及特定单一企业，请务必返回 "{NOT_APPLICABLE}"。
- 【涉及行业】(industry): 数组，该指标所属的行业。
"""
    return prompt


def parse_enrichment_content(content: Any) -> EnrichmentResult:
    """
    解析LLM返回的内容为语义元数据。

    兼容 ```json 代码块包裹的输出。

    Raises:
        json.JSONDecodeError: 内容不是合法JSON
        ValidationError: JSON字段类型不符合要求
    """
    if isinstance(content, list):
        content = " ".join(str(item) for item in content)
    text = str(content).strip()
    if text.startswith("```"):
        text = text.strip("`").strip()
        if text.lower().startswith("json"):
            text = text[4:]
    return EnrichmentResult.model_validate(json.loads(text))


class LLMService:
    """封装LLM调用相关的功能"""

    def __init__(
        self,
        llm: Optional[Any] = None,
        max_retries: int = Config.MAX_RETRIES,
        retry_sleep_time: float = Config.RETRY_SLEEP_TIME,
    ):
        """初始化LLM客户端，未传入时创建通义千问客户端"""
        self.max_retries = max_retries
        self.retry_sleep_time = retry_sleep_time
        if llm is not None:
            self.llm = llm
            return
        try:
            self.llm = ChatTongyi(
                model=Config.MODEL_NAME, api_key=SecretStr(Config.API_KEY)
            )
            logger.info(f"成功初始化LangChain LLM客户端，模型: {Config.MODEL_NAME}")
        except Exception as e:
            logger.error(f"LLM客户端初始化失败: {e}")
            raise

    def create_prompt(self, indicator: IndicatorInput, metadata: Metadata) -> List[BaseMessage]:
        """创建LangChain提示词"""
        system_prompt = build_system_prompt(metadata.indi_cat, metadata.gran_level)
        user_prompt = f"""
指标名称: {indicator.name}
数据来源: {indicator.source_name}
已确定的分类: {", ".join(cat.value for cat in metadata.indi_cat)}
已确定的颗粒度: {metadata.gran_level.value}
"""
        return [SystemMessage(system_prompt), HumanMessage(user_prompt)]

    def get_enrichment_with_retry(self, indicator: IndicatorInput, metadata: Metadata) -> Dict[str, Any]:
        """调用LLM获取语义元数据，带重试机制"""
        messages = self.create_prompt(indicator, metadata)

        for attempt in range(self.max_retries):
            try:
                response = self.llm.invoke(messages)
                logger.info(f"ID {metadata.indi_id} 的LLM响应内容: {response.content}")
                result = parse_enrichment_content(response.content)
                return {"status": "success", "data": result}

            except (json.JSONDecodeError, ValidationError) as e:
                logger.error(f"ID {metadata.indi_id} 的LLM响应无法解析: {e}")
                return {"status": "failed", "error": str(e)}
            except Exception as e:
                logger.error(
                    f"ID {metadata.indi_id} 调用LLM失败。错误: {e}. 第 {attempt + 1}/{self.max_retries} 次尝试。 {self.retry_sleep_time} 秒后重试...",
                    exc_info=True,
                )
                time.sleep(self.retry_sleep_time)

        logger.error(f"ID {metadata.indi_id} 超过最大重试次数。")
        return {"status": "failed", "error": "Max retries exceeded"}
