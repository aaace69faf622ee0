"""
Unit tests for the enrichment collaborator: prompt building, LLM reply parsing,
retry handling and the fallback strategy.
"""
import json

import pytest
from pydantic import ValidationError

import enrichment
from enrichment import (
    FallbackEnricher,
    LLMEnricher,
    apply_enrichment,
    build_enricher,
)
from llm_service import LLMService, build_system_prompt, parse_enrichment_content
from models import EnrichmentResult, GranularityLevel, IndicatorCategory, SEMANTIC_FIELDS

FULL_REPLY = {
    "industry": ["钢铁"],
    "involved_company": "不涉及",
    "indi_name_en": "crude_steel_carbon_emission_per_ton",
    "indi_def": "每吨粗钢生产过程中的二氧化碳排放量。",
    "enhanced_tags": ["碳排放", "钢铁", "双碳"],
    "data_usage_instructions": "用于跟踪钢铁行业减排进展。",
    "main_scene": ["碳排放监测", "产能评估", "政策研判"],
    "indi_imp": "反映钢铁行业低碳转型进度。",
}


class StubLLMService:
    """Returns a canned status dict instead of calling a model."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    def get_enrichment_with_retry(self, indicator, metadata):
        if self.error:
            raise self.error
        return self.result


class TestSystemPrompt:
    """Prompt sections depend on categories and granularity."""

    def test_qualitative_guide(self):
        prompt = build_system_prompt([IndicatorCategory.POLICY], GranularityLevel.MESO)
        assert "定性/文本类指标" in prompt
        assert "indi_def" not in prompt

    def test_quantitative_guide_mentions_granularity(self):
        prompt = build_system_prompt([IndicatorCategory.ENTERPRISE], GranularityLevel.MICRO)
        assert "定量指标" in prompt
        assert "**L1 (微观层级)**" in prompt
        assert "论证该指标在业务决策中的价值" in prompt

    def test_industry_importance_variant(self):
        prompt = build_system_prompt([IndicatorCategory.INDUSTRY], GranularityLevel.MESO)
        assert "衡量指标在业务决策中的影响程度" in prompt

    def test_common_fields_always_present(self):
        for categories in ([IndicatorCategory.NEWS], [IndicatorCategory.INDUSTRY]):
            prompt = build_system_prompt(categories, GranularityLevel.MESO)
            assert "involved_company" in prompt
            assert '"不涉及"' in prompt

    def test_user_message_lists_decisions(self, steel_input, steel_metadata, fake_chat_model):
        service = LLMService(llm=fake_chat_model())
        messages = service.create_prompt(steel_input, steel_metadata)
        assert len(messages) == 2
        assert "已确定的分类: 行业数据" in messages[1].content
        assert "L2 (中观层级)" in messages[1].content


class TestParseReply:
    """LLM reply text → EnrichmentResult."""

    def test_plain_json(self):
        result = parse_enrichment_content(json.dumps(FULL_REPLY, ensure_ascii=False))
        assert result.main_scene == FULL_REPLY["main_scene"]

    def test_fenced_json(self):
        content = "```json\n" + json.dumps(FULL_REPLY, ensure_ascii=False) + "\n```"
        assert parse_enrichment_content(content).indi_name_en == FULL_REPLY["indi_name_en"]

    def test_partial_reply(self):
        result = parse_enrichment_content('{"main_scene": ["政策研判"]}')
        assert result.main_scene == ["政策研判"]
        assert result.indi_def is None

    def test_invalid_json(self):
        with pytest.raises(json.JSONDecodeError):
            parse_enrichment_content("not json")

    def test_wrong_types(self):
        with pytest.raises(ValidationError):
            parse_enrichment_content('{"main_scene": 3}')


class TestLLMService:
    """Invocation with retry."""

    def test_success(self, steel_input, steel_metadata, fake_chat_model):
        model = fake_chat_model(json.dumps(FULL_REPLY, ensure_ascii=False))
        result = LLMService(llm=model, retry_sleep_time=0).get_enrichment_with_retry(steel_input, steel_metadata)
        assert result["status"] == "success"
        assert isinstance(result["data"], EnrichmentResult)
        assert len(model.calls) == 1

    def test_retries_transient_errors(self, steel_input, steel_metadata, fake_chat_model):
        model = fake_chat_model(TimeoutError("timeout"), ConnectionError("reset"), '{"industry": ["钢铁"]}')
        result = LLMService(llm=model, retry_sleep_time=0).get_enrichment_with_retry(steel_input, steel_metadata)
        assert result["status"] == "success"
        assert len(model.calls) == 3

    def test_max_retries_exceeded(self, steel_input, steel_metadata, fake_chat_model):
        model = fake_chat_model(*[TimeoutError("timeout")] * 3)
        service = LLMService(llm=model, max_retries=3, retry_sleep_time=0)
        result = service.get_enrichment_with_retry(steel_input, steel_metadata)
        assert result == {"status": "failed", "error": "Max retries exceeded"}

    def test_unparsable_reply_not_retried(self, steel_input, steel_metadata, fake_chat_model):
        model = fake_chat_model("抱歉，我无法回答", "{}")
        result = LLMService(llm=model, retry_sleep_time=0).get_enrichment_with_retry(steel_input, steel_metadata)
        assert result["status"] == "failed"
        assert len(model.calls) == 1


class TestEnrichers:
    """Live and fallback enrichment strategies."""

    def test_fallback_fills_every_semantic_field(self, steel_input, steel_metadata):
        result = FallbackEnricher().enrich(steel_input, steel_metadata)
        for field in SEMANTIC_FIELDS:
            assert getattr(result, field)
        assert result.indi_def == "基于该指标粗钢吨钢碳排放量的标准定义。"
        assert result.involved_company == "不涉及"

    def test_live_result_used(self, steel_input, steel_metadata):
        stub = StubLLMService({"status": "success", "data": EnrichmentResult(**FULL_REPLY)})
        result = LLMEnricher(llm_service=stub).enrich(steel_input, steel_metadata)
        assert result == EnrichmentResult(**FULL_REPLY)

    def test_partial_live_result_filled_from_fallback(self, steel_input, steel_metadata):
        partial = EnrichmentResult(data_usage_instructions="用于政策研判。", main_scene=["政策研判"])
        stub = StubLLMService({"status": "success", "data": partial})
        result = LLMEnricher(llm_service=stub).enrich(steel_input, steel_metadata)
        assert result.data_usage_instructions == "用于政策研判。"
        assert result.main_scene == ["政策研判"]
        assert result.industry == ["通用行业"]
        for field in SEMANTIC_FIELDS:
            assert getattr(result, field)

    def test_blank_live_values_filled_from_fallback(self, steel_input, steel_metadata):
        blank = EnrichmentResult(indi_def="", main_scene=[], involved_company="  ", industry=[" "])
        stub = StubLLMService({"status": "success", "data": blank})
        result = LLMEnricher(llm_service=stub).enrich(steel_input, steel_metadata)
        assert result == FallbackEnricher().enrich(steel_input, steel_metadata)

    def test_failed_status_uses_fallback(self, steel_input, steel_metadata):
        stub = StubLLMService({"status": "failed", "error": "Max retries exceeded"})
        result = LLMEnricher(llm_service=stub).enrich(steel_input, steel_metadata)
        assert result == FallbackEnricher().enrich(steel_input, steel_metadata)

    def test_exception_uses_fallback(self, steel_input, steel_metadata):
        stub = StubLLMService(error=RuntimeError("boom"))
        result = LLMEnricher(llm_service=stub).enrich(steel_input, steel_metadata)
        assert result == FallbackEnricher().enrich(steel_input, steel_metadata)


class TestBuildEnricher:
    """Strategy selection from the configured API key."""

    def test_no_key_selects_fallback(self):
        assert isinstance(build_enricher(""), FallbackEnricher)

    def test_key_selects_llm(self, monkeypatch):
        monkeypatch.setattr(enrichment, "LLMService", lambda: StubLLMService())
        assert isinstance(build_enricher("sk-test"), LLMEnricher)


class TestApplyEnrichment:
    """Merging semantic fields into a new snapshot."""

    def test_merges_into_new_snapshot(self, steel_input, steel_metadata):
        enriched = apply_enrichment(steel_metadata, FallbackEnricher().enrich(steel_input, steel_metadata))
        assert enriched.main_scene == ["市场分析", "绩效评估", "趋势研判"]
        assert enriched.indi_name_en == "mock_indicator_code"
        assert steel_metadata.main_scene is None

    def test_none_fields_left_untouched(self, steel_metadata):
        edited = steel_metadata.with_changes(indi_imp="人工填写")
        enriched = apply_enrichment(edited, EnrichmentResult(industry=["钢铁"]))
        assert enriched.indi_imp == "人工填写"
        assert enriched.industry == ["钢铁"]
