#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
主处理流程模块：批量完成指标的元数据生成、语义增强与TAI评分
"""

from typing import List, Dict, Any, Tuple, Callable, Optional
from concurrent.futures import ThreadPoolExecutor, as_completed

from config import Config
from logger import logger
from data_processor import DataProcessor
from enrichment import MetadataEnricher, apply_enrichment, build_enricher
from metadata_assembler import assemble, random_indicator_id
from models import IndicatorInput, Metadata, TaiScore
from tai_scorer import score


def flatten_result(metadata: Metadata, tai: TaiScore) -> Dict[str, Any]:
    """将元数据与评分结果展开为一行输出"""
    return {
        "id": metadata.indi_id,
        "name": metadata.indi_name_cn,
        "source_name": metadata.src_name,
        "source_type": metadata.src_type.value,
        "source_confidence": metadata.src_conf.value,
        "categories": "、".join(cat.value for cat in metadata.indi_cat),
        "granularity": metadata.gran_level.value,
        "miss_rate": metadata.miss_rate,
        "data_volume": metadata.data_volume,
        "involved_company": metadata.involved_company,
        "industry": "、".join(metadata.industry or []),
        "main_scene": "、".join(metadata.main_scene or []),
        "tai_level": tai.level.value,
        "total_score": tai.totalScore,
        "availability": tai.dimensions.availability,
        "credibility": tai.dimensions.credibility,
        "business_match": tai.dimensions.businessMatch,
        "details": "；".join(tai.details),
    }


class IndicatorPipeline:
    """主处理流程类"""

    def __init__(
        self,
        enricher: Optional[MetadataEnricher] = None,
        id_factory: Callable[[], str] = random_indicator_id,
        max_workers: int = Config.MAX_CONCURRENT_REQUESTS,
    ):
        """初始化各个组件"""
        self.enricher = enricher or build_enricher()
        self.id_factory = id_factory
        self.max_workers = max_workers
        self.data_processor = DataProcessor()

    def process_one(self, indicator: IndicatorInput) -> Dict[str, Any]:
        """处理单个指标：组装元数据 → 语义增强 → TAI评分"""
        metadata = assemble(indicator, id_factory=self.id_factory)
        enrichment = self.enricher.enrich(indicator, metadata)
        metadata = apply_enrichment(metadata, enrichment)
        tai = score(metadata)
        logger.info(f"指标 {indicator.name} 评分完成: {tai.level.value}, 总分 {tai.totalScore}")
        return flatten_result(metadata, tai)

    def process_all(self, inputs: List[IndicatorInput]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        """并发处理全部指标，结果按输入顺序返回"""
        indexed_results: List[Tuple[int, Dict[str, Any]]] = []
        failed_tasks: List[Dict[str, Any]] = []

        logger.info(f"开始为 {len(inputs)} 条指标启动 {self.max_workers} 个并发线程...")

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index = {
                executor.submit(self.process_one, item): index
                for index, item in enumerate(inputs)
            }

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                item = inputs[index]
                try:
                    indexed_results.append((index, future.result()))
                except Exception as e:
                    logger.error(f"处理指标 {item.name} 时发生异常: {e}", exc_info=True)
                    failed_tasks.append({
                        "id": item.name,
                        "error_details": {"status": "exception", "error": str(e)}
                    })

        indexed_results.sort(key=lambda pair: pair[0])
        successful_results = [row for _, row in indexed_results]
        logger.info(f"全部指标处理完成，成功 {len(successful_results)} 条，失败 {len(failed_tasks)} 条")
        return successful_results, failed_tasks

    def run(
        self,
        input_csv_path: str = Config.INPUT_CSV_PATH,
        output_csv_path: str = Config.OUTPUT_CSV_PATH,
        failed_json_path: str = Config.FAILED_JSON_PATH,
    ):
        """主运行方法"""
        inputs, all_failed_tasks = self.data_processor.load_inputs(input_csv_path)

        try:
            if not inputs:
                logger.info("没有需要处理的指标。程序退出")
                return

            successful_results, failed_tasks = self.process_all(inputs)
            self.data_processor.save_results(successful_results, output_csv_path)
            all_failed_tasks.extend(failed_tasks)

        finally:
            self.data_processor.save_failed_tasks(all_failed_tasks, failed_json_path)
            logger.info("--- 批量处理全部完成！---")
            if not all_failed_tasks:
                logger.info("本次运行没有记录失败")
