#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
数据处理模块：处理指标输入文件的加载与评分结果的保存
"""

import os
import json
import pandas as pd
from typing import List, Dict, Any, Tuple

from pydantic import ValidationError

from logger import logger
from models import IndicatorInput

REQUIRED_COLUMNS = ["name", "source_name"]


class DataProcessor:
    """处理文件加载和保存的功能"""

    @staticmethod
    def load_inputs(csv_path: str) -> Tuple[List[IndicatorInput], List[Dict[str, Any]]]:
        """
        从CSV文件加载指标输入。

        所有列按文本读取，缺失率与数据量的解析交给元数据组装。
        名称或来源为空的行记为失败任务，不中断加载。
        """
        inputs: List[IndicatorInput] = []
        failed: List[Dict[str, Any]] = []
        try:
            df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
        except FileNotFoundError:
            logger.error(f"找不到文件 {csv_path}")
            return inputs, failed
        except pd.errors.EmptyDataError:
            logger.warning(f"文件 {csv_path} 为空，跳过。")
            return inputs, failed

        missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            logger.error(f"文件 {csv_path} 缺少必需列: {missing}")
            return inputs, failed

        for row_index, row in enumerate(df.to_dict(orient="records")):
            try:
                inputs.append(IndicatorInput(
                    name=row.get("name", ""),
                    source_name=row.get("source_name", ""),
                    miss_rate_percent=row.get("miss_rate_percent") or None,
                    data_volume=row.get("data_volume") or None,
                ))
            except ValidationError as e:
                logger.warning(f"第 {row_index + 1} 行输入不合法，跳过: {e.errors()[0]['msg']}")
                failed.append({
                    "id": f"row_{row_index + 1}",
                    "error_details": {"status": "invalid_input", "error": str(e), "input": row},
                })

        logger.info(f"成功从 {csv_path} 加载了 {len(inputs)} 条指标，{len(failed)} 条不合法")
        return inputs, failed

    @staticmethod
    def save_results(results: List[Dict[str, Any]], output_csv_path: str):
        """保存结果到CSV文件"""
        if not results:
            return

        os.makedirs(os.path.dirname(output_csv_path) or ".", exist_ok=True)
        df_new = pd.DataFrame(results)
        file_exists = os.path.exists(output_csv_path)

        df_new.to_csv(
            output_csv_path,
            mode="a",
            header=not file_exists,
            index=False,
            encoding="utf-8-sig",
        )

        logger.info(f"{len(results)} 条结果已追加至 {output_csv_path}")

    @staticmethod
    def save_failed_tasks(failed_tasks: List[Dict[str, Any]], failed_json_path: str):
        """保存失败的任务到JSON文件"""
        if not failed_tasks:
            return

        os.makedirs(os.path.dirname(failed_json_path) or ".", exist_ok=True)
        with open(failed_json_path, "w", encoding="utf-8") as f:
            json.dump(failed_tasks, f, ensure_ascii=False, indent=4)

        logger.warning(f"总计有 {len(failed_tasks)} 条记录处理失败，详情请查看 {failed_json_path}")
