#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
关键词表模块：各分类规则使用的关键词集合

规则的判定顺序定义在 classifiers 模块中，这里只保存数据。
"""

# 数据源类型
GOVERNMENT_KEYWORDS = ("局", "部", "委员会", "政府")
ASSOCIATION_KEYWORDS = ("协会", "联合会", "学会")
INTERNATIONAL_ORG_KEYWORDS = ("组织", "WTO", "IMF", "World Bank")
EXCHANGE_KEYWORDS = ("交易所", "交易中心")
CONSULTANCY_KEYWORDS = ("咨询", "Research", "智库")
COMPANY_KEYWORDS = ("公司", "集团")
MEDIA_KEYWORDS = ("新闻", "日报", "网")
INDEX_KEYWORDS = ("指数", "Index")

# 来源置信度
OFFICIAL_SOURCE_KEYWORDS = ("局", "部", "政府", "交易所", "官方", "统计", "央行")
PROFESSIONAL_SOURCE_KEYWORDS = ("协会", "研究院", "咨询", "智库")

# 指标分类
POLICY_KEYWORDS = ("政策", "法规", "通知", "意见")
RESEARCH_REPORT_KEYWORDS = ("研报", "深度报告", "纪要")
NEWS_KEYWORDS = ("新闻", "快讯")
ANNOUNCEMENT_KEYWORD = "公告"
ENTERPRISE_KEYWORDS = ("公司", "企业", "个股")
REGIONAL_KEYWORDS = ("省", "市", "区", "县")
NATIONAL_KEYWORDS = ("全国", "中国", "China")

# 数据颗粒层级
STATISTICS_BUREAU_KEYWORD = "统计局"
MACRO_KEYWORDS = ("GDP", "CPI", "PPI", "宏观", "总量", "全国", "全球", "人口", "就业率", "M2")
MACRO_SCOPE_KEYWORDS = ("中国", "全国", "全球")
MICRO_KEYWORDS = ("公司", "企业", "个股", "单品", "财务报表", "营收", "利润")

# 数据类型与单位推断
TEXT_TYPE_KEYWORDS = ("报告", "政策", "纪要")
RATIO_KEYWORDS = ("率", "比")
