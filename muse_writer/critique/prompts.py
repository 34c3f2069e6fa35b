"""Prompt for chapter critiques in the fenced template the parser reads."""

from typing import Tuple

from .parser import FENCE
from ..utils.text import tail_at_sentence

CRITIQUE_SYSTEM = (
    "你是一位毒舌但專業的網路小說評論家，熟悉連載小說的節奏與讀者心理。"
    "你的點評能直指核心，並提供可以直接落實的修改建議。"
)

SECTION_TITLES = [
    "一、劇情節奏分析",
    "二、爽點設計",
    "三、懸念鉤子",
    "四、對話質量與水文檢測",
    "五、具體修改建議",
    "六、總體評價",
]

CRITIQUE_TEMPLATE = """{fence} {s1} {fence}
- 分析本章劇情推進的快慢與張弛
- 劇情節奏評分（1-10）：___

{fence} {s2} {fence}
- 指出本章的爽點與其鋪墊、兌現是否到位
- 爽點設計評分（1-10）：___

{fence} {s3} {fence}
- 章末與段落中的懸念是否足以驅動讀者追讀
- 懸念鉤子評分（1-10）：___

{fence} {s4} {fence}
- 對話是否符合角色性格、是否推動劇情
- 對話質量評分（1-10）：___
- 是否存在灌水、重複描寫或無效情節
- 水文檢測評分（1-10）：___

{fence} {s5} {fence}
1. （引用原文片段並說明如何修改）
2. ...
3. ...

{fence} {s6} {fence}
- 本章亮點：___
- 主要問題：___
- 總體評分（1-10）：___
- 一句話總結：___"""


def build_critique_prompt(
    novel_title: str,
    chapter_title: str,
    content: str,
    max_content_chars: int = 20000,
) -> Tuple[str, str]:
    """Return (system, prompt) for a chapter critique request."""
    body = tail_at_sentence(content, max_content_chars)
    template = CRITIQUE_TEMPLATE.format(
        fence=FENCE,
        s1=SECTION_TITLES[0],
        s2=SECTION_TITLES[1],
        s3=SECTION_TITLES[2],
        s4=SECTION_TITLES[3],
        s5=SECTION_TITLES[4],
        s6=SECTION_TITLES[5],
    )

    prompt = (
        f"請對小說《{novel_title}》的章節《{chapter_title}》進行深度點評。\n\n"
        f"【章節內容】\n{body}\n\n"
        "【輸出格式】\n"
        "請嚴格按照以下格式輸出，保留所有「═══」區塊標題與評分行，"
        "將 ___ 替換為你的分析與 1-10 的整數評分：\n\n"
        f"{template}\n\n"
        "使用繁體中文。修改建議請逐條編號，每條都要具體。"
    )
    return CRITIQUE_SYSTEM, prompt
