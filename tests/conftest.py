"""Shared fixtures: a critique in the six-section template and a sample chapter."""

import pytest

from muse_writer.config import Config, CacheConfig


SAMPLE_CRITIQUE = """═══ 一、劇情節奏分析 ═══
本章前半段鋪陳略慢，後半段衝突爆發後節奏明顯加快。
- 劇情節奏評分（1-10）：7

═══ 二、爽點設計 ═══
主角當眾破境一幕極具衝擊力，圍觀弟子的反應也很到位。
- 爽點設計評分（1-10）：9

═══ 三、懸念鉤子 ═══
章末的神秘來信鉤子偏弱，讀者難以產生追讀衝動。
- 懸念鉤子評分（1-10）：4

═══ 四、對話質量與水文檢測 ═══
- 對話質量評分（1-10）：6
- 中段客棧描寫略有重複，但整體灌水不多。
- 水文檢測評分（1-10）：8

═══ 五、具體修改建議 ═══
1. 將開頭三段的天氣描寫壓縮為一段，盡快進入衝突。
2. 在主角破境前增加一次失敗的嘗試，強化反差。
3. 章末來信應透露更具體的威脅，例如寄信人的身分線索。

═══ 六、總體評價 ═══
- 本章亮點：破境場面張力十足，群像反應生動。
- 主要問題：開篇拖沓，章末懸念不足。
- 總體評分（1-10）：8
- 一句話總結：爽點到位但節奏需要再收緊。
"""

SAMPLE_CHAPTER = """天還沒有亮，整個宗門都籠罩在一片寂靜之中。

林墨站在演武場中央，深深地吸了一口清晨的空氣。今天是宗門大比的日子，他已經等了整整三年。

「你真的要上台嗎？」身後傳來師姐的聲音。

林墨沒有回頭。「我會贏的。」
"""


@pytest.fixture
def sample_critique():
    return SAMPLE_CRITIQUE


@pytest.fixture
def sample_chapter():
    return SAMPLE_CHAPTER


@pytest.fixture
def sample_config(tmp_path):
    """Config whose critique cache lives under tmp_path."""
    return Config(
        cache=CacheConfig(cache_dir=tmp_path / "cache"),
        log_level="DEBUG",
    )
