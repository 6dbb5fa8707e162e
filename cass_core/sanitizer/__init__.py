"""后端回复清洗管线。

任何后端原始文本在变成消息或被朗读之前，都要经过 sanitize_response：

1. 去掉首尾空白。
2. 列表符号与换行折叠成空格，保证输出是单行。
3. 去掉强调用的星号。
4. 去掉 emoji 区段字符。
5. 按列表顺序去掉开头的客套前缀（每种最多一次）。
6. 含有“稍后再查/再回复”之类的承诺时，整句替换为固定兜底文案。
7. 只保留前两句（以 . ! ? 为句末）。
8. 用单个空格重新拼接，缺少句末标点时补 "."。
9. 结果为空时返回固定的致歉文案。

顺序不可调换：兜底文案本身不超过两句，截断不会破坏它。
"""

import re
from typing import List


FILLER_PREFIXES = (
    "Sure! ",
    "Of course! ",
    "Absolutely! ",
    "Here's what I found: ",
    "Let me explain: ",
    "Let me help you with that. ",
    "Here's the answer: ",
    "Here's what you need to know: ",
)

FORBIDDEN_PHRASES = (
    "let me do a quick search",
    "let me get back to you",
    "let me check",
    "let me get you a list",
    "i'll get back to you",
)

FORBIDDEN_FALLBACK = "I don't have that information right now, but I can help with something else!"
EMPTY_FALLBACK = "I'm sorry, I don't have an answer for that."

SENTENCE_ENDINGS = ".!?"
MAX_SENTENCES = 2

_LIST_MARKERS = ("\n- ", "\n• ", "\n* ")

# 近似的 emoji 判断：按码位区段过滤，而不是按字形簇识别。
# 会顺带去掉部分非 emoji 的符号（如整段箭头），但不会碰 ASCII 字符。
_EMOJI_RANGES = (
    (0x1F000, 0x1FAFF),  # 麻将/扑克、表情、交通、补充符号与象形文字、国旗
    (0x2600, 0x27BF),  # 杂项符号、装饰符号
    (0x2300, 0x23FF),
    (0x2190, 0x21FF),
    (0x25A0, 0x25FF),
    (0x2B05, 0x2BFF),
    (0x2934, 0x2935),
    (0x3297, 0x3299),
    (0xFE00, 0xFE0F),  # 变体选择符
    (0xE0020, 0xE007F),  # tag 序列
)
_EMOJI_POINTS = frozenset({0x00A9, 0x00AE, 0x200D, 0x203C, 0x2049, 0x20E3, 0x2122, 0x2139, 0x3030, 0x303D})


def is_emoji(char: str) -> bool:
    cp = ord(char)
    if cp < 0x80:
        return False
    if cp in _EMOJI_POINTS:
        return True
    return any(lo <= cp <= hi for lo, hi in _EMOJI_RANGES)


def strip_emoji(text: str) -> str:
    return "".join(ch for ch in text if not is_emoji(ch))


def strip_filler(text: str) -> str:
    # 按列表顺序各检查一次，叠加出现的客套前缀也能一次去掉
    for filler in FILLER_PREFIXES:
        if text.startswith(filler):
            text = text[len(filler):]
    return text


def contains_forbidden_phrase(text: str) -> bool:
    lowered = text.lower()
    return any(phrase in lowered for phrase in FORBIDDEN_PHRASES)


def split_sentences(text: str, limit: int = MAX_SENTENCES) -> List[str]:
    """按 . ! ? 切出最多 limit 句；句子不足时保留末尾未结束的片段。"""

    sentences: List[str] = []
    current = ""
    for char in text:
        current += char
        if char in SENTENCE_ENDINGS:
            sentences.append(current.strip())
            current = ""
            if len(sentences) == limit:
                break
    tail = current.strip()
    if tail and len(sentences) < limit:
        sentences.append(tail)
    return sentences


def sanitize_response(text: str) -> str:
    response = (text or "").strip()
    for marker in _LIST_MARKERS:
        response = response.replace(marker, " ")
    response = re.sub(r"[\r\n]", " ", response)
    response = response.replace("*", "")
    response = strip_emoji(response)
    response = strip_filler(response).strip()

    if contains_forbidden_phrase(response):
        response = FORBIDDEN_FALLBACK

    response = " ".join(s for s in split_sentences(response) if s)
    if response and response[-1] not in SENTENCE_ENDINGS:
        response += "."
    if not response:
        response = EMPTY_FALLBACK
    return response
