"""
Prompt text and offline replies for the museum assistant.
"""

from __future__ import annotations


def system_prompt() -> str:
    return (
        "You are a professional museum assistant for a cultural heritage collection.\n"
        "Help visitors understand artifacts, their historical background and cultural meaning.\n"
        "Answer in a professional, friendly and easy to follow way.\n"
        "If a question is outside cultural heritage topics, say so politely and guide the user back."
    )


# Keyword -> canned reply, used when no API key is configured.
_OFFLINE_REPLIES: list[tuple[tuple[str, ...], str]] = [
    (
        ("hello", "hi", "你好"),
        "Hello! I am the museum assistant. Ask me about bronzes, ceramics, jade, "
        "calligraphy and painting, or how to plan a museum visit.",
    ),
    (
        ("bronze", "青铜"),
        "Bronze vessels are a hallmark of early Chinese civilisation, flourishing from the Xia and Shang "
        "periods. They served as ritual vessels, musical instruments and weapons.",
    ),
    (
        ("ceramic", "porcelain", "陶瓷"),
        "Chinese ceramics span from Neolithic pottery to the porcelain of the Song, Yuan, Ming and Qing "
        "dynasties, including Jingdezhen ware, tri-colour glazed ware and Longquan celadon.",
    ),
    (
        ("jade", "玉器"),
        "Jade symbolises purity and virtue in Chinese culture, from Hongshan and Liangzhu jades to the "
        "carvings of the Ming and Qing courts.",
    ),
    (
        ("calligraphy", "painting", "书画"),
        "Chinese calligraphy covers seal, clerical, regular, running and cursive scripts; painting "
        "traditions include figures, landscapes and birds-and-flowers.",
    ),
    (
        ("museum", "visit", "博物馆", "参观"),
        "When visiting a museum: read up on the exhibition first, allow plenty of time, look closely at "
        "details, follow the photography rules and listen to the guided commentary.",
    ),
    (
        ("help", "帮助"),
        "I can introduce artifact categories, explain historical background, suggest how to visit a "
        "museum and answer questions about the collection.",
    ),
]

_OFFLINE_DEFAULT = (
    "Thanks for your question! I focus on artifacts, history and museum topics. "
    "Try asking me to introduce bronze vessels or for tips on visiting a museum."
)


def offline_reply(message: str) -> str:
    lowered = (message or "").lower()
    for keywords, reply in _OFFLINE_REPLIES:
        if any(keyword in lowered for keyword in keywords):
            return reply
    return _OFFLINE_DEFAULT
