from lyric_assistant.models.analysis import VOCAL_STYLES

# Used when the client sends no lyrics, so the model never gets an empty prompt.
DEFAULT_LYRICS = "快樂的時光總是過得特別快。"

ANALYSIS_PROMPT_TEMPLATE = """\
你是一位專業的音樂理論專家。你的首要任務是輸出嚴格的 JSON 格式。
**輸出規則：'情感' 欄位只允許使用中文描述，嚴禁出現任何英文翻譯或括號。**
JSON 必須包含以下所有欄位：
1. '情感'
2. 'BPM'
3. '和弦'
4. '語音風格'（限以下之一：
[{styles}])
請分析以下歌詞："{lyrics}"
"""


def resolve_lyrics(lyrics: str | None) -> str:
    """Return the lyrics to analyze, substituting DEFAULT_LYRICS when blank."""
    if lyrics is None or not lyrics.strip():
        return DEFAULT_LYRICS
    return lyrics


def build_analysis_prompt(lyrics: str) -> str:
    # Lyrics are interpolated verbatim; the template offers no injection defense.
    styles = ", ".join(f"'{s}'" for s in VOCAL_STYLES)
    return ANALYSIS_PROMPT_TEMPLATE.format(styles=styles, lyrics=lyrics)
