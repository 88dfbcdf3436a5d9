HEADLINE_WORD_LIMIT = 50


def count_words(text: str | None) -> int:
    return len((text or "").split())


def headline_within_limit(headline: str | None, limit: int = HEADLINE_WORD_LIMIT) -> bool:
    return count_words(headline) <= limit
