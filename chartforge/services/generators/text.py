"""
Word cloud generator
"""

import re
from typing import Dict, Sequence

from chartforge.config.settings import get_settings
from chartforge.models.schemas import ChartTemplate
from chartforge.services.colors import color_for
from chartforge.services.generators.common import ChartData
from chartforge.services.rows import Row, field_value, weight_of

WORD_PATTERN = re.compile(r"\b\w+\b")
MIN_WORD_LENGTH = 3
MIN_FONT_SIZE = 10
MAX_FONT_SIZE = 50
WORD_COLOR_CYCLE = 10


def word_weights(rows: Sequence[Row], text_field: str, value_field: str) -> Dict[str, float]:
    """Lower-cased words of three or more characters with their summed row weights"""
    weights: Dict[str, float] = {}
    for row in rows:
        text = field_value(row, text_field)
        if text is None:
            continue
        weight = weight_of(field_value(row, value_field)) if value_field else 1.0
        for word in WORD_PATTERN.findall(str(text).lower()):
            if len(word) >= MIN_WORD_LENGTH:
                weights[word] = weights.get(word, 0.0) + weight
    return weights


def build_wordcloud(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Heaviest words first, capped at the configured word limit.

    Font size scales linearly with weight against the heaviest word and
    never drops below 10.
    """
    text_field = template.text_axis or template.x_axis
    weights = word_weights(rows, text_field, template.value_axis)

    limit = get_settings().wordcloud_max_words
    ranked = sorted(weights.items(), key=lambda item: -item[1])[:limit]
    max_weight = ranked[0][1] if ranked else 0

    scheme = template.color_scheme
    words = []
    for index, (word, weight) in enumerate(ranked):
        size = max(MIN_FONT_SIZE, weight / max_weight * MAX_FONT_SIZE) if max_weight > 0 else MIN_FONT_SIZE
        words.append({
            "text": word,
            "value": weight,
            "size": size,
            "color": color_for(scheme, index % WORD_COLOR_CYCLE, 0.8),
        })

    dataset = {
        "label": text_field,
        "data": [word["value"] for word in words],
        "backgroundColor": [word["color"] for word in words],
        "borderColor": color_for(scheme, 0),
    }
    return {"labels": [word["text"] for word in words], "words": words, "datasets": [dataset]}
