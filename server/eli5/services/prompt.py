from __future__ import annotations

from typing import Sequence

from ..schemas.cast import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES
from ..schemas.explain import ImagePart, ImageUrl, PromptPayload, TextPart

NO_CONTENT_MESSAGE = (
    "It looks like there isn't any text to explain! If you share a post with words or ideas, "
    "I can help make it simple and fun to understand. Just let me know!"
)

PERSONA_RULES = (
    'Use very simple words and short sentences',
    'Use analogies with things kids understand (toys, games, food, animals)',
    "Be friendly and fun, but don't be condescending",
    'Keep it concise (2-4 sentences max)',
    'If the post is already simple, just restate it in a friendly way',
    'If the post contains crypto/tech jargon, translate it to everyday concepts',
    "If there's a meme or joke in an image, explain what makes it funny",
    'Read and explain any text that appears in images',
    "Don't use emojis unless they add clarity",
    'Never say "Explain like I\'m 5" or reference the ELI5 concept',
)

PERSONA_INTRO = (
    'You are an expert at explaining complex topics in simple terms. Your job is to take a social '
    'media post (which may include text, images, or memes) and explain it as if talking to a 5-year-old.'
)


def language_instruction(language: str) -> str | None:
    if language not in SUPPORTED_LANGUAGES:
        raise ValueError(f'Unsupported language code: {language!r}')
    if language == DEFAULT_LANGUAGE:
        return None
    return f'Respond ONLY in {SUPPORTED_LANGUAGES[language]}. Do not use any English.'


def build_system_prompt(language: str) -> str:
    rules = list(PERSONA_RULES)
    directive = language_instruction(language)
    if directive:
        rules.append(directive)
    lines = [PERSONA_INTRO, '', 'Rules:', *[f'- {rule}' for rule in rules]]
    return '\n'.join(lines)


def _lead_text(text: str, has_text: bool, has_images: bool) -> str:
    if has_text and has_images:
        return f'Explain this post and the image(s) in simple terms:\n\nPost text: "{text}"'
    if has_text:
        return f'Explain this post in simple terms:\n\n"{text}"'
    return "Explain what's happening in this image in simple terms. If there's text in the image, explain what it means:"


def build_prompt(text: str | None, images: Sequence[str] | None, language: str = DEFAULT_LANGUAGE) -> PromptPayload | None:
    """Assemble the persona and user content for one generation call.

    Returns ``None`` when there is neither text nor an image to explain; the
    caller answers with ``NO_CONTENT_MESSAGE`` instead of calling the model.
    """
    system = build_system_prompt(language)
    text = text or ''
    has_text = bool(text.strip())
    has_images = bool(images)
    if not has_text and not has_images:
        return None

    content: list[TextPart | ImagePart] = [TextPart(text=_lead_text(text, has_text, has_images))]
    for url in images or ():
        content.append(ImagePart(image_url=ImageUrl(url=url)))
    return PromptPayload(system=system, content=content)
