"""Prompt templates for each generation workflow."""

from __future__ import annotations

import re

CHAT_PROMPT = (
    'The user said: "{message}". Respond in the style of a helpful social media '
    "assistant, suggesting creative post or story ideas, or offering to help with "
    "image generation based on their query. Keep your response concise."
)

DAILY_POST_STORY_REEL_PROMPT = (
    "Generate a short {theme} themed story or inspirational message suitable for a "
    "vertical social media reel/story. Keep it concise, around 100-150 words."
)

DAILY_POST_REGULAR_PROMPT = (
    "Generate a detailed {theme} themed story or message suitable for a regular "
    "social media post. Make it engaging and provide a clear narrative or insightful "
    "reflection, around 200-300 words."
)

REEL_IMAGE_PROMPT = (
    "A vertical 9:16 aspect ratio social media story background image. "
    "The theme is {theme}. The scene description is: {excerpt}. "
    "High quality, photorealistic or stylized art."
)

STORY_PROMPT = "Generate a creative and engaging story with a {theme} theme. {length}"
STORY_LENGTH_NARRATED = (
    "Keep the story engaging and detailed, around 200-300 words for a voice narration."
)
STORY_LENGTH_READ = "Keep the story vivid but compact, around 150-200 words."
STORY_IDEA = ' Incorporate the following idea: "{idea}".'
STORY_SONG_DIRECTIVE = (
    " Also, suggest one song title and artist that would fit the mood of this story. "
    'Format the song suggestion clearly as: "Song Suggestion: [Song Title] by [Artist Name]".'
)

STORY_IMAGE_PROMPT = (
    "A vertical 9:16 aspect ratio social media story background image. "
    "Theme: {theme}. Context: {excerpt}. High quality, moody, atmospheric art."
)

REEL_EXCERPT_CHARS = 150
STORY_EXCERPT_CHARS = 100

SONG_SUGGESTION_RE = re.compile(r"Song Suggestion: (.+)", re.IGNORECASE)


def chat_prompt(message: str) -> str:
    return CHAT_PROMPT.format(message=message)


def daily_post_prompt(theme: str, *, regular: bool) -> str:
    template = DAILY_POST_REGULAR_PROMPT if regular else DAILY_POST_STORY_REEL_PROMPT
    return template.format(theme=theme)


def reel_image_prompt(theme: str, text: str) -> str:
    return REEL_IMAGE_PROMPT.format(theme=theme, excerpt=text[:REEL_EXCERPT_CHARS])


def story_prompt(theme: str, *, narrated: bool, idea: str = "", song: bool = False) -> str:
    prompt = STORY_PROMPT.format(
        theme=theme,
        length=STORY_LENGTH_NARRATED if narrated else STORY_LENGTH_READ,
    )
    if idea.strip():
        prompt += STORY_IDEA.format(idea=idea.strip())
    if song:
        prompt += STORY_SONG_DIRECTIVE
    return prompt


def story_image_prompt(theme: str, text: str) -> str:
    return STORY_IMAGE_PROMPT.format(theme=theme, excerpt=text[:STORY_EXCERPT_CHARS])


def split_song_suggestion(text: str) -> tuple[str, str | None]:
    """
    Pull the "Song Suggestion: X by Y" line out of generated story text.

    Returns (story_without_song, song) with song None when absent.
    """
    match = SONG_SUGGESTION_RE.search(text)
    if not match:
        return text, None

    # models like to wrap the line in markdown emphasis or quotes
    song = match.group(1).strip().strip("*_\"' ")
    if not song:
        return text, None

    story = SONG_SUGGESTION_RE.sub("", text, count=1).strip()
    return story, song
