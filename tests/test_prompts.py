"""Tests for prompt building and song suggestion parsing."""

from __future__ import annotations

from postcraft.generation import prompts


class TestPromptBuilders:
    def test_daily_post_length_by_type(self):
        assert "100-150 words" in prompts.daily_post_prompt("funny", regular=False)
        assert "200-300 words" in prompts.daily_post_prompt("funny", regular=True)

    def test_reel_image_prompt_uses_excerpt(self):
        text = "a" * 200
        prompt = prompts.reel_image_prompt("sad", text)
        assert "a" * 150 in prompt
        assert "a" * 151 not in prompt
        assert "9:16" in prompt

    def test_story_image_prompt_excerpt(self):
        prompt = prompts.story_image_prompt("funny", "b" * 150)
        assert "b" * 100 in prompt
        assert "b" * 101 not in prompt

    def test_story_prompt_parts(self):
        plain = prompts.story_prompt("sad", narrated=False)
        assert "150-200 words" in plain
        assert "Song Suggestion" not in plain
        assert "Incorporate" not in plain

        full = prompts.story_prompt("sad", narrated=True, idea=" a lost kite ", song=True)
        assert "voice narration" in full
        assert 'Incorporate the following idea: "a lost kite".' in full
        assert full.endswith('"Song Suggestion: [Song Title] by [Artist Name]".')


class TestSplitSongSuggestion:
    def test_extracts_and_removes_line(self):
        story, song = prompts.split_song_suggestion(
            "The rain fell softly.\n\nSong Suggestion: Yesterday by The Beatles"
        )
        assert story == "The rain fell softly."
        assert song == "Yesterday by The Beatles"

    def test_case_insensitive_and_strips_emphasis(self):
        story, song = prompts.split_song_suggestion("Story.\nsong suggestion: *Hallelujah by Leonard Cohen*")
        assert song == "Hallelujah by Leonard Cohen"
        assert story == "Story."

    def test_absent(self):
        assert prompts.split_song_suggestion("Just a story.") == ("Just a story.", None)
